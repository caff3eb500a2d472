"""List command for showing the acceptance scenarios."""

from typing import Optional
import typer
from rich.console import Console
from rich.table import Table

from infra_tests.cases import list_scenarios, MODULES
from infra_tests.config import Settings

console = Console()


def list_command(
    module: Optional[str] = typer.Option(None, "--module", "-m", help="Only scenarios for this module"),
    show_vars: bool = typer.Option(False, "--vars", help="Show the configuration map of each scenario"),
):
    """List acceptance scenarios."""
    if module and module not in MODULES:
        typer.echo(f"Error: unknown module {module} (choose from {', '.join(MODULES)})", err=True)
        raise typer.Exit(code=1)

    settings = Settings.from_env()
    scenarios = list_scenarios(module)

    table = Table(title=f"{len(scenarios)} scenarios")
    table.add_column("Scenario", style="cyan")
    table.add_column("Module", style="yellow")
    table.add_column("Region")
    table.add_column("Description")
    if show_vars:
        table.add_column("Vars", style="dim")

    for scenario in scenarios:
        region = scenario.region_for(settings)
        row = [scenario.name, scenario.module, region, scenario.description]
        if show_vars:
            variables = scenario.build_vars(f"{scenario.name_prefix}-<id>", region)
            row.append(", ".join(f"{k}={v}" for k, v in variables.items()))
        table.add_row(*row)

    console.print(table)
