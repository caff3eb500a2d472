"""Validate command for checking the modules without provisioning them."""

import shutil
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from infra_tests.cases import MODULES, list_scenarios
from infra_tests.config import Settings
from infra_tests.harness import copy_module_to_temp
from infra_tests.logging import Logger, create_logger
from infra_tests.runtime import (
    TerraformCommandError,
    TerraformOptions,
    TerraformRuntime,
    with_default_retryable_errors,
)

console = Console()

PASS = "[green]ok[/green]"
FAIL = "[red]failed[/red]"


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return ""


def _check_module(
    module: str,
    workdir: str,
    settings: Settings,
    events: Logger,
    plan: bool,
    table: Table,
) -> bool:
    """
    Init and validate one module copy, then optionally plan its scenarios.

    Returns:
        True when every check passed
    """
    options = with_default_retryable_errors(TerraformOptions(
        terraform_dir=workdir,
        max_retries=settings.max_retries,
        time_between_retries=settings.time_between_retries,
        terraform_binary=settings.terraform_binary,
        timeout=settings.command_timeout,
    ))
    runtime = TerraformRuntime(options, events=events)

    try:
        runtime.init()
    except TerraformCommandError as e:
        table.add_row(module, "init", FAIL, _first_line(e.stderr or str(e)))
        return False

    result = runtime.validate()
    if not result['success']:
        errors = [d.get('summary', '') for d in result['diagnostics'] if d.get('severity') == 'error']
        table.add_row(module, "validate", FAIL, "; ".join(errors) or _first_line(result['stderr']))
        return False
    table.add_row(module, "validate", PASS, "")

    if not plan:
        return True

    passed = True
    for scenario in list_scenarios(module):
        scenario_runtime = TerraformRuntime(scenario.options(settings, terraform_dir=workdir), events=events)
        try:
            scenario_runtime.plan()
        except TerraformCommandError as e:
            passed = False
            table.add_row(scenario.name, "plan", FAIL, _first_line(e.stderr or str(e)))
        else:
            table.add_row(scenario.name, "plan", PASS, scenario.region_for(settings))
    return passed


def validate_command(
    module: Optional[str] = typer.Option(None, "--module", "-m", help="Only validate this module"),
    plan: bool = typer.Option(
        False,
        "--plan",
        help="Also plan every scenario of the module (needs AWS credentials)"
    ),
):
    """
    Validate the Terraform modules without creating any resources.

    Each module is checked in a throwaway copy, so no .terraform directory
    or state is left in the source tree.
    """
    if module and module not in MODULES:
        typer.echo(f"Error: unknown module {module} (choose from {', '.join(MODULES)})", err=True)
        raise typer.Exit(code=1)

    settings = Settings.from_env()
    events = create_logger(settings)

    table = Table(title="Module checks")
    table.add_column("Target", style="cyan")
    table.add_column("Check")
    table.add_column("Result")
    table.add_column("Detail", style="dim")

    all_passed = True
    for name in [module] if module else MODULES:
        workdir = copy_module_to_temp(str(settings.module_dir(name)))
        try:
            all_passed = _check_module(name, str(workdir), settings, events, plan, table) and all_passed
        finally:
            shutil.rmtree(workdir.parent, ignore_errors=True)

    console.print(table)
    if not all_passed:
        raise typer.Exit(code=1)
