"""Outputs command for inspecting an applied module."""

import json
from pathlib import Path

import typer
from rich.console import Console

from infra_tests.config import Settings
from infra_tests.runtime import TerraformOptions, TerraformRuntime, TerraformCommandError

console = Console()


def outputs_command(
    terraform_dir: Path = typer.Argument(..., help="Directory of an applied Terraform module"),
    raw: bool = typer.Option(False, "--json", help="Print plain JSON"),
):
    """Show the outputs of an applied module."""
    settings = Settings.from_env()
    options = TerraformOptions(
        terraform_dir=str(terraform_dir),
        terraform_binary=settings.terraform_binary,
        timeout=settings.command_timeout,
    )

    try:
        values = TerraformRuntime(options).output_all()
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    except TerraformCommandError as e:
        typer.echo(f"Error reading outputs: {e}", err=True)
        raise typer.Exit(code=1)

    if raw:
        typer.echo(json.dumps(values, indent=2))
        return

    if not values:
        console.print("[yellow]No outputs[/yellow]")
        return

    for name, value in values.items():
        console.print(f"[cyan]{name}[/cyan] = {json.dumps(value)}")
