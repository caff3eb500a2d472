"""Command-line interface for infra-tests."""

import typer

from infra_tests.cli.list import list_command
from infra_tests.cli.run import run_command
from infra_tests.cli.outputs import outputs_command
from infra_tests.cli.validate import validate_command

app = typer.Typer(help="Infrastructure acceptance tests for the VPC, EKS, RDS and S3 modules")

app.command(name="list")(list_command)
app.command(name="run")(run_command)
app.command(name="outputs")(outputs_command)
app.command(name="validate")(validate_command)


def main():
    """Main CLI entry point."""
    app()


__all__ = ["app", "main"]
