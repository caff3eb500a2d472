"""CLI command for running the live acceptance suite."""

import os
from pathlib import Path
from typing import Optional

import pytest
import typer

from infra_tests.cases import MODULES
from infra_tests.config import Settings
from infra_tests.logging import create_logger

DEFAULT_TESTS_DIR = Path(__file__).resolve().parent.parent.parent / "tests" / "acceptance"


def build_pytest_args(
    tests_dir: Path,
    module: Optional[str] = None,
    keyword: Optional[str] = None,
    workers: Optional[int] = None,
    verbose: bool = False,
):
    """Assemble the pytest argument list for a run."""
    target = tests_dir / f"test_{module}.py" if module else tests_dir
    args = [str(target), "-m", "live", "--live"]
    if keyword:
        args.extend(["-k", keyword])
    if workers:
        args.extend(["-n", str(workers)])
    if verbose:
        args.append("-v")
    return args


def run_command(
    module: Optional[str] = typer.Option(
        None,
        "--module", "-m",
        help="Only run the tests of one module (vpc, eks, rds, s3)"
    ),
    keyword: Optional[str] = typer.Option(
        None,
        "-k",
        help="pytest keyword expression selecting tests"
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers", "-n",
        help="Run cases in parallel with this many pytest-xdist workers"
    ),
    keep: bool = typer.Option(
        False,
        "--keep",
        help="Don't destroy infrastructure after each case"
    ),
    log_file: Optional[str] = typer.Option(
        None,
        "--log-file",
        help="Write lifecycle events as JSON lines to this file"
    ),
    tests_dir: Path = typer.Option(
        DEFAULT_TESTS_DIR,
        "--tests-dir",
        help="Directory holding the acceptance tests"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose pytest output"),
):
    """
    Run the acceptance suite against real AWS infrastructure.

    Every case provisions its own copy of a Terraform module, checks the
    live resources and destroys them again.

    Examples:

        # Everything, four cases at a time
        infra-tests run -n 4

        # Only the S3 cases
        infra-tests run --module s3

        # One case, keeping the resources for inspection
        infra-tests run -k versioning --keep
    """
    if module and module not in MODULES:
        typer.echo(f"Error: unknown module {module} (choose from {', '.join(MODULES)})", err=True)
        raise typer.Exit(code=1)

    if not tests_dir.is_dir():
        typer.echo(f"Error: tests directory not found: {tests_dir}", err=True)
        raise typer.Exit(code=1)

    os.environ["INFRA_TESTS_LIVE"] = "1"
    if keep:
        os.environ["INFRA_TESTS_KEEP"] = "1"
    if log_file:
        os.environ["INFRA_TESTS_LOG_FILE"] = log_file

    args = build_pytest_args(tests_dir, module=module, keyword=keyword, workers=workers, verbose=verbose)
    events = create_logger(Settings.from_env())
    events.info("run.started", f"pytest {' '.join(args)}", {"module": module or "all"})

    exit_code = int(pytest.main(args))

    outcome = "passed" if exit_code == 0 else f"failed (pytest exit code {exit_code})"
    events.info("run.completed", f"Acceptance run {outcome}", {"exit_code": exit_code})
    raise typer.Exit(code=exit_code)
