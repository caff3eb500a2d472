"""Per-test provisioning: isolate the module, apply it, always destroy it."""

import logging
import shutil
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional

from infra_tests.logging import Logger, NullLogger
from infra_tests.runtime.options import TerraformOptions
from infra_tests.runtime.terraform import init_and_apply, destroy

if TYPE_CHECKING:
    from infra_tests.cases import Scenario
    from infra_tests.config import Settings

logger = logging.getLogger(__name__)

_IGNORED = shutil.ignore_patterns('.terraform', '*.tfstate', '*.tfstate.backup', '*.tfplan', 'crash.log')


def copy_module_to_temp(module_dir: str, root: Optional[str] = None) -> Path:
    """
    Copy a Terraform module into a fresh temporary directory.

    Local state and provider caches are left behind, so every copy starts
    from an empty state and parallel cases never share one.

    Args:
        module_dir: Module to copy
        root: Parent for the temporary directory (system default if None)

    Returns:
        Path of the copied module
    """
    source = Path(module_dir)
    if not source.is_dir():
        raise FileNotFoundError(f"Terraform module not found: {source}")

    parent = Path(tempfile.mkdtemp(prefix=f"{source.name}-", dir=root))
    target = parent / source.name
    shutil.copytree(source, target, ignore=_IGNORED)
    logger.debug(f"Copied {source} to {target}")
    return target


@contextmanager
def provisioned(
    options: TerraformOptions,
    events: Optional[Logger] = None,
    cleanup: bool = True,
    case: Optional[str] = None,
) -> Iterator[TerraformOptions]:
    """
    Apply a module for the duration of a with-block.

    Destroy runs on exit whether apply, the body or nothing failed. A
    destroy failure is re-raised only when nothing else is propagating.

    Args:
        options: Options of the module to provision
        events: Event logger for lifecycle events
        cleanup: Destroy on exit (False keeps resources for debugging)
        case: Case name used in events (defaults to the module directory name)

    Yields:
        The options, for reading outputs
    """
    events = events or NullLogger()
    case = case or Path(options.terraform_dir).name
    events.info("case.started", data={"case": case, "module": Path(options.terraform_dir).name})

    passed = False
    try:
        init_and_apply(options, events=events)
        yield options
        passed = True
    finally:
        cleanup_error = None
        if cleanup:
            try:
                destroy(options, events=events)
            except Exception as e:
                events.error("cleanup.failed", f"Destroy failed for {case}", {"error": str(e)})
                cleanup_error = e
        else:
            events.warning("cleanup.skipped", f"Keeping resources of {case} in {options.terraform_dir}")

        events.info("case.completed", data={"case": case, "passed": passed and cleanup_error is None})
        if passed and cleanup_error is not None:
            raise cleanup_error


@contextmanager
def provision_scenario(
    scenario: "Scenario",
    settings: "Settings",
    events: Optional[Logger] = None,
    resource_name: Optional[str] = None,
    workdir: Optional[str] = None,
) -> Iterator[TerraformOptions]:
    """
    Provision a scenario in a private copy of its module.

    Copies normally go below ``workdir`` and disappear with it. When the
    settings keep resources, the copy goes to the system temp directory
    instead, so the state needed for a later ``terraform destroy`` survives
    the test run.

    Args:
        scenario: Scenario to provision
        settings: Suite settings
        events: Event logger for lifecycle events
        resource_name: Name to provision under (generated when omitted)
        workdir: Parent directory for the module copy

    Yields:
        The applied options
    """
    keep = settings.keep_resources
    module_copy = copy_module_to_temp(
        str(settings.module_dir(scenario.module)),
        root=None if keep else workdir,
    )
    options = scenario.options(settings, resource_name, terraform_dir=str(module_copy))

    with provisioned(options, events=events, cleanup=not keep, case=scenario.name) as applied:
        yield applied
