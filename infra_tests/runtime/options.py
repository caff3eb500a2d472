"""Options describing one Terraform module invocation."""

from dataclasses import dataclass, field, replace
from typing import Dict, Any, Optional

# Transient failures worth re-running a command for, keyed by regex.
DEFAULT_RETRYABLE_ERRORS: Dict[str, str] = {
    r".*read: connection reset by peer.*": "Failed to reach a remote endpoint.",
    r".*transport is closing.*": "Failed to reach the Kubernetes API.",
    r".*unable to verify signature.*": "Failed to retrieve plugin due to transient network error.",
    r".*unable to verify checksum.*": "Failed to retrieve plugin due to transient network error.",
    r".*no provider exists with the given name.*": "Failed to retrieve plugin due to transient network error.",
    r".*registry service is unreachable.*": "Failed to retrieve plugin due to transient network error.",
    r".*Error installing provider.*": "Failed to retrieve plugin due to transient network error.",
    r".*Failed to query available provider packages.*": "Failed to retrieve plugin due to transient network error.",
    r".*timeout while waiting for plugin to start.*": "Failed to retrieve plugin due to transient network error.",
    r".*timed out waiting for server handshake.*": "Failed to retrieve plugin due to transient network error.",
    r"could not query provider registry for": "Failed to retrieve plugin due to transient network error.",
    r".*Provider produced inconsistent result after apply.*": "Provider eventual consistency error.",
}

DEFAULT_MAX_RETRIES = 3
DEFAULT_TIME_BETWEEN_RETRIES = 5.0


@dataclass
class TerraformOptions:
    """Everything needed to run terraform against one module."""
    terraform_dir: str
    vars: Dict[str, Any] = field(default_factory=dict)
    env_vars: Dict[str, str] = field(default_factory=dict)
    retryable_errors: Dict[str, str] = field(default_factory=dict)
    max_retries: Optional[int] = None
    time_between_retries: Optional[float] = None
    no_color: bool = True
    terraform_binary: str = "terraform"
    timeout: int = 3600

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "terraform_dir": self.terraform_dir,
            "vars": self.vars,
            "env_vars": self.env_vars,
            "retryable_errors": self.retryable_errors,
            "max_retries": self.max_retries,
            "time_between_retries": self.time_between_retries,
            "no_color": self.no_color,
            "terraform_binary": self.terraform_binary,
            "timeout": self.timeout,
        }


def with_default_retryable_errors(options: TerraformOptions) -> TerraformOptions:
    """
    Return a copy of the options with the default retryable errors merged in.

    Entries already present on the options win over the defaults. Retry
    count and sleep are only filled in when unset.

    Args:
        options: Options to extend

    Returns:
        New TerraformOptions instance
    """
    retryable = dict(DEFAULT_RETRYABLE_ERRORS)
    retryable.update(options.retryable_errors)

    return replace(
        options,
        vars=dict(options.vars),
        env_vars=dict(options.env_vars),
        retryable_errors=retryable,
        max_retries=DEFAULT_MAX_RETRIES if options.max_retries is None else options.max_retries,
        time_between_retries=(
            DEFAULT_TIME_BETWEEN_RETRIES
            if options.time_between_retries is None
            else options.time_between_retries
        ),
    )
