"""Runtime execution module for Terraform operations."""

from .options import TerraformOptions, with_default_retryable_errors, DEFAULT_RETRYABLE_ERRORS
from .terraform import (
    TerraformRuntime,
    TerraformCommandError,
    init_and_apply,
    destroy,
    output,
    output_list,
    output_map,
)

__all__ = [
    'TerraformOptions',
    'with_default_retryable_errors',
    'DEFAULT_RETRYABLE_ERRORS',
    'TerraformRuntime',
    'TerraformCommandError',
    'init_and_apply',
    'destroy',
    'output',
    'output_list',
    'output_map',
]
