"""Infrastructure acceptance tests: provision with Terraform, verify with boto3."""

__version__ = "0.1.0"

from . import aws
from . import cases
from . import runtime

__all__ = [
    "aws",
    "cases",
    "runtime",
]
