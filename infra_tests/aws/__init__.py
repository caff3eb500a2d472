"""boto3 helpers that read back the state of provisioned resources."""

from .errors import ResourceNotFoundError
from .session import create_session, create_client
from . import ec2, eks, rds, s3

__all__ = [
    'ResourceNotFoundError',
    'create_session',
    'create_client',
    'ec2',
    'eks',
    'rds',
    's3',
]
