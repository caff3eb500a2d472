"""boto3 session and client construction."""

from typing import Any, Optional

import boto3


def create_session(region: str) -> boto3.Session:
    """Create a boto3 session pinned to a region."""
    return boto3.Session(region_name=region)


def create_client(service: str, region: str, endpoint_url: Optional[str] = None) -> Any:
    """
    Create a boto3 client for a service.

    Args:
        service: Service name (e.g. 'ec2', 'eks', 'rds', 's3')
        region: AWS region
        endpoint_url: Optional custom endpoint, normally ``Settings.endpoint_url``

    Returns:
        boto3 client
    """
    client_kwargs = {}
    if endpoint_url:
        client_kwargs['endpoint_url'] = endpoint_url

    return create_session(region).client(service, **client_kwargs)
