"""S3 bucket lookups."""

from typing import Any, Dict, Optional

from botocore.exceptions import ClientError

from infra_tests.aws.ec2 import tags_to_map
from infra_tests.aws.errors import ResourceNotFoundError


def _error_code(error: ClientError) -> str:
    return error.response.get('Error', {}).get('Code', '')


def get_bucket(client, bucket_name: str) -> Dict[str, Any]:
    """Find a bucket by name in the account's bucket list."""
    for bucket in client.list_buckets().get('Buckets', []):
        if bucket['Name'] == bucket_name:
            return bucket

    raise ResourceNotFoundError('Bucket', bucket_name)


def get_bucket_versioning(client, bucket_name: str) -> str:
    """Versioning status; 'Disabled' when it was never configured."""
    response = client.get_bucket_versioning(Bucket=bucket_name)
    return response.get('Status') or 'Disabled'


def get_bucket_encryption(client, bucket_name: str) -> Optional[Dict[str, Any]]:
    """Server-side encryption configuration, or None when the bucket has none."""
    try:
        response = client.get_bucket_encryption(Bucket=bucket_name)
    except ClientError as e:
        if _error_code(e) == 'ServerSideEncryptionConfigurationNotFoundError':
            return None
        raise
    return response.get('ServerSideEncryptionConfiguration')


def get_bucket_lifecycle(client, bucket_name: str) -> Optional[Dict[str, Any]]:
    """Lifecycle configuration, or None when the bucket has none."""
    try:
        response = client.get_bucket_lifecycle_configuration(Bucket=bucket_name)
    except ClientError as e:
        if _error_code(e) == 'NoSuchLifecycleConfiguration':
            return None
        raise
    return {'Rules': response.get('Rules', [])}


def get_bucket_public_access_block(client, bucket_name: str) -> Dict[str, bool]:
    """Public access block flags of a bucket."""
    response = client.get_public_access_block(Bucket=bucket_name)
    return response['PublicAccessBlockConfiguration']


def get_bucket_tags(client, bucket_name: str) -> Dict[str, str]:
    """Bucket tag set as a mapping; empty when the bucket is untagged."""
    try:
        response = client.get_bucket_tagging(Bucket=bucket_name)
    except ClientError as e:
        if _error_code(e) == 'NoSuchTagSet':
            return {}
        raise
    return tags_to_map(response.get('TagSet'))
