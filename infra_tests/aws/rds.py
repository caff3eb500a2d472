"""RDS instance lookups."""

from typing import Any, Dict

from infra_tests.aws.errors import ResourceNotFoundError


def get_db_instance(client, instance_id: str) -> Dict[str, Any]:
    """
    Describe a DB instance by identifier.

    Args:
        client: boto3 RDS client
        instance_id: DB instance identifier

    Returns:
        DB instance descriptor
    """
    try:
        instances = client.describe_db_instances(DBInstanceIdentifier=instance_id)['DBInstances']
    except client.exceptions.DBInstanceNotFoundFault as e:
        raise ResourceNotFoundError('DB instance', instance_id, str(e)) from e

    if len(instances) != 1:
        raise ResourceNotFoundError('DB instance', instance_id, f"expected exactly one match, got {len(instances)}")
    return instances[0]
