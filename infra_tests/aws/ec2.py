"""EC2 / VPC lookups."""

from typing import Any, Dict, List, Optional

from infra_tests.aws.errors import ResourceNotFoundError


def get_vpc(client, vpc_id: str) -> Dict[str, Any]:
    """
    Describe a single VPC by id.

    Args:
        client: boto3 EC2 client
        vpc_id: VPC identifier

    Returns:
        VPC descriptor as returned by describe_vpcs
    """
    vpcs = client.describe_vpcs(VpcIds=[vpc_id])['Vpcs']
    if len(vpcs) != 1:
        raise ResourceNotFoundError('VPC', vpc_id, f"expected exactly one match, got {len(vpcs)}")
    return vpcs[0]


def get_subnets(client, subnet_ids: List[str]) -> List[Dict[str, Any]]:
    """Describe the given subnets; all of them must exist."""
    if not subnet_ids:
        return []
    subnets = client.describe_subnets(SubnetIds=list(subnet_ids))['Subnets']
    found = {s['SubnetId'] for s in subnets}
    missing = [s for s in subnet_ids if s not in found]
    if missing:
        raise ResourceNotFoundError('Subnet', ', '.join(missing))
    return subnets


def tags_to_map(tags: Optional[List[Dict[str, str]]]) -> Dict[str, str]:
    """Flatten an AWS Key/Value tag list, skipping incomplete entries."""
    tag_map = {}
    for tag in tags or []:
        key = tag.get('Key')
        value = tag.get('Value')
        if key is not None and value is not None:
            tag_map[key] = value
    return tag_map
