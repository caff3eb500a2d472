"""EKS cluster and node group lookups."""

from typing import Any, Dict, List

from infra_tests.aws.errors import ResourceNotFoundError


def get_cluster(client, cluster_name: str) -> Dict[str, Any]:
    """Describe an EKS cluster by name."""
    try:
        cluster = client.describe_cluster(name=cluster_name).get('cluster')
    except client.exceptions.ResourceNotFoundException as e:
        raise ResourceNotFoundError('EKS cluster', cluster_name, str(e)) from e
    if not cluster:
        raise ResourceNotFoundError('EKS cluster', cluster_name)
    return cluster


def get_node_group(client, cluster_name: str, node_group_name: str) -> Dict[str, Any]:
    """Describe a managed node group of a cluster."""
    try:
        response = client.describe_nodegroup(clusterName=cluster_name, nodegroupName=node_group_name)
    except client.exceptions.ResourceNotFoundException as e:
        raise ResourceNotFoundError('EKS node group', f"{cluster_name}/{node_group_name}", str(e)) from e
    node_group = response.get('nodegroup')
    if not node_group:
        raise ResourceNotFoundError('EKS node group', f"{cluster_name}/{node_group_name}")
    return node_group


def enabled_log_types(cluster: Dict[str, Any]) -> List[str]:
    """Control-plane log types that are switched on for a cluster."""
    types = []
    for setup in cluster.get('logging', {}).get('clusterLogging', []):
        if setup.get('enabled'):
            types.extend(setup.get('types', []))
    return types
