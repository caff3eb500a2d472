"""Configuration maps for every acceptance test case."""

from typing import Dict, List, Optional

from infra_tests.cases.schema import Scenario, availability_zones

TEST_TAGS = {
    "Project": "Infrastructure-Test",
    "Owner": "DevOps-Team",
}

EKS_VERSION = "1.28"
EKS_LOG_TYPES = ["api", "audit", "authenticator", "controllerManager", "scheduler"]

DB_PASSWORD = "TestPassword123!"


def node_group_name(cluster_name: str) -> str:
    """Node group name the node group scenario derives from its cluster."""
    return f"{cluster_name}-ng"


def _eks_base(cluster_name: str, region: str) -> Dict:
    return {
        "cluster_name": cluster_name,
        "cluster_version": EKS_VERSION,
        "environment": "test",
        "availability_zones": availability_zones(region),
    }


def _rds_base(instance_id: str, environment: str, instance_class: str = "db.t3.micro") -> Dict:
    return {
        "db_instance_identifier": instance_id,
        "db_name": "testdb",
        "db_username": "admin",
        "db_password": DB_PASSWORD,
        "instance_class": instance_class,
        "allocated_storage": 20,
        "engine": "postgres",
        "engine_version": "14.7",
        "environment": environment,
    }


_SCENARIOS = [
    # VPC
    Scenario(
        name="vpc_default",
        module="vpc",
        description="VPC with public/private subnets, IGW and NAT in two zones",
        name_prefix="test-vpc",
        vars_factory=lambda name, region: {
            "vpc_cidr": "10.0.0.0/16",
            "environment": "test",
            "availability_zones": availability_zones(region),
        },
    ),
    Scenario(
        name="vpc_custom_cidr",
        module="vpc",
        description="VPC with a non-default CIDR in us-west-2",
        region="us-west-2",
        name_prefix="test-vpc-cidr",
        vars_factory=lambda name, region: {
            "vpc_cidr": "172.16.0.0/16",
            "environment": "test-custom",
            "availability_zones": availability_zones(region),
        },
    ),
    Scenario(
        name="vpc_tags",
        module="vpc",
        description="VPC carries environment and custom tags",
        name_prefix="test-vpc-tags",
        tags=["tags"],
        vars_factory=lambda name, region: {
            "vpc_cidr": "10.1.0.0/16",
            "environment": "test-tags",
            "availability_zones": availability_zones(region),
            "tags": dict(TEST_TAGS),
        },
    ),
    # EKS
    Scenario(
        name="eks_cluster",
        module="eks",
        description="EKS cluster reaches ACTIVE on the requested version",
        name_prefix="test-eks",
        vars_factory=_eks_base,
    ),
    Scenario(
        name="eks_endpoint_access",
        module="eks",
        description="EKS API endpoint reachable publicly and privately",
        name_prefix="test-eks-access",
        vars_factory=lambda name, region: dict(
            _eks_base(name, region),
            endpoint_public_access=True,
            endpoint_private_access=True,
            public_access_cidrs=["10.0.0.0/8"],
        ),
    ),
    Scenario(
        name="eks_node_group",
        module="eks",
        description="Managed node group with 1..3 nodes, 2 desired",
        name_prefix="test-eks-ng",
        vars_factory=lambda name, region: dict(
            _eks_base(name, region),
            node_group_name=node_group_name(name),
            node_instance_types=["t3.medium"],
            desired_size=2,
            min_size=1,
            max_size=3,
        ),
    ),
    Scenario(
        name="eks_logging",
        module="eks",
        description="All control-plane log types shipped to CloudWatch",
        name_prefix="test-eks-logging",
        tags=["logging"],
        vars_factory=lambda name, region: dict(_eks_base(name, region), enabled_log_types=list(EKS_LOG_TYPES)),
    ),
    Scenario(
        name="eks_encryption",
        module="eks",
        description="Kubernetes secrets encrypted with a KMS key",
        name_prefix="test-eks-encryption",
        tags=["encryption"],
        vars_factory=lambda name, region: dict(_eks_base(name, region), enable_encryption=True),
    ),
    Scenario(
        name="eks_tags",
        module="eks",
        description="EKS cluster carries environment and custom tags",
        name_prefix="test-eks-tags",
        tags=["tags"],
        vars_factory=lambda name, region: dict(_eks_base(name, region), tags=dict(TEST_TAGS)),
    ),
    # RDS
    Scenario(
        name="rds_instance",
        module="rds",
        description="Single-AZ postgres instance",
        name_prefix="test-db",
        vars_factory=lambda name, region: _rds_base(name, "test"),
    ),
    Scenario(
        name="rds_multi_az",
        module="rds",
        description="Multi-AZ postgres instance",
        name_prefix="test-db-multiaz",
        vars_factory=lambda name, region: dict(
            _rds_base(name, "test-multiaz", instance_class="db.t3.small"),
            multi_az=True,
        ),
    ),
    Scenario(
        name="rds_backup_retention",
        module="rds",
        description="MySQL instance with a 7 day backup retention",
        name_prefix="test-db-backup",
        vars_factory=lambda name, region: dict(
            _rds_base(name, "test-backup"),
            engine="mysql",
            engine_version="8.0.35",
            backup_retention_period=7,
            backup_window="03:00-04:00",
        ),
    ),
    Scenario(
        name="rds_encryption",
        module="rds",
        description="Postgres instance with encrypted storage",
        name_prefix="test-db-encrypted",
        tags=["encryption"],
        vars_factory=lambda name, region: dict(_rds_base(name, "test-encrypted"), storage_encrypted=True),
    ),
    # S3
    Scenario(
        name="s3_bucket",
        module="s3",
        description="Plain bucket",
        name_prefix="test-bucket",
        vars_factory=lambda name, region: {"bucket_name": name, "environment": "test"},
    ),
    Scenario(
        name="s3_versioning",
        module="s3",
        description="Bucket with versioning enabled",
        name_prefix="test-bucket-versioning",
        vars_factory=lambda name, region: {"bucket_name": name, "enable_versioning": True, "environment": "test"},
    ),
    Scenario(
        name="s3_encryption",
        module="s3",
        description="Bucket with default server-side encryption",
        name_prefix="test-bucket-encryption",
        tags=["encryption"],
        vars_factory=lambda name, region: {"bucket_name": name, "enable_encryption": True, "environment": "test"},
    ),
    Scenario(
        name="s3_lifecycle",
        module="s3",
        description="Bucket transitions objects after 30 days and expires them after 90",
        name_prefix="test-bucket-lifecycle",
        vars_factory=lambda name, region: {
            "bucket_name": name,
            "enable_lifecycle_rules": True,
            "transition_days": 30,
            "expiration_days": 90,
            "environment": "test",
        },
    ),
    Scenario(
        name="s3_public_access_block",
        module="s3",
        description="Bucket blocks every form of public access",
        name_prefix="test-bucket-public-block",
        vars_factory=lambda name, region: {
            "bucket_name": name,
            "block_public_acls": True,
            "block_public_policy": True,
            "ignore_public_acls": True,
            "restrict_public_buckets": True,
            "environment": "test",
        },
    ),
    Scenario(
        name="s3_tags",
        module="s3",
        description="Bucket carries environment and custom tags",
        name_prefix="test-bucket-tags",
        tags=["tags"],
        vars_factory=lambda name, region: {"bucket_name": name, "environment": "test", "tags": dict(TEST_TAGS)},
    ),
]

SCENARIOS: Dict[str, Scenario] = {scenario.name: scenario for scenario in _SCENARIOS}

MODULES = sorted({scenario.module for scenario in _SCENARIOS})


def get_scenario(name: str) -> Scenario:
    """Look up a scenario by name."""
    try:
        return SCENARIOS[name]
    except KeyError:
        raise KeyError(f"Unknown scenario: {name}") from None


def list_scenarios(module: Optional[str] = None) -> List[Scenario]:
    """All scenarios, optionally restricted to one module, in definition order."""
    return [s for s in _SCENARIOS if module is None or s.module == module]
