"""Scenario schema: one acceptance test case's configuration."""

import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from infra_tests.runtime.options import TerraformOptions, with_default_retryable_errors

if TYPE_CHECKING:
    from infra_tests.config import Settings

DEFAULT_REGION = "us-east-1"


def unique_name(prefix: str) -> str:
    """Name resources per run: prefix, unix time and a short random suffix."""
    return f"{prefix}-{int(time.time())}-{uuid.uuid4().hex[:6]}"


def availability_zones(region: str) -> List[str]:
    """The first two availability zones of a region."""
    return [f"{region}a", f"{region}b"]


@dataclass
class Scenario:
    """
    Configuration map and target module for one test case.

    ``vars_factory`` receives the resource name and the region the case runs
    in. ``region`` pins a case to one region; when unset the case follows
    the suite's configured region.
    """
    name: str
    module: str
    description: str
    vars_factory: Callable[[str, str], Dict[str, Any]]
    region: Optional[str] = None
    name_prefix: str = "test"
    tags: List[str] = field(default_factory=list)

    def new_name(self) -> str:
        """Generate a fresh unique resource name for this scenario."""
        return unique_name(self.name_prefix)

    def region_for(self, settings: "Settings") -> str:
        """Region this scenario runs in under the given settings."""
        return self.region or settings.region

    def build_vars(self, resource_name: str, region: Optional[str] = None) -> Dict[str, Any]:
        """Build the configuration map for a given resource name and region."""
        return self.vars_factory(resource_name, region or self.region or DEFAULT_REGION)

    def options(
        self,
        settings: "Settings",
        resource_name: Optional[str] = None,
        terraform_dir: Optional[str] = None,
    ) -> TerraformOptions:
        """
        Build Terraform options for one run of this scenario.

        Args:
            settings: Suite settings (region, endpoint, binary, retries, timeout)
            resource_name: Name to provision under (generated when omitted)
            terraform_dir: Module directory override (e.g. a temp copy)

        Returns:
            TerraformOptions with the default retryable errors applied
        """
        resource_name = resource_name or self.new_name()
        region = self.region_for(settings)

        env_vars = {'AWS_DEFAULT_REGION': region, 'AWS_REGION': region}
        if settings.endpoint_url:
            env_vars['AWS_ENDPOINT_URL'] = settings.endpoint_url

        options = TerraformOptions(
            terraform_dir=terraform_dir or str(settings.module_dir(self.module)),
            vars=self.build_vars(resource_name, region),
            env_vars=env_vars,
            max_retries=settings.max_retries,
            time_between_retries=settings.time_between_retries,
            terraform_binary=settings.terraform_binary,
            timeout=settings.command_timeout,
        )
        return with_default_retryable_errors(options)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, with the vars rendered for a placeholder name."""
        return {
            'name': self.name,
            'module': self.module,
            'description': self.description,
            'region': self.region,
            'name_prefix': self.name_prefix,
            'tags': self.tags,
            'vars': self.build_vars(f"{self.name_prefix}-<id>"),
        }
