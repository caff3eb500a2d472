"""Runtime settings for the infrastructure test suite."""

import os
from pathlib import Path
from typing import Dict, Optional, Mapping

from pydantic import BaseModel, Field, field_validator

DEFAULT_TERRAFORM_ROOT = Path(__file__).resolve().parent.parent / "terraform"

_TRUTHY = {"1", "true", "yes", "on"}


class Settings(BaseModel):
    """Settings shared by the harness, the CLI and the acceptance tests."""

    region: str = Field(default="us-east-1", description="Default AWS region for lookups")
    terraform_binary: str = Field(default="terraform", description="Terraform executable")
    terraform_root: Path = Field(default=DEFAULT_TERRAFORM_ROOT, description="Directory holding the modules under test")
    endpoint_url: Optional[str] = Field(None, description="Custom AWS endpoint (e.g. LocalStack)")
    max_retries: int = Field(default=3, ge=0, description="Retries for retryable Terraform errors")
    time_between_retries: float = Field(default=5.0, ge=0, description="Seconds between retries")
    command_timeout: int = Field(default=3600, gt=0, description="Timeout for a single Terraform command")
    log_level: str = Field(default="info", description="Minimum event log level")
    log_file: Optional[str] = Field(None, description="Write JSON-lines events to this file")
    live: bool = Field(default=False, description="Run acceptance tests against real infrastructure")
    keep_resources: bool = Field(default=False, description="Skip terraform destroy after each case")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        level = v.lower()
        if level not in ("debug", "info", "warning", "error", "critical"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    def module_dir(self, module: str) -> Path:
        """Path of a Terraform module below the configured root."""
        return self.terraform_root / module

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """
        Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to os.environ)

        Returns:
            Settings instance
        """
        env = os.environ if environ is None else environ
        values: Dict[str, object] = {}

        region = env.get('INFRA_TESTS_REGION') or env.get('AWS_DEFAULT_REGION')
        if region:
            values['region'] = region

        mapping = {
            'INFRA_TESTS_TERRAFORM_BINARY': 'terraform_binary',
            'INFRA_TESTS_TERRAFORM_ROOT': 'terraform_root',
            'AWS_ENDPOINT_URL': 'endpoint_url',
            'INFRA_TESTS_MAX_RETRIES': 'max_retries',
            'INFRA_TESTS_RETRY_SLEEP': 'time_between_retries',
            'INFRA_TESTS_COMMAND_TIMEOUT': 'command_timeout',
            'INFRA_TESTS_LOG_LEVEL': 'log_level',
            'INFRA_TESTS_LOG_FILE': 'log_file',
        }
        for var, field_name in mapping.items():
            if env.get(var):
                values[field_name] = env[var]

        for var, field_name in (('INFRA_TESTS_LIVE', 'live'), ('INFRA_TESTS_KEEP', 'keep_resources')):
            if var in env:
                values[field_name] = env[var].strip().lower() in _TRUTHY

        return cls(**values)
