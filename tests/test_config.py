"""Tests for Settings."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from infra_tests.config import DEFAULT_TERRAFORM_ROOT, Settings


def test_defaults():
    settings = Settings.from_env({})

    assert settings.region == "us-east-1"
    assert settings.terraform_binary == "terraform"
    assert settings.terraform_root == DEFAULT_TERRAFORM_ROOT
    assert settings.endpoint_url is None
    assert settings.max_retries == 3
    assert settings.time_between_retries == 5.0
    assert settings.live is False
    assert settings.keep_resources is False


def test_from_env():
    settings = Settings.from_env({
        "AWS_DEFAULT_REGION": "eu-central-1",
        "INFRA_TESTS_TERRAFORM_BINARY": "tofu",
        "INFRA_TESTS_TERRAFORM_ROOT": "/srv/modules",
        "AWS_ENDPOINT_URL": "http://localhost:4566",
        "INFRA_TESTS_MAX_RETRIES": "5",
        "INFRA_TESTS_RETRY_SLEEP": "0.5",
        "INFRA_TESTS_LOG_LEVEL": "DEBUG",
        "INFRA_TESTS_LIVE": "true",
        "INFRA_TESTS_KEEP": "0",
    })

    assert settings.region == "eu-central-1"
    assert settings.terraform_binary == "tofu"
    assert settings.module_dir("s3") == Path("/srv/modules/s3")
    assert settings.endpoint_url == "http://localhost:4566"
    assert settings.max_retries == 5
    assert settings.time_between_retries == 0.5
    assert settings.log_level == "debug"
    assert settings.live is True
    assert settings.keep_resources is False


def test_explicit_region_wins():
    settings = Settings.from_env({"AWS_DEFAULT_REGION": "eu-central-1", "INFRA_TESTS_REGION": "us-west-2"})

    assert settings.region == "us-west-2"


def test_invalid_values():
    with pytest.raises(ValidationError):
        Settings.from_env({"INFRA_TESTS_MAX_RETRIES": "-1"})
    with pytest.raises(ValidationError):
        Settings.from_env({"INFRA_TESTS_LOG_LEVEL": "verbose"})


def test_modules_exist():
    settings = Settings()

    for module in ("vpc", "eks", "rds", "s3"):
        assert (settings.module_dir(module) / "main.tf").is_file()
