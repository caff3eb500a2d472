"""Tests for the provisioning context manager and module copies."""

import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from infra_tests.cases import get_scenario
from infra_tests.config import Settings
from infra_tests.harness import copy_module_to_temp, provision_scenario, provisioned
from infra_tests.runtime.options import TerraformOptions
from infra_tests.runtime.terraform import TerraformCommandError


class RecordingLogger:
    """Collects (level, event, data) tuples."""

    def __init__(self):
        self.events = []

    def log(self, level, event, message="", data=None):
        self.events.append((level.value, event, data or {}))

    def info(self, event, message="", data=None):
        self.events.append(("info", event, data or {}))

    def warning(self, event, message="", data=None):
        self.events.append(("warning", event, data or {}))

    def error(self, event, message="", data=None):
        self.events.append(("error", event, data or {}))

    def names(self):
        return [event for _, event, _ in self.events]


def command_error():
    return TerraformCommandError(["terraform", "destroy"], 1, "", "Error: boom")


@pytest.fixture
def options(tmp_path):
    return TerraformOptions(terraform_dir=str(tmp_path))


@pytest.fixture
def terraform():
    with patch("infra_tests.harness.init_and_apply") as apply, patch("infra_tests.harness.destroy") as destroy:
        yield apply, destroy


class TestProvisioned:

    def test_apply_then_destroy(self, options, terraform):
        apply, destroy = terraform
        events = RecordingLogger()

        with provisioned(options, events=events, case="s3_bucket") as applied:
            assert applied is options
            apply.assert_called_once()
            destroy.assert_not_called()

        destroy.assert_called_once()
        assert events.names() == ["case.started", "case.completed"]
        assert events.events[-1][2] == {"case": "s3_bucket", "passed": True}

    def test_destroy_runs_when_body_fails(self, options, terraform):
        _, destroy = terraform

        with pytest.raises(AssertionError):
            with provisioned(options):
                raise AssertionError("tag mismatch")

        destroy.assert_called_once()

    def test_destroy_runs_when_apply_fails(self, options, terraform):
        apply, destroy = terraform
        apply.side_effect = TerraformCommandError(["terraform", "apply"], 1, "", "Error: quota")
        body_ran = False

        with pytest.raises(TerraformCommandError, match="quota"):
            with provisioned(options):
                body_ran = True

        assert body_ran is False
        destroy.assert_called_once()

    def test_destroy_failure_is_raised(self, options, terraform):
        _, destroy = terraform
        destroy.side_effect = command_error()
        events = RecordingLogger()

        with pytest.raises(TerraformCommandError, match="boom"):
            with provisioned(options, events=events):
                pass

        assert "cleanup.failed" in events.names()
        assert events.events[-1][2]["passed"] is False

    def test_destroy_failure_does_not_mask_body_failure(self, options, terraform):
        _, destroy = terraform
        destroy.side_effect = command_error()

        with pytest.raises(AssertionError, match="versioning"):
            with provisioned(options):
                raise AssertionError("versioning not enabled")

    def test_unexpected_cleanup_error_does_not_mask_body_failure(self, options, terraform):
        _, destroy = terraform
        destroy.side_effect = FileNotFoundError("Terraform directory not found")
        events = RecordingLogger()

        with pytest.raises(AssertionError, match="encryption"):
            with provisioned(options, events=events):
                raise AssertionError("encryption rules missing")

        assert "cleanup.failed" in events.names()

    def test_unexpected_cleanup_error_is_raised_after_passing_body(self, options, terraform):
        _, destroy = terraform
        destroy.side_effect = FileNotFoundError("Terraform directory not found")

        with pytest.raises(FileNotFoundError):
            with provisioned(options):
                pass

    def test_cleanup_disabled(self, options, terraform):
        _, destroy = terraform
        events = RecordingLogger()

        with provisioned(options, events=events, cleanup=False):
            pass

        destroy.assert_not_called()
        assert "cleanup.skipped" in events.names()


class TestCopyModuleToTemp:

    def test_copies_sources_only(self, tmp_path):
        module = tmp_path / "s3"
        module.mkdir()
        (module / "main.tf").write_text('resource "aws_s3_bucket" "this" {}')
        (module / "terraform.tfstate").write_text("{}")
        (module / ".terraform").mkdir()
        (module / ".terraform" / "providers").write_text("")

        copy = copy_module_to_temp(str(module), root=str(tmp_path))

        assert copy.name == "s3"
        assert copy != module
        assert (copy / "main.tf").exists()
        assert not (copy / "terraform.tfstate").exists()
        assert not (copy / ".terraform").exists()

    def test_each_copy_is_separate(self, tmp_path):
        module = tmp_path / "vpc"
        module.mkdir()
        (module / "main.tf").write_text("")

        first = copy_module_to_temp(str(module), root=str(tmp_path))
        second = copy_module_to_temp(str(module), root=str(tmp_path))

        assert first != second

    def test_missing_module(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            copy_module_to_temp(str(tmp_path / "absent"))


class TestProvisionScenario:

    @pytest.fixture
    def module_root(self, tmp_path):
        module = tmp_path / "modules" / "s3"
        module.mkdir(parents=True)
        (module / "main.tf").write_text('resource "aws_s3_bucket" "this" {}')
        return module.parent

    def test_copy_lives_in_workdir(self, tmp_path, module_root, terraform):
        apply, destroy = terraform
        workdir = tmp_path / "work"
        workdir.mkdir()
        settings = Settings(terraform_root=module_root)

        with provision_scenario(get_scenario("s3_bucket"), settings, workdir=str(workdir)) as options:
            assert workdir in Path(options.terraform_dir).parents
            assert options.vars["bucket_name"].startswith("test-bucket-")

        apply.assert_called_once()
        destroy.assert_called_once()

    def test_keep_mode_copies_outside_workdir(self, tmp_path, module_root, terraform, monkeypatch):
        _, destroy = terraform
        workdir = tmp_path / "work"
        persistent = tmp_path / "persistent"
        workdir.mkdir()
        persistent.mkdir()
        monkeypatch.setattr(tempfile, "tempdir", str(persistent))
        settings = Settings(terraform_root=module_root, keep_resources=True)
        events = RecordingLogger()

        with provision_scenario(
            get_scenario("s3_bucket"),
            settings,
            events=events,
            resource_name="test-bucket-kept",
            workdir=str(workdir),
        ) as options:
            copy = Path(options.terraform_dir)

        destroy.assert_not_called()
        assert persistent in copy.parents
        assert workdir not in copy.parents
        assert (copy / "main.tf").exists()
        assert "cleanup.skipped" in events.names()
