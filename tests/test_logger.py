"""Tests for the event loggers."""

import io
import json

from infra_tests.config import Settings
from infra_tests.logging import ConsoleLogger, FileLogger, LogLevel, NullLogger, create_logger


def test_file_logger_writes_json_lines(tmp_path):
    path = tmp_path / "events.jsonl"
    logger = FileLogger(str(path))

    logger.info("terraform.apply", "Applied s3", {"success": True})
    logger.debug("terraform.retry", "filtered out")
    logger.error("cleanup.failed", "Destroy failed")

    entries = [json.loads(line) for line in path.read_text().splitlines()]
    assert [e["event"] for e in entries] == ["terraform.apply", "cleanup.failed"]
    assert entries[0]["level"] == "info"
    assert entries[0]["data"] == {"success": True}
    assert "data" not in entries[1]


def test_console_logger_plain_output():
    stream = io.StringIO()
    logger = ConsoleLogger(stream=stream)

    logger.info("case.started", data={"case": "s3_tags", "module": "s3"})
    logger.warning("terraform.retry", "Retrying terraform init", {"attempt": 1, "max_retries": 3})
    logger.info("case.completed", data={"passed": True})

    output = stream.getvalue()
    assert "s3_tags [s3]" in output
    assert "Retrying terraform init (attempt=1, max_retries=3)" in output
    assert "PASSED" in output
    assert "\033[" not in output


def test_console_logger_level_filter():
    stream = io.StringIO()
    logger = ConsoleLogger(min_level=LogLevel.WARNING, stream=stream)

    logger.info("terraform.init", "Initialized vpc")

    assert stream.getvalue() == ""


def test_null_logger():
    NullLogger().critical("anything", "ignored", {"x": 1})


def test_create_logger(tmp_path):
    assert isinstance(create_logger(Settings()), ConsoleLogger)

    file_logger = create_logger(Settings(log_file=str(tmp_path / "e.jsonl"), log_level="debug"))
    assert isinstance(file_logger, FileLogger)
    assert file_logger.min_level == LogLevel.DEBUG


def test_worker_id_is_recorded(tmp_path, monkeypatch):
    monkeypatch.setenv("PYTEST_XDIST_WORKER", "gw3")
    path = tmp_path / "events.jsonl"
    stream = io.StringIO()

    FileLogger(str(path)).info("terraform.destroy", "Destroyed rds")
    ConsoleLogger(stream=stream).info("terraform.destroy", "Destroyed rds")

    assert json.loads(path.read_text())["worker"] == "gw3"
    assert "[gw3] 🧹 Destroyed rds" in stream.getvalue()
