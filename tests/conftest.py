"""
Shared fixtures.

Offline tests use moto and mocked subprocesses. Tests marked ``live``
deploy real resources, incur costs and only run with ``--live`` or
``INFRA_TESTS_LIVE=1``.
"""
import pytest

from infra_tests.config import Settings
from infra_tests.aws import create_client
from infra_tests.harness import provision_scenario
from infra_tests.logging import create_logger


def pytest_addoption(parser):
    parser.addoption(
        "--live",
        action="store_true",
        default=False,
        help="run live acceptance tests against real AWS infrastructure",
    )


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "live: marks tests as live acceptance tests that deploy real resources"
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--live") or Settings.from_env().live:
        return

    skip_live = pytest.mark.skip(reason="live test: pass --live or set INFRA_TESTS_LIVE=1")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture(scope="function")
def aws_credentials(monkeypatch):
    """Mocked AWS Credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)


@pytest.fixture(scope="session")
def settings():
    """Suite settings from the environment."""
    return Settings.from_env()


@pytest.fixture(scope="session")
def events(settings):
    """Lifecycle event logger."""
    return create_logger(settings)


@pytest.fixture
def provision(settings, events, tmp_path):
    """
    Provision a scenario in a private copy of its module.

    Usage::

        with provision(scenario, name) as options:
            ...

    Destroy always runs when the block exits, unless INFRA_TESTS_KEEP is set;
    kept module copies outlive the pytest temp directory.
    """
    def _provision(scenario, resource_name=None):
        return provision_scenario(
            scenario,
            settings,
            events=events,
            resource_name=resource_name,
            workdir=str(tmp_path),
        )

    return _provision


@pytest.fixture
def aws_client(settings):
    """boto3 client factory for the region a scenario runs in."""
    def _client(service, scenario):
        return create_client(service, scenario.region_for(settings), settings.endpoint_url)

    return _client
