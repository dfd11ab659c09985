import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Initialize every domain once. Each domain's conftest pushes its own
    domain context around the tests below it.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from notifications.domain import notifications
    from reporting.domain import reporting
    from webhooks.domain import webhooks

    notifications.init()
    reporting.init()
    webhooks.init()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def reset_collaborators():
    """Fresh adapters, directory, metrics, secrets and settings cache per test."""
    from notifications.channel import reset_channels
    from notifications.directory import reset_directory
    from notifications.settings.cache import invalidate_global_settings
    from reporting.metrics import reset_metrics_source
    from webhooks.secrets import reset_secret_store

    reset_channels()
    reset_directory()
    reset_metrics_source()
    reset_secret_store()
    invalidate_global_settings()

    yield

    reset_channels()
    reset_directory()
    reset_metrics_source()
    reset_secret_store()
    invalidate_global_settings()
