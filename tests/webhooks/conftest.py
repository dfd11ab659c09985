import pytest


@pytest.fixture(scope="session")
def _webhooks_domain():
    from webhooks.domain import webhooks

    return webhooks


@pytest.fixture(scope="session", autouse=True)
def setup_db(_webhooks_domain):
    from shared.db import drop_db, setup_db

    setup_db(_webhooks_domain)

    yield

    drop_db(_webhooks_domain)


@pytest.fixture(autouse=True)
def run_around_tests(_webhooks_domain):
    """Push domain context before each test, cleanup after."""
    ctx = _webhooks_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()
