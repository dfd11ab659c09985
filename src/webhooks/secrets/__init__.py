"""Secret store factory. Defaults to the in-memory store."""

from webhooks.secrets.fake_adapter import InMemorySecretStore
from webhooks.secrets.port import SecretStore

_current_store: SecretStore | None = None


def get_secret_store() -> SecretStore:
    global _current_store
    if _current_store is None:
        _current_store = InMemorySecretStore()
    return _current_store


def set_secret_store(store: SecretStore) -> None:
    global _current_store
    _current_store = store


def reset_secret_store() -> None:
    global _current_store
    _current_store = None
