"""In-memory secret store for development and testing."""

from webhooks.secrets.port import SecretStore


class InMemorySecretStore(SecretStore):
    def __init__(self) -> None:
        self.secrets: dict[tuple[str, str], str] = {}

    def set_secret(self, merchant_id: str, platform: str, secret: str | None) -> None:
        key = (str(merchant_id), platform)
        if secret is None:
            self.secrets.pop(key, None)
        else:
            self.secrets[key] = secret

    def get_secret(self, merchant_id: str, platform: str) -> str | None:
        return self.secrets.get((str(merchant_id), platform))

    def reset(self) -> None:
        self.secrets.clear()
