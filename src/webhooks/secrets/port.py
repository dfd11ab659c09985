"""Secret store port: per merchant, per platform webhook secrets."""

from abc import ABC, abstractmethod


class SecretStore(ABC):
    @abstractmethod
    def get_secret(self, merchant_id: str, platform: str) -> str | None:
        """The shared secret for the merchant's integration, or None if not configured."""
        ...
