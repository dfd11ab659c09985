"""Merchant directory port: read access to merchant records owned elsewhere.

The merchant store (profiles, contact details) lives outside this service.
The dispatcher needs the address that merchant alerts are emailed to, and
the weekly digest needs the list of merchants to summarise.
"""

from abc import ABC, abstractmethod


class MerchantDirectory(ABC):
    @abstractmethod
    def get_notification_email(self, merchant_id: str) -> str | None:
        """Return the merchant's alert email address, or None when none is on file."""
        ...

    @abstractmethod
    def list_merchant_ids(self) -> list[str]:
        """Every merchant known to the directory."""
        ...
