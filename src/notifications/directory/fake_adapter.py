"""In-memory merchant directory for development and testing."""

from notifications.directory.port import MerchantDirectory


class InMemoryMerchantDirectory(MerchantDirectory):
    def __init__(self) -> None:
        self.merchant_ids: list[str] = []
        self.emails: dict[str, str] = {}
        self.lookups: list[str] = []

    def add_merchant(self, merchant_id: str) -> None:
        if str(merchant_id) not in self.merchant_ids:
            self.merchant_ids.append(str(merchant_id))

    def set_notification_email(self, merchant_id: str, email: str | None) -> None:
        self.add_merchant(merchant_id)
        if email is None:
            self.emails.pop(str(merchant_id), None)
        else:
            self.emails[str(merchant_id)] = email

    def get_notification_email(self, merchant_id: str) -> str | None:
        self.lookups.append(str(merchant_id))
        return self.emails.get(str(merchant_id))

    def list_merchant_ids(self) -> list[str]:
        return list(self.merchant_ids)

    def reset(self) -> None:
        self.merchant_ids.clear()
        self.emails.clear()
        self.lookups.clear()
