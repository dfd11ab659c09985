"""Metrics source port: aggregate counts a scheduled report summarises.

Every count covers the `[since, until)` window the caller passes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ConversationStats:
    total: int = 0
    new_today: int = 0
    resolved: int = 0


@dataclass(frozen=True)
class OrderStats:
    total: int = 0
    new_today: int = 0
    revenue: float = 0.0


@dataclass(frozen=True)
class CustomerStats:
    total: int = 0
    new_today: int = 0


@dataclass(frozen=True)
class ActivityStats:
    messages: int = 0
    appointments_booked: int = 0


class MetricsSource(ABC):
    """Read side of the conversation, order and customer stores."""

    @abstractmethod
    def store_name(self, merchant_id: str) -> str | None:
        """Display name of the merchant's store, if known."""
        ...

    @abstractmethod
    def conversation_stats(self, merchant_id: str, since: datetime, until: datetime) -> ConversationStats: ...

    @abstractmethod
    def order_stats(self, merchant_id: str, since: datetime, until: datetime) -> OrderStats: ...

    @abstractmethod
    def customer_stats(self, merchant_id: str, since: datetime, until: datetime) -> CustomerStats: ...

    @abstractmethod
    def activity_stats(self, merchant_id: str, since: datetime, until: datetime) -> ActivityStats:
        """Messages received and appointments booked in the window."""
        ...
