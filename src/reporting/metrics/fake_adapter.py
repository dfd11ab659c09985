"""In-memory metrics source for development and testing."""

from datetime import datetime

from reporting.metrics.port import ActivityStats, ConversationStats, CustomerStats, MetricsSource, OrderStats


class MetricsUnavailable(Exception):
    """Raised by the fake when a merchant is configured to fail."""


class InMemoryMetricsSource(MetricsSource):
    def __init__(self) -> None:
        self.store_names: dict[str, str] = {}
        self.conversations: dict[str, ConversationStats] = {}
        self.orders: dict[str, OrderStats] = {}
        self.customers: dict[str, CustomerStats] = {}
        self.activity: dict[str, ActivityStats] = {}
        self.failing: set[str] = set()
        self.queries: list[tuple[str, str, datetime, datetime]] = []

    def seed(
        self,
        merchant_id: str,
        store_name: str | None = None,
        conversations: ConversationStats | None = None,
        orders: OrderStats | None = None,
        customers: CustomerStats | None = None,
        activity: ActivityStats | None = None,
    ) -> None:
        merchant_id = str(merchant_id)
        if store_name is not None:
            self.store_names[merchant_id] = store_name
        if conversations is not None:
            self.conversations[merchant_id] = conversations
        if orders is not None:
            self.orders[merchant_id] = orders
        if customers is not None:
            self.customers[merchant_id] = customers
        if activity is not None:
            self.activity[merchant_id] = activity

    def fail_for(self, merchant_id: str) -> None:
        self.failing.add(str(merchant_id))

    def _check(self, kind: str, merchant_id: str, since: datetime, until: datetime) -> None:
        self.queries.append((kind, str(merchant_id), since, until))
        if str(merchant_id) in self.failing:
            raise MetricsUnavailable(f"Metrics unavailable for merchant {merchant_id}")

    def store_name(self, merchant_id: str) -> str | None:
        return self.store_names.get(str(merchant_id))

    def conversation_stats(self, merchant_id, since, until) -> ConversationStats:
        self._check("conversations", merchant_id, since, until)
        return self.conversations.get(str(merchant_id), ConversationStats())

    def order_stats(self, merchant_id, since, until) -> OrderStats:
        self._check("orders", merchant_id, since, until)
        return self.orders.get(str(merchant_id), OrderStats())

    def customer_stats(self, merchant_id, since, until) -> CustomerStats:
        self._check("customers", merchant_id, since, until)
        return self.customers.get(str(merchant_id), CustomerStats())

    def activity_stats(self, merchant_id, since, until) -> ActivityStats:
        self._check("activity", merchant_id, since, until)
        return self.activity.get(str(merchant_id), ActivityStats())

    def reset(self) -> None:
        self.store_names.clear()
        self.conversations.clear()
        self.orders.clear()
        self.customers.clear()
        self.activity.clear()
        self.failing.clear()
        self.queries.clear()
