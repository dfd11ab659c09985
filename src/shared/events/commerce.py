"""Cross-domain event contracts for storefront commerce events.

Emitted by the store-sync and order-management services, consumed by the
Notifications domain to alert merchants. They are registered as external
events via domain.register_external_event() with matching __type__ strings
so Protean's stream deserialization works correctly.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Float, Identifier, Integer, String


class OrderPlaced(BaseEvent):
    """A customer placed a new order in one of the merchant's stores."""

    __version__ = 1

    merchant_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_number = String(max_length=100)
    customer_name = String(max_length=255)
    total_amount = Float(required=True)
    currency = String(default="SAR")
    placed_at = DateTime(required=True)


class OrderStatusChanged(BaseEvent):
    """An order moved to a new fulfilment status."""

    __version__ = 1

    merchant_id = Identifier(required=True)
    order_id = Identifier(required=True)
    order_number = String(max_length=100)
    previous_status = String(max_length=50)
    new_status = String(required=True, max_length=50)
    changed_at = DateTime(required=True)


class LowStockDetected(BaseEvent):
    """A product's available quantity fell to or below its threshold."""

    __version__ = 1

    merchant_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    current_quantity = Integer(required=True)
    threshold = Integer(required=True)
    detected_at = DateTime(required=True)
