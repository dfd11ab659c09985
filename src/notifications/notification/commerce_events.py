"""Inbound cross-domain event handler: alerts for storefront commerce events.

Listens for OrderPlaced, OrderStatusChanged and LowStockDetected.
"""

from notifications.domain import notifications
from notifications.notification.helpers import (
    notify_low_stock,
    notify_new_order,
    notify_order_status_change,
)
from notifications.notification.notification import NotificationLog
from protean.utils.mixins import handle
from shared.events.commerce import LowStockDetected, OrderPlaced, OrderStatusChanged

notifications.register_external_event(OrderPlaced, "Commerce.OrderPlaced.v1")
notifications.register_external_event(OrderStatusChanged, "Commerce.OrderStatusChanged.v1")
notifications.register_external_event(LowStockDetected, "Commerce.LowStockDetected.v1")


@notifications.event_handler(part_of=NotificationLog, stream_category="commerce::order")
class CommerceEventsHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        notify_new_order(
            merchant_id=str(event.merchant_id),
            order_id=str(event.order_id),
            total_amount=event.total_amount,
            currency=event.currency,
            order_number=event.order_number,
            customer_name=event.customer_name,
        )

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        notify_order_status_change(
            merchant_id=str(event.merchant_id),
            order_id=str(event.order_id),
            new_status=event.new_status,
            order_number=event.order_number,
            previous_status=event.previous_status,
        )

    @handle(LowStockDetected)
    def on_low_stock_detected(self, event: LowStockDetected) -> None:
        notify_low_stock(
            merchant_id=str(event.merchant_id),
            product_id=str(event.product_id),
            product_name=event.product_name,
            current_quantity=event.current_quantity,
            threshold=event.threshold,
        )
