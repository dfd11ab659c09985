"""Business-event helpers: render a template and dispatch it to a merchant.

Each helper maps one kind of business event to a notification type, renders
its template and hands the payload to ``dispatch_notification``. They return
the dispatch result so callers can record it, but callers are not expected
to act on a False: suppressed and failed notifications are best effort.
"""

import structlog
from notifications.notification.dispatch import NotificationPayload, dispatch_notification
from notifications.notification_types import NotificationType
from notifications.templates import get_template

logger = structlog.get_logger(__name__)


def notify(merchant_id: str, notification_type: NotificationType, context: dict) -> bool:
    """Render the template for ``notification_type`` and dispatch it."""
    rendered = get_template(notification_type.value).render(context)
    return dispatch_notification(
        NotificationPayload(
            merchant_id=str(merchant_id),
            notification_type=notification_type,
            title=rendered["title"],
            body=rendered["body"],
            url=rendered.get("url"),
            metadata=context,
        )
    )


def notify_new_order(merchant_id, order_id, total_amount, currency="SAR", order_number=None, customer_name=None):
    return notify(
        merchant_id,
        NotificationType.NEW_ORDER,
        {
            "order_id": str(order_id),
            "order_number": order_number,
            "total_amount": total_amount,
            "currency": currency,
            "customer_name": customer_name,
        },
    )


def notify_new_message(merchant_id, conversation_id, customer_name, preview):
    return notify(
        merchant_id,
        NotificationType.NEW_MESSAGE,
        {"conversation_id": str(conversation_id), "customer_name": customer_name, "preview": preview},
    )


def notify_new_appointment(merchant_id, appointment_id, customer_name, service_name, scheduled_at):
    return notify(
        merchant_id,
        NotificationType.APPOINTMENT,
        {
            "appointment_id": str(appointment_id),
            "customer_name": customer_name,
            "service_name": service_name,
            "scheduled_at": scheduled_at,
        },
    )


def notify_order_status_change(merchant_id, order_id, new_status, order_number=None, previous_status=None):
    return notify(
        merchant_id,
        NotificationType.ORDER_STATUS,
        {
            "order_id": str(order_id),
            "order_number": order_number,
            "previous_status": previous_status,
            "new_status": new_status,
        },
    )


def notify_missed_messages(merchant_id, missed_count):
    if missed_count <= 0:
        return False
    return notify(merchant_id, NotificationType.MISSED_MESSAGE, {"missed_count": missed_count})


def notify_disconnect(merchant_id, channel_name="WhatsApp", reason=None):
    return notify(
        merchant_id,
        NotificationType.DISCONNECT_ALERT,
        {"channel_name": channel_name, "reason": reason},
    )


def notify_low_stock(merchant_id, product_id, product_name, current_quantity, threshold):
    return notify(
        merchant_id,
        NotificationType.LOW_STOCK,
        {
            "product_id": str(product_id),
            "product_name": product_name,
            "current_quantity": current_quantity,
            "threshold": threshold,
        },
    )
