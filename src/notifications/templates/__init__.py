"""Template registry: maps NotificationType to template classes.

Each template renders ``{"title", "body", "url"}`` from event context data.
"""

from notifications.notification_types import NotificationType
from notifications.templates.appointment import AppointmentTemplate
from notifications.templates.disconnect_alert import DisconnectAlertTemplate
from notifications.templates.low_stock import LowStockTemplate
from notifications.templates.missed_message import MissedMessageTemplate
from notifications.templates.new_message import NewMessageTemplate
from notifications.templates.new_order import NewOrderTemplate
from notifications.templates.order_status import OrderStatusTemplate
from notifications.templates.weekly_report import WeeklyReportTemplate

TEMPLATE_REGISTRY: dict[str, type] = {
    NotificationType.NEW_ORDER.value: NewOrderTemplate,
    NotificationType.NEW_MESSAGE.value: NewMessageTemplate,
    NotificationType.APPOINTMENT.value: AppointmentTemplate,
    NotificationType.ORDER_STATUS.value: OrderStatusTemplate,
    NotificationType.MISSED_MESSAGE.value: MissedMessageTemplate,
    NotificationType.DISCONNECT_ALERT.value: DisconnectAlertTemplate,
    NotificationType.LOW_STOCK.value: LowStockTemplate,
    NotificationType.WEEKLY_REPORT.value: WeeklyReportTemplate,
}


def get_template(notification_type: str) -> type:
    """Look up the template class for a notification type.

    Raises:
        ValueError: If no template is registered for the type.
    """
    template_cls = TEMPLATE_REGISTRY.get(notification_type)
    if template_cls is None:
        raise ValueError(f"No template registered for notification type: {notification_type}")
    return template_cls
