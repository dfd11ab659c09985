"""Appointment template: a customer booked a slot."""

from notifications.notification_types import NotificationType


class AppointmentTemplate:
    notification_type = NotificationType.APPOINTMENT.value

    @staticmethod
    def render(context: dict) -> dict:
        customer_name = context.get("customer_name") or "A customer"
        service_name = context.get("service_name") or "an appointment"
        body = f"{customer_name} booked {service_name}"

        scheduled_at = context.get("scheduled_at")
        if scheduled_at is not None:
            when = scheduled_at.strftime("%Y-%m-%d %H:%M") if hasattr(scheduled_at, "strftime") else str(scheduled_at)
            body = f"{body} for {when}"

        return {
            "title": "New appointment booked",
            "body": f"{body}.",
            "url": "/merchant/calendar",
        }
