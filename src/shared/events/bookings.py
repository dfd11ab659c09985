"""Cross-domain event contracts for appointment bookings.

Emitted by the booking service, consumed by the Notifications domain.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, String


class AppointmentBooked(BaseEvent):
    """A customer booked an appointment with the merchant."""

    __version__ = 1

    merchant_id = Identifier(required=True)
    appointment_id = Identifier(required=True)
    customer_name = String(max_length=255)
    service_name = String(max_length=255)
    scheduled_at = DateTime(required=True)
    booked_at = DateTime(required=True)
