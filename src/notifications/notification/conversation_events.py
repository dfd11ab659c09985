"""Inbound cross-domain event handler: alerts for customer conversations and bookings.

Listens for MessageReceived, MessagesMissed, ChannelDisconnected and
AppointmentBooked.
"""

import structlog
from notifications.domain import notifications
from notifications.notification.helpers import (
    notify_disconnect,
    notify_missed_messages,
    notify_new_appointment,
    notify_new_message,
)
from notifications.notification.notification import NotificationLog
from protean.utils.mixins import handle
from shared.events.bookings import AppointmentBooked
from shared.events.conversations import ChannelDisconnected, MessageReceived, MessagesMissed

logger = structlog.get_logger(__name__)

notifications.register_external_event(MessageReceived, "Conversations.MessageReceived.v1")
notifications.register_external_event(MessagesMissed, "Conversations.MessagesMissed.v1")
notifications.register_external_event(ChannelDisconnected, "Conversations.ChannelDisconnected.v1")
notifications.register_external_event(AppointmentBooked, "Bookings.AppointmentBooked.v1")


@notifications.event_handler(part_of=NotificationLog, stream_category="conversations::conversation")
class ConversationEventsHandler:
    @handle(MessageReceived)
    def on_message_received(self, event: MessageReceived) -> None:
        notify_new_message(
            merchant_id=str(event.merchant_id),
            conversation_id=str(event.conversation_id),
            customer_name=event.customer_name,
            preview=event.preview,
        )

    @handle(MessagesMissed)
    def on_messages_missed(self, event: MessagesMissed) -> None:
        notify_missed_messages(merchant_id=str(event.merchant_id), missed_count=event.missed_count)

    @handle(ChannelDisconnected)
    def on_channel_disconnected(self, event: ChannelDisconnected) -> None:
        logger.warning(
            "Messaging channel disconnected",
            merchant_id=str(event.merchant_id),
            channel_name=event.channel_name,
            reason=event.reason,
        )
        notify_disconnect(
            merchant_id=str(event.merchant_id),
            channel_name=event.channel_name,
            reason=event.reason,
        )


@notifications.event_handler(part_of=NotificationLog, stream_category="bookings::appointment")
class BookingEventsHandler:
    @handle(AppointmentBooked)
    def on_appointment_booked(self, event: AppointmentBooked) -> None:
        notify_new_appointment(
            merchant_id=str(event.merchant_id),
            appointment_id=str(event.appointment_id),
            customer_name=event.customer_name,
            service_name=event.service_name,
            scheduled_at=event.scheduled_at,
        )
