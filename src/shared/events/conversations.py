"""Cross-domain event contracts for the merchant's customer conversations.

Emitted by the chat ingestion service when messages arrive, go unanswered,
or when the messaging connection drops. Consumed by the Notifications domain.
"""

from protean.core.event import BaseEvent
from protean.fields import DateTime, Identifier, Integer, String, Text


class MessageReceived(BaseEvent):
    """A customer sent a new message to the merchant."""

    __version__ = 1

    merchant_id = Identifier(required=True)
    conversation_id = Identifier(required=True)
    customer_name = String(max_length=255)
    preview = Text()
    received_at = DateTime(required=True)


class MessagesMissed(BaseEvent):
    """Messages have been waiting for a reply longer than the merchant's threshold."""

    __version__ = 1

    merchant_id = Identifier(required=True)
    missed_count = Integer(required=True)
    detected_at = DateTime(required=True)


class ChannelDisconnected(BaseEvent):
    """The merchant's messaging channel connection was lost."""

    __version__ = 1

    merchant_id = Identifier(required=True)
    channel_name = String(default="WhatsApp", max_length=50)
    reason = String(max_length=500)
    disconnected_at = DateTime(required=True)
