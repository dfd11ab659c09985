"""Channel adapter registry: pluggable delivery transports.

Provides singleton access to one adapter per delivery channel. Adapters are
chosen by environment variable and default to the in-memory fakes:

    PUSH_ADAPTER       fake
    EMAIL_ADAPTER      fake | http
    MESSAGING_ADAPTER  fake
"""

import os

from notifications.notification_types import DeliveryChannel

_channel_instances: dict[str, object] = {}


def _build_adapter(channel_type: str):
    if channel_type == DeliveryChannel.PUSH.value:
        adapter = os.environ.get("PUSH_ADAPTER", "fake")
        if adapter == "fake":
            from notifications.channel.fake_push import FakePushAdapter

            return FakePushAdapter()
    elif channel_type == DeliveryChannel.EMAIL.value:
        adapter = os.environ.get("EMAIL_ADAPTER", "fake")
        if adapter == "fake":
            from notifications.channel.fake_email import FakeEmailAdapter

            return FakeEmailAdapter()
        if adapter == "http":
            from notifications.channel.http_email import HttpEmailAdapter

            return HttpEmailAdapter.from_env()
    elif channel_type == DeliveryChannel.MESSAGING.value:
        adapter = os.environ.get("MESSAGING_ADAPTER", "fake")
        if adapter == "fake":
            from notifications.channel.fake_messaging import FakeMessagingAdapter

            return FakeMessagingAdapter()
    else:
        raise ValueError(f"Unknown channel type: {channel_type}")

    raise ValueError(f"Unknown {channel_type} adapter: {adapter}")


def get_channel(channel_type: str):
    """Return the configured adapter for a channel (singleton per channel type).

    Args:
        channel_type: One of DeliveryChannel values ("push", "email", "messaging")
    """
    if isinstance(channel_type, DeliveryChannel):
        channel_type = channel_type.value
    if channel_type not in _channel_instances:
        _channel_instances[channel_type] = _build_adapter(channel_type)
    return _channel_instances[channel_type]


def set_channel(channel_type: str, adapter) -> None:
    """Install a specific adapter instance for a channel."""
    if isinstance(channel_type, DeliveryChannel):
        channel_type = channel_type.value
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
