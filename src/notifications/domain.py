"""Notifications bounded context: merchant alert dispatch.

Decides whether a business event (new order, new chat message, appointment,
low stock, channel disconnect) should alert the merchant, resolves the
channel from global and per-merchant preferences plus quiet hours, fans the
alert out to push subscriptions and email, and logs every attempt.
"""

from protean.domain import Domain
from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

notifications = Domain(name="notifications")
