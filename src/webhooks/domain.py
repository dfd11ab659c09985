"""Webhooks bounded context: inbound signature verification and audit.

Third-party commerce and booking platforms sign their webhook deliveries
with a per-merchant shared secret (HMAC-SHA256 over the raw body). Every
verification attempt, accepted or not, is appended to the security log.
"""

from protean.domain import Domain
from shared.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

webhooks = Domain(name="webhooks")
