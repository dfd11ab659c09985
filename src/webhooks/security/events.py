from protean.fields import Boolean, DateTime, Identifier, String, Text
from webhooks.domain import webhooks


@webhooks.event(part_of="WebhookSecurityLog")
class WebhookVerificationRecorded:
    """One inbound webhook was checked. ``signature_valid`` is the outcome."""

    __version__ = 1

    security_log_id: Identifier(required=True)
    merchant_id: Identifier()
    platform: String(required=True)
    signature_valid: Boolean(required=True)
    ip_address: String()
    error_message: Text()
    recorded_at: DateTime(required=True)
