"""WebhookSecurityLog aggregate: append-only audit of verification attempts.

Rows are written once and never mutated or deleted. ``merchant_id`` is
optional so that requests that could not be attributed are still logged.
"""

from datetime import UTC, datetime

from protean.fields import Boolean, DateTime, Identifier, String, Text
from webhooks.domain import webhooks
from webhooks.security.events import WebhookVerificationRecorded


@webhooks.aggregate
class WebhookSecurityLog:
    merchant_id: Identifier()
    platform: String(max_length=50, required=True)
    ip_address: String(max_length=64)
    signature_valid: Boolean(default=False)
    request_path: String(max_length=500)
    request_method: String(max_length=10)
    error_message: Text()
    created_at: DateTime()

    @classmethod
    def record(
        cls,
        platform: str,
        signature_valid: bool,
        merchant_id: str | None = None,
        ip_address: str | None = None,
        request_path: str | None = None,
        request_method: str | None = None,
        error_message: str | None = None,
    ):
        now = datetime.now(UTC)
        entry = cls(
            merchant_id=str(merchant_id) if merchant_id else None,
            platform=platform,
            ip_address=ip_address,
            signature_valid=signature_valid,
            request_path=request_path,
            request_method=request_method.upper() if request_method else None,
            error_message=error_message,
            created_at=now,
        )
        entry.raise_(
            WebhookVerificationRecorded(
                security_log_id=str(entry.id),
                merchant_id=entry.merchant_id,
                platform=platform,
                signature_valid=signature_valid,
                ip_address=ip_address,
                error_message=error_message,
                recorded_at=now,
            )
        )
        return entry
