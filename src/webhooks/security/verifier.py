"""Webhook signature verifier with audit logging.

Order of checks:
    1. no signature header      → invalid
    2. no merchant id           → invalid
    3. unknown platform         → invalid
    4. no secret configured     → valid in permissive mode (skipped),
                                  invalid in strict mode
    5. HMAC-SHA256 comparison   → valid / invalid

Exactly one WebhookSecurityLog row is written per call, whatever the outcome.
The mode comes from ``WEBHOOK_VERIFICATION_MODE`` (``permissive`` by default).
"""

import os
from dataclasses import dataclass
from enum import Enum

import structlog
from protean.utils.globals import current_domain
from webhooks.secrets import get_secret_store
from webhooks.security.platforms import parse_platform
from webhooks.security.security_log import WebhookSecurityLog
from webhooks.security.signature import signature_matches

logger = structlog.get_logger(__name__)

NO_SIGNATURE = "No signature provided"
NO_MERCHANT = "No merchant ID provided"
UNKNOWN_PLATFORM = "Unknown platform"
NO_SECRET_SKIPPED = "No webhook secret configured - verification skipped"
NO_SECRET_REJECTED = "No webhook secret configured"
SIGNATURE_MISMATCH = "Signature mismatch"


class VerificationMode(Enum):
    PERMISSIVE = "permissive"
    STRICT = "strict"


@dataclass(frozen=True)
class VerificationResult:
    valid: bool
    error: str | None = None
    skipped: bool = False


def verification_mode() -> VerificationMode:
    return VerificationMode(os.environ.get("WEBHOOK_VERIFICATION_MODE", VerificationMode.PERMISSIVE.value).lower())


def _check(merchant_id, platform, payload, signature, mode: VerificationMode) -> VerificationResult:
    if not signature:
        return VerificationResult(False, NO_SIGNATURE)
    if not merchant_id:
        return VerificationResult(False, NO_MERCHANT)

    try:
        platform = parse_platform(platform)
    except ValueError:
        return VerificationResult(False, UNKNOWN_PLATFORM)

    secret = get_secret_store().get_secret(str(merchant_id), platform.value)
    if not secret:
        if mode == VerificationMode.STRICT:
            return VerificationResult(False, NO_SECRET_REJECTED)
        return VerificationResult(True, NO_SECRET_SKIPPED, skipped=True)

    if signature_matches(platform, payload, signature, secret):
        return VerificationResult(True)
    return VerificationResult(False, SIGNATURE_MISMATCH)


def verify_webhook(
    merchant_id: str | None,
    platform: str,
    payload: bytes | str,
    signature: str | None,
    ip_address: str | None = None,
    request_path: str | None = None,
    request_method: str | None = None,
    mode: VerificationMode | None = None,
) -> VerificationResult:
    """Verify one inbound webhook and append its audit row."""
    result = _check(merchant_id, platform, payload, signature, mode or verification_mode())

    entry = WebhookSecurityLog.record(
        platform=str(platform.value if isinstance(platform, Enum) else platform),
        signature_valid=result.valid,
        merchant_id=merchant_id,
        ip_address=ip_address,
        request_path=request_path,
        request_method=request_method,
        error_message=result.error,
    )
    current_domain.repository_for(WebhookSecurityLog).add(entry)

    log = logger.bind(merchant_id=merchant_id, platform=entry.platform, ip_address=ip_address)
    if result.skipped:
        log.warning("Webhook accepted without verification, no secret configured")
    elif result.valid:
        log.info("Webhook signature verified")
    else:
        log.warning("Webhook signature rejected", reason=result.error)
    return result
