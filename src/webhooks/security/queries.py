"""Read helpers for the webhook security log."""

from datetime import UTC, datetime, timedelta

from protean.utils.globals import current_domain
from webhooks.security.security_log import WebhookSecurityLog

DEFAULT_LIMIT = 100


def _newest_first(entries):
    return sorted(entries, key=lambda e: e.created_at or datetime.min.replace(tzinfo=UTC), reverse=True)


def _query(**filters):
    return current_domain.repository_for(WebhookSecurityLog)._dao.query.filter(**filters).all().items


def security_logs_for_merchant(merchant_id: str, limit: int = DEFAULT_LIMIT):
    return _newest_first(_query(merchant_id=str(merchant_id)))[:limit]


def recent_security_logs(limit: int = DEFAULT_LIMIT):
    entries = current_domain.repository_for(WebhookSecurityLog)._dao.query.all().items
    return _newest_first(entries)[:limit]


def failed_verifications(hours: int = 24, now: datetime | None = None):
    """Rejected attempts within the last ``hours``, newest first."""
    cutoff = (now or datetime.now(UTC)) - timedelta(hours=hours)
    return [entry for entry in _newest_first(_query(signature_valid=False)) if entry.created_at >= cutoff]
