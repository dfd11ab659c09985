"""Multi-channel dispatcher: deliver one notification to a merchant.

Flow: resolve preferences → open a PENDING log → push fan-out and/or
email → complete the log. A suppressed notification returns False without
touching any channel or writing a log row; the suppression reason is only
logged. Channel failures never propagate: they end up in the log row and
in the returned boolean.

Success rule: every channel that was attempted must succeed. A merchant
with no active push subscriptions, or with no notification email on file,
does not count as a failed channel.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

import structlog
from notifications.channel import get_channel
from notifications.channel.push_port import PushMessage
from notifications.directory import get_directory
from notifications.domain import notifications
from notifications.notification.delivery_log import complete_log, open_log
from notifications.notification.notification import TITLE_MAX_LENGTH, URL_MAX_LENGTH, NotificationLog
from notifications.notification_types import DeliveryChannel, NotificationType, parse_notification_type
from notifications.preference.resolver import find_preference, resolve
from notifications.push.fanout import deliver_push
from notifications.templates.email_layout import render_email_html
from protean.exceptions import ValidationError
from protean.fields import Dict, Identifier, String, Text
from protean.utils.mixins import handle

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class NotificationPayload:
    merchant_id: str
    notification_type: NotificationType
    title: str
    body: str
    url: str | None = None
    metadata: dict = field(default_factory=dict)


def resolve_notification_email(merchant_id: str) -> str | None:
    """The preference's override address, else the merchant directory's."""
    preference = find_preference(merchant_id)
    if preference is not None and preference.notification_email:
        return preference.notification_email
    return get_directory().get_notification_email(str(merchant_id))


def _send_email(payload: NotificationPayload) -> tuple[bool, str | None]:
    """Returns (succeeded, error). No address on file counts as success."""
    address = resolve_notification_email(payload.merchant_id)
    if not address:
        logger.info("No notification email on file, skipping email", merchant_id=payload.merchant_id)
        return True, None

    adapter = get_channel(DeliveryChannel.EMAIL)
    result = adapter.send(
        to=address,
        subject=payload.title,
        body=payload.body,
        html_body=render_email_html(payload.title, payload.body, payload.url),
    )
    if result.get("status") == "sent":
        return True, None
    return False, result.get("error") or "Email delivery failed"


def fit_payload(payload: NotificationPayload) -> NotificationPayload:
    """Trim ``payload`` to what the delivery logs can store.

    Long titles are cut with an ellipsis. A URL over the limit is dropped,
    since a truncated link would point somewhere else.
    """
    title, url = payload.title, payload.url
    if len(title) > TITLE_MAX_LENGTH:
        title = title[: TITLE_MAX_LENGTH - 1] + "…"
    if url and len(url) > URL_MAX_LENGTH:
        logger.warning("Notification url too long, dropping it", merchant_id=payload.merchant_id, length=len(url))
        url = None
    if (title, url) == (payload.title, payload.url):
        return payload
    return replace(payload, title=title, url=url)


def dispatch_notification(payload: NotificationPayload, now: datetime | None = None) -> bool:
    """Deliver ``payload`` on the merchant's resolved channel(s).

    Returns True only when the notification was sent on every attempted channel.
    Returns False, without raising, when the delivery log cannot be written.
    """
    payload = fit_payload(payload)
    notification_type = parse_notification_type(payload.notification_type)
    decision = resolve(payload.merchant_id, notification_type, now=now)

    if not decision.can_send:
        logger.info(
            "Notification suppressed",
            merchant_id=payload.merchant_id,
            notification_type=notification_type.value,
            reason=decision.suppressed_reason,
        )
        return False

    try:
        log = open_log(
            merchant_id=payload.merchant_id,
            notification_type=notification_type.value,
            channel=decision.channel.value,
            title=payload.title,
            body=payload.body,
            url=payload.url,
            metadata=payload.metadata,
        )
    except Exception as exc:
        logger.error(
            "Could not open notification log",
            merchant_id=payload.merchant_id,
            notification_type=notification_type.value,
            error=str(exc),
            exc_info=True,
        )
        return False

    errors: list[str] = []
    push_succeeded = True
    email_succeeded = True

    if decision.channel.includes_push():
        try:
            fanout = deliver_push(
                payload.merchant_id,
                PushMessage(title=payload.title, body=payload.body, url=payload.url or "/"),
                notification_log_id=str(log.id),
            )
            push_succeeded = fanout.success
            if not push_succeeded:
                errors.append(f"push: {'; '.join(fanout.errors)}")
        except Exception as exc:
            logger.error("Push dispatch failed", merchant_id=payload.merchant_id, error=str(exc), exc_info=True)
            push_succeeded = False
            errors.append(f"push: {exc}")

    if decision.channel.includes_email():
        try:
            email_succeeded, email_error = _send_email(payload)
            if not email_succeeded:
                errors.append(f"email: {email_error}")
        except Exception as exc:
            logger.error("Email dispatch failed", merchant_id=payload.merchant_id, error=str(exc), exc_info=True)
            email_succeeded = False
            errors.append(f"email: {exc}")

    success = push_succeeded and email_succeeded
    try:
        complete_log(log, success, error=" | ".join(errors) if errors else None)
    except Exception as exc:
        logger.error(
            "Could not complete notification log",
            merchant_id=payload.merchant_id,
            notification_log_id=str(log.id),
            error=str(exc),
            exc_info=True,
        )
        return False

    logger.info(
        "Notification dispatched" if success else "Notification dispatch failed",
        merchant_id=payload.merchant_id,
        notification_type=notification_type.value,
        channel=decision.channel.value,
        notification_log_id=str(log.id),
    )
    return success


# ---------------------------------------------------------------------------
# Command entry point
# ---------------------------------------------------------------------------
@notifications.command(part_of="NotificationLog")
class DispatchNotification:
    """Ask the engine to alert a merchant. Handler returns the dispatch result."""

    merchant_id: Identifier(required=True)
    notification_type: String(required=True, max_length=50)
    title: String(required=True, max_length=255)
    body: Text(required=True)
    url: String(max_length=500)
    context_data: Dict()


@notifications.command_handler(part_of=NotificationLog)
class DispatchNotificationHandler:
    @handle(DispatchNotification)
    def dispatch(self, command: DispatchNotification) -> bool:
        try:
            notification_type = parse_notification_type(command.notification_type)
        except ValueError:
            raise ValidationError(
                {"notification_type": [f"Unknown notification type: {command.notification_type}"]}
            ) from None

        return dispatch_notification(
            NotificationPayload(
                merchant_id=str(command.merchant_id),
                notification_type=notification_type,
                title=command.title,
                body=command.body,
                url=command.url,
                metadata=command.context_data or {},
            )
        )
