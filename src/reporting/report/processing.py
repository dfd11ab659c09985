"""Scheduled-report engine: find due reports, generate, deliver, reschedule.

Reports are processed one at a time in the order the due-query returns them.
A failure in one report (metrics, rendering, transport, persistence) is
logged and counted but never stops the batch.

Delivery rule: a report counts as sent when ANY attempted channel succeeds.
This differs on purpose from notification dispatch, where every attempted
channel must succeed.
"""

import os
from datetime import UTC, datetime

import structlog
from notifications.channel import get_channel
from notifications.notification_types import DeliveryChannel
from protean.exceptions import ExpectedVersionError
from protean.fields import DateTime, Identifier
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from reporting.domain import reporting
from reporting.report.content import ReportContent, generate_report_content
from reporting.report.report import DeliveryMethod, ScheduledReport

logger = structlog.get_logger(__name__)


def claim_enabled() -> bool:
    return os.environ.get("REPORT_CLAIM_ENABLED", "false").lower() in ("1", "true", "yes")


def find_due_reports(now: datetime) -> list[ScheduledReport]:
    repo = current_domain.repository_for(ScheduledReport)
    active = repo._dao.query.filter(is_active=True).all().items
    return [report for report in active if report.is_due(now)]


def _attempt(channel: str, send) -> tuple[bool, str | None]:
    try:
        result = send()
    except Exception as exc:
        logger.exception("Report delivery raised", channel=channel)
        return False, f"{channel}: {exc}"
    if result.get("status") == "sent":
        return True, None
    return False, f"{channel}: {result.get('error') or 'delivery failed'}"


def deliver_report(report: ScheduledReport, content: ReportContent) -> tuple[bool, str | None]:
    """Send ``content`` on the report's configured channel(s).

    Returns (delivered, error summary). Channels without a recipient are not attempted.
    """
    method = DeliveryMethod(report.delivery_method)
    outcomes = []

    if method in (DeliveryMethod.EMAIL, DeliveryMethod.BOTH) and report.recipient_email:
        email = get_channel(DeliveryChannel.EMAIL)
        outcomes.append(
            _attempt(
                "email",
                lambda: email.send(
                    to=report.recipient_email,
                    subject=content.subject,
                    body=content.text,
                    html_body=content.html,
                ),
            )
        )

    if method in (DeliveryMethod.MESSAGING, DeliveryMethod.BOTH) and report.recipient_phone:
        messaging = get_channel(DeliveryChannel.MESSAGING)
        outcomes.append(_attempt("messaging", lambda: messaging.send(to=report.recipient_phone, body=content.text)))

    if not outcomes:
        return False, "no recipient configured"

    delivered = any(succeeded for succeeded, _ in outcomes)
    errors = [error for _, error in outcomes if error]
    return delivered, "; ".join(errors) or None


def send_report(report: ScheduledReport, now: datetime | None = None) -> bool:
    """Run one report and persist the outcome. Always reschedules."""
    now = now or datetime.now(UTC)
    log = logger.bind(report_id=str(report.id), merchant_id=str(report.merchant_id))

    try:
        content = generate_report_content(report, now)
        delivered, error = deliver_report(report, content)
    except Exception as exc:
        log.exception("Report generation failed")
        delivered, error = False, str(exc) or exc.__class__.__name__

    report.record_run(delivered, now, error)
    current_domain.repository_for(ScheduledReport).add(report)

    if delivered:
        log.info("Scheduled report sent", next_send_at=report.next_send_at.isoformat())
    else:
        log.warning("Scheduled report failed", error=error, next_send_at=report.next_send_at.isoformat())
    return delivered


def _run_claimed(report: ScheduledReport, now: datetime) -> bool | None:
    """Claim, then send. Returns None when another run holds a newer copy."""
    repo = current_domain.repository_for(ScheduledReport)
    previous = report.claim()
    try:
        repo.add(report)
    except ExpectedVersionError:
        logger.info("Report claimed by another run, skipping", report_id=str(report.id))
        return None
    try:
        return send_report(report, now)
    except Exception:
        report = repo.get(report.id)
        report.release_claim(previous)
        repo.add(report)
        raise


def process_due_reports(now: datetime | None = None) -> dict:
    """Process every due report once.

    Returns ``{"processed": n, "sent": n, "failed": n}``. With claiming on, a
    report that another run claimed first is skipped and left out of the counts.
    """
    now = now or datetime.now(UTC)
    due = find_due_reports(now)
    summary = {"processed": 0, "sent": 0, "failed": 0}
    use_claim = claim_enabled()

    for report in due:
        try:
            sent = _run_claimed(report, now) if use_claim else send_report(report, now)
        except Exception:
            logger.exception("Scheduled report processing failed", report_id=str(report.id))
            sent = False
        if sent is None:
            continue
        summary["processed"] += 1
        summary["sent" if sent else "failed"] += 1

    logger.info("Processed due reports", as_of=now.isoformat(), **summary)
    return summary


@reporting.command(part_of="ScheduledReport")
class ProcessDueReports:
    """Run every report that is due as of ``as_of`` (defaults to now)."""

    as_of: DateTime()


@reporting.command(part_of="ScheduledReport")
class SendScheduledReport:
    """Send one report immediately, whether or not it is due."""

    report_id: Identifier(required=True)


@reporting.command_handler(part_of=ScheduledReport)
class ReportProcessingHandler:
    @handle(ProcessDueReports)
    def process_due(self, command: ProcessDueReports):
        return process_due_reports(command.as_of)

    @handle(SendScheduledReport)
    def send_now(self, command: SendScheduledReport):
        report = current_domain.repository_for(ScheduledReport).get(command.report_id)
        return send_report(report)
