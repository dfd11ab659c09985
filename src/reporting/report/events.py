"""Domain events for the ScheduledReport aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String, Text
from reporting.domain import reporting


@reporting.event(part_of="ScheduledReport")
class ScheduledReportCreated:
    __version__ = 1

    report_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    name: String(required=True)
    kind: String(required=True)
    delivery_method: String(required=True)
    next_send_at: DateTime(required=True)
    created_at: DateTime(required=True)


@reporting.event(part_of="ScheduledReport")
class ScheduledReportUpdated:
    __version__ = 1

    report_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    changes: Text(required=True)  # JSON object of changed field -> new value
    next_send_at: DateTime()
    updated_at: DateTime(required=True)


@reporting.event(part_of="ScheduledReport")
class ScheduledReportActivationChanged:
    """A report was switched on or off."""

    __version__ = 1

    report_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    is_active: Boolean(required=True)
    changed_at: DateTime(required=True)


@reporting.event(part_of="ScheduledReport")
class ScheduledReportRun:
    """A report run finished, delivered or not, and was rescheduled."""

    __version__ = 1

    report_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    delivered: Boolean(required=True)
    error: Text()
    sent_at: DateTime(required=True)
    next_send_at: DateTime(required=True)
