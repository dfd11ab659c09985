"""ScheduledReport aggregate: a merchant's recurring metrics report.

Run cycle, driven by the report engine:
    eligible → generating → delivering → rescheduled

A report is eligible when it is active and ``next_send_at`` is unset or
not after now. Every run, delivered or not, sets ``last_sent_at`` and moves
``next_send_at`` strictly into the future.
"""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text
from reporting.domain import reporting
from reporting.report.events import (
    ScheduledReportActivationChanged,
    ScheduledReportCreated,
    ScheduledReportRun,
    ScheduledReportUpdated,
)
from reporting.report.recurrence import (
    DEFAULT_SCHEDULE_TIME,
    ReportKind,
    next_send_time,
    parse_schedule_time,
)

# Parked value for next_send_at while a run holds the claim on a report
CLAIM_SENTINEL = datetime(9999, 12, 31, tzinfo=UTC)


class DeliveryMethod(Enum):
    EMAIL = "email"
    MESSAGING = "messaging"
    BOTH = "both"


class RunStatus(Enum):
    DELIVERED = "delivered"
    FAILED = "failed"


_SCHEDULE_FIELDS = {"kind", "schedule_day", "schedule_time", "interval_days"}
_UPDATABLE_FIELDS = _SCHEDULE_FIELDS | {
    "name",
    "delivery_method",
    "recipient_email",
    "recipient_phone",
    "include_conversations",
    "include_orders",
    "include_customers",
}


def _normalize(moment: datetime | None) -> datetime | None:
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


@reporting.aggregate
class ScheduledReport:
    merchant_id: Identifier(required=True)
    name: String(max_length=255, required=True)

    # Recurrence
    kind: String(choices=ReportKind, required=True)
    schedule_day: Integer()  # weekly: 0=Sunday..6; monthly: 1..31
    schedule_time: String(max_length=5, default=DEFAULT_SCHEDULE_TIME)
    interval_days: Integer(default=1, min_value=1)  # custom only

    # Delivery
    delivery_method: String(choices=DeliveryMethod, default=DeliveryMethod.EMAIL.value)
    recipient_email: String(max_length=255)
    recipient_phone: String(max_length=32)

    # Content
    include_conversations: Boolean(default=True)
    include_orders: Boolean(default=True)
    include_customers: Boolean(default=True)

    is_active: Boolean(default=True)
    last_sent_at: DateTime()
    next_send_at: DateTime()
    last_run_status: String(choices=RunStatus)
    last_error: Text()

    created_at: DateTime()
    updated_at: DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        merchant_id,
        name,
        kind,
        delivery_method=DeliveryMethod.EMAIL.value,
        schedule_day=None,
        schedule_time=DEFAULT_SCHEDULE_TIME,
        interval_days=1,
        recipient_email=None,
        recipient_phone=None,
        include_conversations=True,
        include_orders=True,
        include_customers=True,
        now=None,
    ):
        now = now or datetime.now(UTC)
        report = cls(
            merchant_id=merchant_id,
            name=name,
            kind=kind,
            schedule_day=schedule_day,
            schedule_time=schedule_time or DEFAULT_SCHEDULE_TIME,
            interval_days=interval_days or 1,
            delivery_method=delivery_method,
            recipient_email=recipient_email,
            recipient_phone=recipient_phone,
            include_conversations=include_conversations,
            include_orders=include_orders,
            include_customers=include_customers,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        report._validate()
        report.next_send_at = report.compute_next_send_at(now)

        report.raise_(
            ScheduledReportCreated(
                report_id=str(report.id),
                merchant_id=str(merchant_id),
                name=name,
                kind=report.kind,
                delivery_method=report.delivery_method,
                next_send_at=report.next_send_at,
                created_at=now,
            )
        )
        return report

    # -------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------
    def _validate(self):
        errors = {}

        try:
            parse_schedule_time(self.schedule_time)
        except ValueError as exc:
            errors["schedule_time"] = [str(exc)]

        kind = ReportKind(self.kind)
        if kind == ReportKind.WEEKLY and self.schedule_day is not None and not 0 <= self.schedule_day <= 6:
            errors["schedule_day"] = ["Weekly reports need a day between 0 (Sunday) and 6 (Saturday)"]
        if kind == ReportKind.MONTHLY and self.schedule_day is not None and not 1 <= self.schedule_day <= 31:
            errors["schedule_day"] = ["Monthly reports need a day of month between 1 and 31"]

        method = DeliveryMethod(self.delivery_method)
        if method == DeliveryMethod.EMAIL and not self.recipient_email:
            errors["recipient_email"] = ["Email delivery needs a recipient email"]
        if method == DeliveryMethod.MESSAGING and not self.recipient_phone:
            errors["recipient_phone"] = ["Messaging delivery needs a recipient phone"]
        if method == DeliveryMethod.BOTH and not (self.recipient_email or self.recipient_phone):
            errors["recipients"] = ["At least one recipient is required"]

        if errors:
            raise ValidationError(errors)

    # -------------------------------------------------------------------
    # Scheduling
    # -------------------------------------------------------------------
    def compute_next_send_at(self, now: datetime) -> datetime:
        return next_send_time(
            self.kind,
            _normalize(now),
            schedule_time=self.schedule_time,
            schedule_day=self.schedule_day,
            interval_days=self.interval_days,
        )

    def is_due(self, now: datetime) -> bool:
        if not self.is_active:
            return False
        return self.next_send_at is None or _normalize(self.next_send_at) <= _normalize(now)

    def claim(self):
        """Park the report so another engine instance's due-scan skips it.

        Returns the previous ``next_send_at`` for ``release_claim``.
        """
        previous = self.next_send_at
        self.next_send_at = CLAIM_SENTINEL
        return previous

    def release_claim(self, previous_next_send_at):
        self.next_send_at = previous_next_send_at

    def record_run(self, delivered: bool, now: datetime, error: str | None = None):
        """Finish a run: stamp it and reschedule, whatever the outcome."""
        now = _normalize(now)
        self.last_sent_at = now
        self.next_send_at = self.compute_next_send_at(now)
        self.last_run_status = (RunStatus.DELIVERED if delivered else RunStatus.FAILED).value
        self.last_error = None if delivered else error
        self.updated_at = now

        self.raise_(
            ScheduledReportRun(
                report_id=str(self.id),
                merchant_id=str(self.merchant_id),
                delivered=delivered,
                error=self.last_error,
                sent_at=now,
                next_send_at=self.next_send_at,
            )
        )

    # -------------------------------------------------------------------
    # Management
    # -------------------------------------------------------------------
    def update(self, now=None, **changes):
        changes = {key: value for key, value in changes.items() if value is not None}
        if not changes:
            raise ValidationError({"report": ["At least one field must be provided"]})

        unknown = sorted(set(changes) - _UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError({"report": [f"Unknown report fields: {', '.join(unknown)}"]})

        now = now or datetime.now(UTC)
        for field_name, value in changes.items():
            setattr(self, field_name, value)
        self._validate()

        if _SCHEDULE_FIELDS & set(changes):
            self.next_send_at = self.compute_next_send_at(now)
        self.updated_at = now

        self.raise_(
            ScheduledReportUpdated(
                report_id=str(self.id),
                merchant_id=str(self.merchant_id),
                changes=json.dumps(changes),
                next_send_at=self.next_send_at,
                updated_at=now,
            )
        )

    def activate(self, now=None):
        if self.is_active:
            return
        now = now or datetime.now(UTC)
        self.is_active = True
        self.next_send_at = self.compute_next_send_at(now)
        self.updated_at = now
        self._raise_activation(now)

    def deactivate(self, now=None):
        if not self.is_active:
            return
        now = now or datetime.now(UTC)
        self.is_active = False
        self.updated_at = now
        self._raise_activation(now)

    def _raise_activation(self, now):
        self.raise_(
            ScheduledReportActivationChanged(
                report_id=str(self.id),
                merchant_id=str(self.merchant_id),
                is_active=self.is_active,
                changed_at=now,
            )
        )
