"""Scheduled report CRUD commands + handler."""

import structlog
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain
from protean.utils.mixins import handle
from reporting.domain import reporting
from reporting.report.recurrence import DEFAULT_SCHEDULE_TIME
from reporting.report.report import ScheduledReport

logger = structlog.get_logger(__name__)

_UPDATE_FIELDS = (
    "name",
    "kind",
    "schedule_day",
    "schedule_time",
    "interval_days",
    "delivery_method",
    "recipient_email",
    "recipient_phone",
    "include_conversations",
    "include_orders",
    "include_customers",
)


@reporting.command(part_of="ScheduledReport")
class CreateScheduledReport:
    merchant_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    kind: String(required=True, max_length=20)
    schedule_day: Integer()
    schedule_time: String(max_length=5, default=DEFAULT_SCHEDULE_TIME)
    interval_days: Integer(min_value=1, default=1)
    delivery_method: String(max_length=20, default="email")
    recipient_email: String(max_length=255)
    recipient_phone: String(max_length=32)
    include_conversations: Boolean(default=True)
    include_orders: Boolean(default=True)
    include_customers: Boolean(default=True)


@reporting.command(part_of="ScheduledReport")
class UpdateScheduledReport:
    """Partial update; only the fields provided change."""

    report_id: Identifier(required=True)
    merchant_id: Identifier(required=True)
    name: String(max_length=255)
    kind: String(max_length=20)
    schedule_day: Integer()
    schedule_time: String(max_length=5)
    interval_days: Integer(min_value=1)
    delivery_method: String(max_length=20)
    recipient_email: String(max_length=255)
    recipient_phone: String(max_length=32)
    include_conversations: Boolean()
    include_orders: Boolean()
    include_customers: Boolean()


@reporting.command(part_of="ScheduledReport")
class ActivateScheduledReport:
    report_id: Identifier(required=True)
    merchant_id: Identifier(required=True)


@reporting.command(part_of="ScheduledReport")
class DeactivateScheduledReport:
    report_id: Identifier(required=True)
    merchant_id: Identifier(required=True)


@reporting.command(part_of="ScheduledReport")
class DeleteScheduledReport:
    report_id: Identifier(required=True)
    merchant_id: Identifier(required=True)


def _owned_report(repo, report_id, merchant_id) -> ScheduledReport:
    report = repo.get(report_id)
    if str(report.merchant_id) != str(merchant_id):
        raise ValidationError({"report_id": ["Report does not belong to this merchant"]})
    return report


@reporting.command_handler(part_of=ScheduledReport)
class ScheduledReportHandler:
    @handle(CreateScheduledReport)
    def create(self, command: CreateScheduledReport):
        report = ScheduledReport.create(
            merchant_id=str(command.merchant_id),
            name=command.name,
            kind=command.kind,
            schedule_day=command.schedule_day,
            schedule_time=command.schedule_time,
            interval_days=command.interval_days,
            delivery_method=command.delivery_method,
            recipient_email=command.recipient_email,
            recipient_phone=command.recipient_phone,
            include_conversations=command.include_conversations,
            include_orders=command.include_orders,
            include_customers=command.include_customers,
        )
        current_domain.repository_for(ScheduledReport).add(report)
        logger.info("Scheduled report created", report_id=str(report.id), merchant_id=str(report.merchant_id))
        return str(report.id)

    @handle(UpdateScheduledReport)
    def update(self, command: UpdateScheduledReport):
        repo = current_domain.repository_for(ScheduledReport)
        report = _owned_report(repo, command.report_id, command.merchant_id)
        report.update(**{name: getattr(command, name) for name in _UPDATE_FIELDS})
        repo.add(report)

    @handle(ActivateScheduledReport)
    def activate(self, command: ActivateScheduledReport):
        repo = current_domain.repository_for(ScheduledReport)
        report = _owned_report(repo, command.report_id, command.merchant_id)
        report.activate()
        repo.add(report)

    @handle(DeactivateScheduledReport)
    def deactivate(self, command: DeactivateScheduledReport):
        repo = current_domain.repository_for(ScheduledReport)
        report = _owned_report(repo, command.report_id, command.merchant_id)
        report.deactivate()
        repo.add(report)

    @handle(DeleteScheduledReport)
    def delete(self, command: DeleteScheduledReport):
        repo = current_domain.repository_for(ScheduledReport)
        report = _owned_report(repo, command.report_id, command.merchant_id)
        repo._dao.delete(report)
        logger.info("Scheduled report deleted", report_id=str(command.report_id))
