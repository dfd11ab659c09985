"""Read helpers for scheduled reports."""

from protean.utils.globals import current_domain
from reporting.report.report import ScheduledReport


def list_reports(merchant_id: str, active_only: bool = False) -> list[ScheduledReport]:
    filters = {"merchant_id": str(merchant_id)}
    if active_only:
        filters["is_active"] = True
    reports = current_domain.repository_for(ScheduledReport)._dao.query.filter(**filters).all().items
    return sorted(reports, key=lambda r: r.name)


def get_report(report_id: str) -> ScheduledReport:
    return current_domain.repository_for(ScheduledReport).get(report_id)
