"""FastAPI routes for the Reporting domain."""

from fastapi import APIRouter
from protean.utils.globals import current_domain
from reporting.api.schemas import (
    CreateReportRequest,
    ProcessDueRequest,
    ProcessDueResponse,
    ReportIdResponse,
    ReportListResponse,
    ReportResponse,
    SendReportResponse,
    StatusResponse,
    UpdateReportRequest,
)
from reporting.report.management import (
    ActivateScheduledReport,
    CreateScheduledReport,
    DeactivateScheduledReport,
    DeleteScheduledReport,
    UpdateScheduledReport,
)
from reporting.report.processing import ProcessDueReports, SendScheduledReport
from reporting.report.queries import get_report, list_reports

router = APIRouter(prefix="/reports", tags=["reports"])


def _to_response(report) -> ReportResponse:
    return ReportResponse(
        report_id=str(report.id),
        merchant_id=str(report.merchant_id),
        name=report.name,
        kind=report.kind,
        schedule_day=report.schedule_day,
        schedule_time=report.schedule_time,
        interval_days=report.interval_days,
        delivery_method=report.delivery_method,
        recipient_email=report.recipient_email,
        recipient_phone=report.recipient_phone,
        include_conversations=report.include_conversations,
        include_orders=report.include_orders,
        include_customers=report.include_customers,
        is_active=report.is_active,
        last_sent_at=report.last_sent_at,
        next_send_at=report.next_send_at,
        last_run_status=report.last_run_status,
        last_error=report.last_error,
    )


@router.post("", status_code=201, response_model=ReportIdResponse)
async def create_report(body: CreateReportRequest) -> ReportIdResponse:
    command = CreateScheduledReport(**body.model_dump(exclude_none=True))
    result = current_domain.process(command, asynchronous=False)
    return ReportIdResponse(report_id=result)


@router.get("", response_model=ReportListResponse)
async def get_reports(merchant_id: str, active_only: bool = False) -> ReportListResponse:
    return ReportListResponse(reports=[_to_response(r) for r in list_reports(merchant_id, active_only=active_only)])


# Registered before "/{report_id}" routes so "maintenance" is not read as an id
@router.post("/maintenance/process-due", response_model=ProcessDueResponse)
async def process_due(body: ProcessDueRequest | None = None) -> ProcessDueResponse:
    """Run every due report now. Meant for operators and for testing."""
    command = ProcessDueReports(as_of=body.as_of if body else None)
    summary = current_domain.process(command, asynchronous=False)
    return ProcessDueResponse(**summary)


@router.get("/{report_id}", response_model=ReportResponse)
async def get_single_report(report_id: str) -> ReportResponse:
    return _to_response(get_report(report_id))


@router.patch("/{report_id}", response_model=StatusResponse)
async def update_report(report_id: str, body: UpdateReportRequest) -> StatusResponse:
    command = UpdateScheduledReport(report_id=report_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.put("/{report_id}/activate", response_model=StatusResponse)
async def activate_report(report_id: str, merchant_id: str) -> StatusResponse:
    current_domain.process(ActivateScheduledReport(report_id=report_id, merchant_id=merchant_id), asynchronous=False)
    return StatusResponse()


@router.put("/{report_id}/deactivate", response_model=StatusResponse)
async def deactivate_report(report_id: str, merchant_id: str) -> StatusResponse:
    current_domain.process(DeactivateScheduledReport(report_id=report_id, merchant_id=merchant_id), asynchronous=False)
    return StatusResponse()


@router.delete("/{report_id}", response_model=StatusResponse)
async def delete_report(report_id: str, merchant_id: str) -> StatusResponse:
    current_domain.process(DeleteScheduledReport(report_id=report_id, merchant_id=merchant_id), asynchronous=False)
    return StatusResponse()


@router.post("/{report_id}/send", response_model=SendReportResponse)
async def send_report_now(report_id: str) -> SendReportResponse:
    """Send one report immediately. The report is rescheduled either way."""
    result = current_domain.process(SendScheduledReport(report_id=report_id), asynchronous=False)
    return SendReportResponse(sent=bool(result))
