"""Pydantic request/response models for the Reporting API."""

from datetime import datetime

from pydantic import BaseModel, Field


class CreateReportRequest(BaseModel):
    merchant_id: str
    name: str = Field(..., min_length=1, max_length=255)
    kind: str = Field(..., examples=["weekly"])
    schedule_day: int | None = Field(default=None, ge=0, le=31)
    schedule_time: str = Field(default="09:00", pattern=r"^\d{2}:\d{2}$")
    interval_days: int = Field(default=1, ge=1)
    delivery_method: str = Field(default="email", examples=["both"])
    recipient_email: str | None = None
    recipient_phone: str | None = None
    include_conversations: bool = True
    include_orders: bool = True
    include_customers: bool = True


class UpdateReportRequest(BaseModel):
    merchant_id: str
    name: str | None = Field(default=None, min_length=1, max_length=255)
    kind: str | None = None
    schedule_day: int | None = Field(default=None, ge=0, le=31)
    schedule_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")
    interval_days: int | None = Field(default=None, ge=1)
    delivery_method: str | None = None
    recipient_email: str | None = None
    recipient_phone: str | None = None
    include_conversations: bool | None = None
    include_orders: bool | None = None
    include_customers: bool | None = None


class ProcessDueRequest(BaseModel):
    as_of: datetime | None = None


class ReportResponse(BaseModel):
    report_id: str
    merchant_id: str
    name: str
    kind: str
    schedule_day: int | None = None
    schedule_time: str
    interval_days: int
    delivery_method: str
    recipient_email: str | None = None
    recipient_phone: str | None = None
    include_conversations: bool
    include_orders: bool
    include_customers: bool
    is_active: bool
    last_sent_at: datetime | None = None
    next_send_at: datetime | None = None
    last_run_status: str | None = None
    last_error: str | None = None


class ReportListResponse(BaseModel):
    reports: list[ReportResponse]


class ReportIdResponse(BaseModel):
    report_id: str


class SendReportResponse(BaseModel):
    sent: bool


class ProcessDueResponse(BaseModel):
    processed: int
    sent: int
    failed: int


class StatusResponse(BaseModel):
    status: str = "ok"
