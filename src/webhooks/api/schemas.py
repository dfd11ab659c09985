"""Pydantic response models for the Webhooks API."""

from datetime import datetime

from pydantic import BaseModel


class WebhookAcceptedResponse(BaseModel):
    status: str = "accepted"
    verification_skipped: bool = False


class SecurityLogResponse(BaseModel):
    security_log_id: str
    merchant_id: str | None = None
    platform: str
    ip_address: str | None = None
    signature_valid: bool
    request_path: str | None = None
    request_method: str | None = None
    error_message: str | None = None
    created_at: datetime | None = None


class SecurityLogListResponse(BaseModel):
    logs: list[SecurityLogResponse]
