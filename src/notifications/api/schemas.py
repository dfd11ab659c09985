"""Pydantic request/response models for the Notifications API.

API schemas are separate from Protean commands (anti-corruption pattern).
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Request Models
# ---------------------------------------------------------------------------
class UpdatePreferencesRequest(BaseModel):
    new_order_enabled: bool | None = None
    new_message_enabled: bool | None = None
    appointment_enabled: bool | None = None
    order_status_enabled: bool | None = None
    missed_message_enabled: bool | None = None
    disconnect_alert_enabled: bool | None = None
    low_stock_enabled: bool | None = None
    preferred_channel: str | None = Field(default=None, examples=["both"])
    instant_notifications: bool | None = None
    batching_enabled: bool | None = None
    batch_interval_minutes: int | None = Field(default=None, ge=1)
    notification_email: str | None = None


class SetQuietHoursRequest(BaseModel):
    start: str = Field(..., pattern=r"^\d{2}:\d{2}$", examples=["22:00"])
    end: str = Field(..., pattern=r"^\d{2}:\d{2}$", examples=["08:00"])


class UpdateGlobalSettingsRequest(BaseModel):
    new_order_enabled: bool | None = None
    new_message_enabled: bool | None = None
    appointment_enabled: bool | None = None
    order_status_enabled: bool | None = None
    missed_message_enabled: bool | None = None
    disconnect_alert_enabled: bool | None = None
    low_stock_enabled: bool | None = None
    weekly_report_enabled: bool | None = None
    weekly_report_day: int | None = Field(default=None, ge=0, le=6)
    weekly_report_time: str | None = Field(default=None, pattern=r"^\d{2}:\d{2}$")


class RegisterPushSubscriptionRequest(BaseModel):
    merchant_id: str
    endpoint: str = Field(..., min_length=1)
    p256dh: str = Field(..., min_length=1)
    auth: str = Field(..., min_length=1)
    user_agent: str | None = None


class DispatchRequest(BaseModel):
    merchant_id: str
    notification_type: str = Field(..., examples=["new_order"])
    title: str = Field(..., min_length=1, max_length=255)
    body: str = Field(..., min_length=1)
    url: str | None = None
    metadata: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class PreferencesResponse(BaseModel):
    preference_id: str
    merchant_id: str
    new_order_enabled: bool
    new_message_enabled: bool
    appointment_enabled: bool
    order_status_enabled: bool
    missed_message_enabled: bool
    disconnect_alert_enabled: bool
    low_stock_enabled: bool
    preferred_channel: str
    quiet_hours_enabled: bool
    quiet_hours_start: str | None = None
    quiet_hours_end: str | None = None
    instant_notifications: bool
    batching_enabled: bool
    batch_interval_minutes: int
    notification_email: str | None = None


class GlobalSettingsResponse(BaseModel):
    flags: dict[str, bool]
    weekly_report_day: int
    weekly_report_time: str


class SubscriptionIdResponse(BaseModel):
    subscription_id: str


class DispatchResponse(BaseModel):
    sent: bool


class NotificationLogResponse(BaseModel):
    notification_log_id: str
    notification_type: str
    channel: str
    title: str
    body: str
    url: str | None = None
    status: str
    error: str | None = None
    sent_at: datetime | None = None
    created_at: datetime | None = None


class NotificationLogListResponse(BaseModel):
    logs: list[NotificationLogResponse]


class NotificationStatsResponse(BaseModel):
    merchant_id: str
    total: int = 0
    pending: int = 0
    sent: int = 0
    failed: int = 0
    by_type: dict[str, int] = {}
