"""FastAPI routes for the Notifications domain.

Thin adapters that translate HTTP requests into domain commands.
No business logic: just schema→command→response translation.
"""

import json

from fastapi import APIRouter
from notifications.api.schemas import (
    DispatchRequest,
    DispatchResponse,
    GlobalSettingsResponse,
    NotificationLogListResponse,
    NotificationLogResponse,
    NotificationStatsResponse,
    PreferencesResponse,
    RegisterPushSubscriptionRequest,
    SetQuietHoursRequest,
    StatusResponse,
    SubscriptionIdResponse,
    UpdateGlobalSettingsRequest,
    UpdatePreferencesRequest,
)
from notifications.notification.dispatch import DispatchNotification
from notifications.notification.queries import list_notification_logs
from notifications.preference.management import (
    DisableQuietHours,
    SetQuietHours,
    UpdateNotificationPreferences,
)
from notifications.preference.resolver import get_or_create_preference
from notifications.projections.notification_stats import NotificationStats
from notifications.push.registration import RegisterPushSubscription, RemovePushSubscription
from notifications.settings.cache import get_global_settings
from notifications.settings.management import UpdateGlobalSettings
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

router = APIRouter(prefix="/notifications", tags=["notifications"])


# ---------------------------------------------------------------------------
# Preferences
# ---------------------------------------------------------------------------
@router.get("/preferences/{merchant_id}", response_model=PreferencesResponse)
async def get_preferences(merchant_id: str) -> PreferencesResponse:
    """Get a merchant's notification preferences, creating defaults on first read."""
    pref = get_or_create_preference(merchant_id)
    return PreferencesResponse(
        preference_id=str(pref.id),
        merchant_id=str(pref.merchant_id),
        new_order_enabled=pref.new_order_enabled,
        new_message_enabled=pref.new_message_enabled,
        appointment_enabled=pref.appointment_enabled,
        order_status_enabled=pref.order_status_enabled,
        missed_message_enabled=pref.missed_message_enabled,
        disconnect_alert_enabled=pref.disconnect_alert_enabled,
        low_stock_enabled=pref.low_stock_enabled,
        preferred_channel=pref.preferred_channel,
        quiet_hours_enabled=pref.quiet_hours_enabled,
        quiet_hours_start=pref.quiet_hours_start,
        quiet_hours_end=pref.quiet_hours_end,
        instant_notifications=pref.instant_notifications,
        batching_enabled=pref.batching_enabled,
        batch_interval_minutes=pref.batch_interval_minutes,
        notification_email=pref.notification_email,
    )


@router.put("/preferences/{merchant_id}", response_model=StatusResponse)
async def update_preferences(merchant_id: str, body: UpdatePreferencesRequest) -> StatusResponse:
    """Partially update a merchant's notification preferences."""
    command = UpdateNotificationPreferences(merchant_id=merchant_id, **body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.put("/preferences/{merchant_id}/quiet-hours", response_model=StatusResponse)
async def set_quiet_hours(merchant_id: str, body: SetQuietHoursRequest) -> StatusResponse:
    """Set and enable a merchant's do-not-disturb window."""
    command = SetQuietHours(merchant_id=merchant_id, start=body.start, end=body.end)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@router.delete("/preferences/{merchant_id}/quiet-hours", response_model=StatusResponse)
async def disable_quiet_hours(merchant_id: str) -> StatusResponse:
    """Switch off a merchant's do-not-disturb window."""
    command = DisableQuietHours(merchant_id=merchant_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Global settings
# ---------------------------------------------------------------------------
@router.get("/settings", response_model=GlobalSettingsResponse)
async def get_settings() -> GlobalSettingsResponse:
    settings = get_global_settings()
    return GlobalSettingsResponse(
        flags=dict(settings.flags),
        weekly_report_day=settings.weekly_report_day,
        weekly_report_time=settings.weekly_report_time,
    )


@router.put("/settings", response_model=StatusResponse)
async def update_settings(body: UpdateGlobalSettingsRequest) -> StatusResponse:
    command = UpdateGlobalSettings(**body.model_dump(exclude_none=True))
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Push subscriptions
# ---------------------------------------------------------------------------
@router.post("/push-subscriptions", status_code=201, response_model=SubscriptionIdResponse)
async def register_push_subscription(body: RegisterPushSubscriptionRequest) -> SubscriptionIdResponse:
    command = RegisterPushSubscription(
        merchant_id=body.merchant_id,
        endpoint=body.endpoint,
        p256dh=body.p256dh,
        auth=body.auth,
        user_agent=body.user_agent,
    )
    result = current_domain.process(command, asynchronous=False)
    return SubscriptionIdResponse(subscription_id=result)


@router.delete("/push-subscriptions/{subscription_id}", response_model=StatusResponse)
async def remove_push_subscription(subscription_id: str, merchant_id: str) -> StatusResponse:
    command = RemovePushSubscription(merchant_id=merchant_id, subscription_id=subscription_id)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------
@router.post("/dispatch", response_model=DispatchResponse)
async def dispatch(body: DispatchRequest) -> DispatchResponse:
    """Alert a merchant. ``sent`` is False when suppressed or when a channel failed."""
    command = DispatchNotification(
        merchant_id=body.merchant_id,
        notification_type=body.notification_type,
        title=body.title,
        body=body.body,
        url=body.url,
        context_data=body.metadata,
    )
    result = current_domain.process(command, asynchronous=False)
    return DispatchResponse(sent=bool(result))


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------
@router.get("/{merchant_id}/logs", response_model=NotificationLogListResponse)
async def get_notification_logs(
    merchant_id: str,
    notification_type: str | None = None,
    status: str | None = None,
    limit: int = 50,
) -> NotificationLogListResponse:
    logs = list_notification_logs(merchant_id, notification_type=notification_type, status=status, limit=limit)
    return NotificationLogListResponse(
        logs=[
            NotificationLogResponse(
                notification_log_id=str(log.id),
                notification_type=log.notification_type,
                channel=log.channel,
                title=log.title,
                body=log.body,
                url=log.url,
                status=log.status,
                error=log.error,
                sent_at=log.sent_at,
                created_at=log.created_at,
            )
            for log in logs
        ]
    )


@router.get("/{merchant_id}/stats", response_model=NotificationStatsResponse)
async def get_notification_stats(merchant_id: str) -> NotificationStatsResponse:
    try:
        stats = current_domain.repository_for(NotificationStats).get(merchant_id)
    except ObjectNotFoundError:
        return NotificationStatsResponse(merchant_id=merchant_id)

    return NotificationStatsResponse(
        merchant_id=str(stats.merchant_id),
        total=stats.total,
        pending=stats.pending,
        sent=stats.sent,
        failed=stats.failed,
        by_type=json.loads(stats.by_type) if stats.by_type else {},
    )
