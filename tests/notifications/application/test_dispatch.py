"""Application tests for multi-channel dispatch."""

import json
from datetime import UTC, datetime

from notifications.channel import get_channel, set_channel
from notifications.directory import get_directory
from notifications.notification import dispatch
from notifications.notification.dispatch import NotificationPayload, dispatch_notification, fit_payload
from notifications.notification.helpers import notify_new_message
from notifications.notification.notification import (
    TITLE_MAX_LENGTH,
    URL_MAX_LENGTH,
    NotificationLog,
    NotificationStatus,
)
from notifications.notification.queries import list_notification_logs, list_push_logs
from notifications.notification_types import NotificationType
from notifications.preference.preference import NotificationPreference
from notifications.push.fanout import active_subscriptions
from notifications.push.subscription import PushSubscription
from protean import current_domain

NOON = datetime(2025, 6, 4, 12, 0, tzinfo=UTC)
NIGHT = datetime(2025, 6, 4, 23, 30, tzinfo=UTC)


def _preference(merchant_id, **changes):
    pref = NotificationPreference.create_default(merchant_id=merchant_id)
    if changes:
        pref.update(**changes)
    current_domain.repository_for(NotificationPreference).add(pref)
    return pref


def _subscribe(merchant_id, endpoint):
    subscription = PushSubscription.register(merchant_id=merchant_id, endpoint=endpoint, p256dh="p", auth="a")
    current_domain.repository_for(PushSubscription).add(subscription)
    return subscription


def _payload(merchant_id, notification_type=NotificationType.NEW_ORDER, **overrides):
    defaults = {
        "merchant_id": merchant_id,
        "notification_type": notification_type,
        "title": "New order received",
        "body": "Order #1001 was placed for 120 SAR.",
        "url": "/merchant/orders/o-1",
    }
    defaults.update(overrides)
    return NotificationPayload(**defaults)


def _logs(merchant_id):
    return current_domain.repository_for(NotificationLog)._dao.query.filter(merchant_id=merchant_id).all().items


class TestSuppression:
    def test_disabled_type_writes_nothing_and_calls_no_channel(self):
        _preference("m-a", new_order_enabled=False)
        _subscribe("m-a", "https://push.example.com/a")
        get_directory().set_notification_email("m-a", "owner@example.com")

        assert dispatch_notification(_payload("m-a"), now=NOON) is False

        assert _logs("m-a") == []
        assert get_channel("push").attempts == []
        assert get_channel("email").sent_emails == []
        assert get_channel("email").failed_attempts == []

    def test_quiet_hours_hold_back_new_message(self):
        pref = _preference("m-b")
        pref.set_quiet_hours("22:00", "08:00")
        current_domain.repository_for(NotificationPreference).add(pref)

        assert dispatch_notification(_payload("m-b", NotificationType.NEW_MESSAGE), now=NIGHT) is False
        assert _logs("m-b") == []

    def test_disconnect_alert_goes_out_during_quiet_hours(self):
        pref = _preference("m-b2", preferred_channel="email")
        pref.set_quiet_hours("22:00", "08:00")
        current_domain.repository_for(NotificationPreference).add(pref)
        get_directory().set_notification_email("m-b2", "owner@example.com")

        assert dispatch_notification(_payload("m-b2", NotificationType.DISCONNECT_ALERT), now=NIGHT) is True
        assert len(get_channel("email").sent_emails) == 1


class TestPushFanout:
    def test_one_gone_one_sent_counts_as_sent(self):
        _preference("m-c")
        gone = _subscribe("m-c", "https://push.example.com/gone")
        _subscribe("m-c", "https://push.example.com/live")
        get_channel("push").mark_gone("https://push.example.com/gone")

        assert dispatch_notification(_payload("m-c"), now=NOON) is True

        [log] = _logs("m-c")
        assert log.status == NotificationStatus.SENT.value
        assert log.sent_at is not None

        push_logs = list_push_logs(str(log.id))
        assert sorted(p.status for p in push_logs) == ["failed", "sent"]
        failed = next(p for p in push_logs if p.status == "failed")
        assert failed.status_code == 410

        refreshed = current_domain.repository_for(PushSubscription).get(gone.id)
        assert refreshed.is_active is False

    def test_every_subscription_failing_fails_the_dispatch(self):
        _preference("m-c2", preferred_channel="push")
        _subscribe("m-c2", "https://push.example.com/1")
        _subscribe("m-c2", "https://push.example.com/2")
        get_channel("push").configure(should_succeed=False, failure_reason="timeout")

        assert dispatch_notification(_payload("m-c2"), now=NOON) is False
        [log] = _logs("m-c2")
        assert log.status == NotificationStatus.FAILED.value
        assert "push: timeout" in log.error

    def test_no_subscriptions_counts_as_push_success(self):
        _preference("m-c3", preferred_channel="push")
        assert dispatch_notification(_payload("m-c3"), now=NOON) is True
        assert _logs("m-c3")[0].status == NotificationStatus.SENT.value

    def test_inactive_subscriptions_are_skipped(self):
        _preference("m-c4", preferred_channel="push")
        subscription = _subscribe("m-c4", "https://push.example.com/old")
        subscription.deactivate()
        current_domain.repository_for(PushSubscription).add(subscription)

        dispatch_notification(_payload("m-c4"), now=NOON)
        assert get_channel("push").attempts == []

    def test_adapter_exception_is_a_failed_attempt(self):
        class ExplodingPush:
            def send(self, target, message):
                raise RuntimeError("socket closed")

        set_channel("push", ExplodingPush())
        _preference("m-c5", preferred_channel="push")
        _subscribe("m-c5", "https://push.example.com/x")

        assert dispatch_notification(_payload("m-c5"), now=NOON) is False
        assert "socket closed" in _logs("m-c5")[0].error

    def test_attempts_run_one_at_a_time_in_subscription_order(self):
        class RecordingPush:
            def __init__(self):
                self.in_flight = 0
                self.most_in_flight = 0
                self.endpoints = []

            def send(self, target, message):
                self.in_flight += 1
                self.most_in_flight = max(self.most_in_flight, self.in_flight)
                self.endpoints.append(target.endpoint)
                self.in_flight -= 1
                return {"message_id": "push-1", "status": "sent"}

        recorder = RecordingPush()
        set_channel("push", recorder)
        _preference("m-c6", preferred_channel="push")
        for name in ("a", "b", "c"):
            _subscribe("m-c6", f"https://push.example.com/{name}")

        dispatch_notification(_payload("m-c6"), now=NOON)

        assert recorder.endpoints == [s.endpoint for s in active_subscriptions("m-c6")]
        assert recorder.most_in_flight == 1


class TestEmail:
    def test_email_uses_directory_address(self):
        _preference("m-e", preferred_channel="email")
        get_directory().set_notification_email("m-e", "owner@example.com")

        assert dispatch_notification(_payload("m-e"), now=NOON) is True
        [email] = get_channel("email").sent_emails
        assert email["to"] == "owner@example.com"
        assert email["subject"] == "New order received"
        assert "New order received" in email["html_body"]

    def test_preference_address_overrides_directory(self):
        _preference("m-e2", preferred_channel="email", notification_email="alerts@shop.example.com")
        get_directory().set_notification_email("m-e2", "owner@example.com")

        dispatch_notification(_payload("m-e2"), now=NOON)
        assert get_channel("email").sent_emails[0]["to"] == "alerts@shop.example.com"

    def test_no_address_skips_email_without_failing(self):
        _preference("m-e3", preferred_channel="email")
        assert dispatch_notification(_payload("m-e3"), now=NOON) is True
        assert get_channel("email").sent_emails == []

    def test_email_failure_fails_dispatch_even_when_push_succeeds(self):
        _preference("m-e4")
        _subscribe("m-e4", "https://push.example.com/ok")
        get_directory().set_notification_email("m-e4", "owner@example.com")
        get_channel("email").configure(should_succeed=False, failure_reason="SMTP error")

        assert dispatch_notification(_payload("m-e4"), now=NOON) is False
        [log] = _logs("m-e4")
        assert log.status == NotificationStatus.FAILED.value
        assert log.error == "email: SMTP error"
        assert len(get_channel("push").sent_pushes) == 1


class TestLogContent:
    def test_log_keeps_metadata_and_channel(self):
        _preference("m-l", preferred_channel="push")
        dispatch_notification(_payload("m-l", metadata={"order_id": "o-1"}), now=NOON)

        [log] = list_notification_logs("m-l")
        assert log.channel == "push"
        assert log.notification_type == "new_order"
        assert json.loads(log.context_data) == {"order_id": "o-1"}

    def test_list_filters_by_status(self):
        _preference("m-l2", preferred_channel="push")
        dispatch_notification(_payload("m-l2"), now=NOON)
        assert list_notification_logs("m-l2", status="failed") == []
        assert len(list_notification_logs("m-l2", status="sent")) == 1


class TestOversizedContent:
    def test_long_customer_name_is_cut_to_fit_the_log(self):
        assert notify_new_message("m-long", "c-1", "N" * 300, "hello") is True

        [log] = _logs("m-long")
        assert len(log.title) == TITLE_MAX_LENGTH
        assert log.title.endswith("…")
        assert log.status == NotificationStatus.SENT.value

    def test_overlong_url_is_dropped(self):
        _preference("m-long2", preferred_channel="push")
        _subscribe("m-long2", "https://push.example.com/long")

        assert dispatch_notification(_payload("m-long2", url="/" + "x" * URL_MAX_LENGTH), now=NOON) is True

        [log] = _logs("m-long2")
        assert log.url is None
        assert get_channel("push").sent_pushes[0]["payload"]["data"]["url"] == "/"

    def test_payload_within_limits_is_untouched(self):
        payload = _payload("m-long3")
        assert fit_payload(payload) is payload


class TestLogFailures:
    def test_log_that_cannot_be_opened_returns_false(self, monkeypatch):
        def broken_open_log(**kwargs):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(dispatch, "open_log", broken_open_log)
        _preference("m-f", preferred_channel="push")
        _subscribe("m-f", "https://push.example.com/f")

        assert dispatch_notification(_payload("m-f"), now=NOON) is False
        assert get_channel("push").attempts == []

    def test_log_that_cannot_be_completed_returns_false(self, monkeypatch):
        def broken_complete_log(log, success, error=None):
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(dispatch, "complete_log", broken_complete_log)
        _preference("m-f2", preferred_channel="push")

        assert dispatch_notification(_payload("m-f2"), now=NOON) is False
        [log] = _logs("m-f2")
        assert log.status == NotificationStatus.PENDING.value
