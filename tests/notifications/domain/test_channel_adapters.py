"""Tests for channel adapters and the adapter registry."""

import json
import os
from unittest import mock

import httpx
import pytest
from notifications.channel import get_channel, reset_channels, set_channel
from notifications.channel.fake_email import FakeEmailAdapter
from notifications.channel.fake_messaging import FakeMessagingAdapter
from notifications.channel.fake_push import FakePushAdapter
from notifications.channel.http_email import HttpEmailAdapter
from notifications.channel.push_port import STATUS_FAILED, STATUS_GONE, STATUS_SENT, PushMessage, PushTarget
from notifications.notification_types import DeliveryChannel

TARGET = PushTarget(endpoint="https://push.example.com/ep-1", p256dh="p", auth="a")


class TestPushMessage:
    def test_payload_defaults(self):
        payload = PushMessage(title="Hi", body="There").to_payload()
        assert payload["icon"] == "/logo.png"
        assert payload["badge"] == "/badge.png"
        assert payload["tag"] == "merchant-notification"
        assert payload["data"] == {"url": "/"}
        assert payload["requireInteraction"] is False


class TestFakePushAdapter:
    def setup_method(self):
        self.adapter = FakePushAdapter()

    def test_send_records_push(self):
        result = self.adapter.send(TARGET, PushMessage(title="Hi", body="There"))
        assert result["status"] == STATUS_SENT
        assert self.adapter.sent_pushes[0]["endpoint"] == TARGET.endpoint

    def test_gone_endpoint(self):
        self.adapter.mark_gone(TARGET.endpoint)
        result = self.adapter.send(TARGET, PushMessage(title="Hi", body="There"))
        assert result["status"] == STATUS_GONE
        assert result["status_code"] == 410

    def test_failing_endpoint(self):
        self.adapter.fail_endpoint(TARGET.endpoint, "timeout")
        result = self.adapter.send(TARGET, PushMessage(title="Hi", body="There"))
        assert result["status"] == STATUS_FAILED
        assert result["error"] == "timeout"
        assert self.adapter.attempts == [TARGET.endpoint]


class TestFakeEmailAdapter:
    def test_failure_is_recorded_separately(self):
        adapter = FakeEmailAdapter()
        adapter.configure(should_succeed=False, failure_reason="SMTP error")
        result = adapter.send(to="a@b.com", subject="Hi", body="Hello")
        assert result == {"message_id": None, "status": "failed", "error": "SMTP error"}
        assert adapter.sent_emails == []
        assert adapter.failed_attempts[0]["to"] == "a@b.com"


class TestFakeMessagingAdapter:
    def test_send_records_message(self):
        adapter = FakeMessagingAdapter()
        result = adapter.send(to="+966500000000", body="Weekly report")
        assert result["status"] == "sent"
        assert adapter.sent_messages[0]["to"] == "+966500000000"


class TestHttpEmailAdapter:
    def _adapter(self, handler):
        client = httpx.Client(transport=httpx.MockTransport(handler))
        return HttpEmailAdapter(api_url="https://mail.example.com/send", sender="alerts@example.com", client=client)

    def test_posts_json_message(self):
        captured = {}

        def handler(request):
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json={"id": "msg-1"})

        result = self._adapter(handler).send(to="m@example.com", subject="Hi", body="Text", html_body="<p>Text</p>")
        assert result == {"message_id": "msg-1", "status": "sent"}
        assert captured["body"]["from"] == "alerts@example.com"
        assert captured["body"]["html"] == "<p>Text</p>"

    def test_error_status_is_a_failed_result(self):
        result = self._adapter(lambda request: httpx.Response(503)).send(to="m@example.com", subject="Hi", body="x")
        assert result["status"] == "failed"
        assert "503" in result["error"]

    def test_transport_error_is_a_failed_result(self):
        def handler(request):
            raise httpx.ConnectError("connection refused")

        result = self._adapter(handler).send(to="m@example.com", subject="Hi", body="x")
        assert result["status"] == "failed"

    def test_from_env_requires_url(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError):
                HttpEmailAdapter.from_env()


class TestRegistry:
    def test_defaults_to_fakes(self):
        assert isinstance(get_channel(DeliveryChannel.PUSH), FakePushAdapter)
        assert isinstance(get_channel("email"), FakeEmailAdapter)
        assert isinstance(get_channel("messaging"), FakeMessagingAdapter)

    def test_singleton_per_channel(self):
        assert get_channel("email") is get_channel(DeliveryChannel.EMAIL)

    def test_set_channel_overrides(self):
        adapter = FakeEmailAdapter()
        set_channel(DeliveryChannel.EMAIL, adapter)
        assert get_channel("email") is adapter

    def test_unknown_adapter_name(self):
        reset_channels()
        with mock.patch.dict(os.environ, {"EMAIL_ADAPTER": "carrier-pigeon"}):
            with pytest.raises(ValueError):
                get_channel("email")

    def test_unknown_channel(self):
        with pytest.raises(ValueError):
            get_channel("fax")
