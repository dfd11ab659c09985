"""Fake push adapter: records pushes in memory and simulates dead endpoints."""

from uuid import uuid4

from notifications.channel.push_port import (
    STATUS_FAILED,
    STATUS_GONE,
    STATUS_SENT,
    PushMessage,
    PushPort,
    PushTarget,
)


class FakePushAdapter(PushPort):
    """Push adapter for tests.

    ``configure()`` sets the default outcome; ``mark_gone()`` and
    ``fail_endpoint()`` override it for individual endpoints.
    """

    def __init__(self):
        self.sent_pushes: list[dict] = []
        self.attempts: list[str] = []
        self.should_succeed = True
        self.failure_reason = "Push delivery failed"
        self._gone_endpoints: set[str] = set()
        self._failing_endpoints: dict[str, str] = {}

    def configure(self, should_succeed: bool = True, failure_reason: str = "Push delivery failed"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def mark_gone(self, endpoint: str):
        """Make the push service answer 410 Gone for this endpoint."""
        self._gone_endpoints.add(endpoint)

    def fail_endpoint(self, endpoint: str, reason: str = "Push delivery failed"):
        self._failing_endpoints[endpoint] = reason

    def send(self, target: PushTarget, message: PushMessage) -> dict:
        self.attempts.append(target.endpoint)

        if target.endpoint in self._gone_endpoints:
            return {
                "message_id": None,
                "status": STATUS_GONE,
                "status_code": 410,
                "error": "Push subscription has expired or been unsubscribed",
            }

        if target.endpoint in self._failing_endpoints or not self.should_succeed:
            return {
                "message_id": None,
                "status": STATUS_FAILED,
                "error": self._failing_endpoints.get(target.endpoint, self.failure_reason),
            }

        message_id = f"push-{uuid4().hex[:12]}"
        self.sent_pushes.append(
            {
                "message_id": message_id,
                "endpoint": target.endpoint,
                "payload": message.to_payload(),
            }
        )
        return {"message_id": message_id, "status": STATUS_SENT}

    def reset(self):
        self.sent_pushes.clear()
        self.attempts.clear()
        self._gone_endpoints.clear()
        self._failing_endpoints.clear()
        self.should_succeed = True
        self.failure_reason = "Push delivery failed"
