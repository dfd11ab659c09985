"""Fake email adapter: records emails in memory for test assertions."""

from uuid import uuid4

from notifications.channel.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    def __init__(self):
        self.sent_emails: list[dict] = []
        self.failed_attempts: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Email delivery failed"):
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> dict:
        record = {"to": to, "subject": subject, "body": body, "html_body": html_body}

        if not self.should_succeed:
            self.failed_attempts.append(record)
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        record["message_id"] = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append(record)
        return {"message_id": record["message_id"], "status": "sent"}

    def reset(self):
        self.sent_emails.clear()
        self.failed_attempts.clear()
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"
