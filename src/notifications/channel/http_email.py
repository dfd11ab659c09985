"""HTTP-API email adapter: posts messages to a transactional email service.

Configured from the environment:
    EMAIL_API_URL   endpoint accepting a JSON message (required)
    EMAIL_API_KEY   bearer token
    EMAIL_FROM      sender address
    EMAIL_TIMEOUT   request timeout in seconds (default 10)
"""

import os

import httpx
import structlog
from notifications.channel.email_port import EmailPort

logger = structlog.get_logger(__name__)


class HttpEmailAdapter(EmailPort):
    def __init__(
        self,
        api_url: str,
        api_key: str | None = None,
        sender: str = "alerts@localhost",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_url = api_url
        self.sender = sender
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = client or httpx.Client(timeout=timeout, headers=headers)

    @classmethod
    def from_env(cls) -> "HttpEmailAdapter":
        api_url = os.environ.get("EMAIL_API_URL")
        if not api_url:
            raise ValueError("EMAIL_API_URL must be set to use the http email adapter")
        return cls(
            api_url=api_url,
            api_key=os.environ.get("EMAIL_API_KEY"),
            sender=os.environ.get("EMAIL_FROM", "alerts@localhost"),
            timeout=float(os.environ.get("EMAIL_TIMEOUT", "10")),
        )

    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> dict:
        message = {"from": self.sender, "to": to, "subject": subject, "text": body}
        if html_body:
            message["html"] = html_body

        try:
            response = self._client.post(self.api_url, json=message)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            logger.warning("Email API rejected message", to=to, status_code=exc.response.status_code)
            return {"message_id": None, "status": "failed", "error": f"Email API returned {exc.response.status_code}"}
        except httpx.HTTPError as exc:
            logger.warning("Email API unreachable", to=to, error=str(exc))
            return {"message_id": None, "status": "failed", "error": str(exc)}

        message_id = response.json().get("id") if response.content else None
        return {"message_id": message_id, "status": "sent"}
