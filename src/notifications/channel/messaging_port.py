"""Messaging channel port: plain-text delivery to a phone number (WhatsApp)."""

from abc import ABC, abstractmethod


class MessagingPort(ABC):
    @abstractmethod
    def send(self, to: str, body: str) -> dict:
        """Send a text message to an E.164 phone number.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
