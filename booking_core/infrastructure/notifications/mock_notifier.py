from __future__ import annotations

import logging
from dataclasses import dataclass

from booking_core.application.ports.notifications import NotificationPort


@dataclass(frozen=True)
class SentNotification:
    channel: str  # "email" or "sms"
    recipient: str
    subject: str | None
    body: str


class MockNotifier(NotificationPort):
    def __init__(self) -> None:
        self.sent: list[SentNotification] = []
        self._logger = logging.getLogger(__name__)

    def send_email(self, address: str, subject: str, body: str) -> None:
        self.sent.append(SentNotification("email", address, subject, body))
        self._logger.info("Mock email sent", extra={"recipient": address, "subject": subject})

    def send_sms(self, number: str, body: str) -> None:
        self.sent.append(SentNotification("sms", number, None, body))
        self._logger.info("Mock SMS sent", extra={"recipient": number})
