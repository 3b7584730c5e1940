from __future__ import annotations

import logging

import httpx

from booking_core.application.exceptions import NotificationDeliveryError
from booking_core.application.ports.notifications import NotificationPort


class HttpNotifier(NotificationPort):
    """Posts email and SMS messages to an HTTP delivery gateway."""

    def __init__(
        self,
        email_endpoint: str | None,
        sms_endpoint: str | None,
        api_key: str | None = None,
        from_address: str = "no-reply@example.com",
        client: httpx.Client | None = None,
    ) -> None:
        self._email_endpoint = email_endpoint
        self._sms_endpoint = sms_endpoint
        self._api_key = api_key
        self._from_address = from_address
        self._client = client or httpx.Client(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    def send_email(self, address: str, subject: str, body: str) -> None:
        payload = {"from": self._from_address, "to": address, "subject": subject, "text": body}
        self._post(self._email_endpoint, payload, channel="email", recipient=address)

    def send_sms(self, number: str, body: str) -> None:
        self._post(self._sms_endpoint, {"to": number, "text": body}, channel="sms", recipient=number)

    def _post(self, endpoint: str | None, payload: dict, channel: str, recipient: str) -> None:
        if not endpoint:
            raise NotificationDeliveryError(f"No {channel} endpoint configured")

        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        try:
            resp = self._client.post(endpoint, json=payload, headers=headers)
        except httpx.HTTPError as e:
            self._logger.error(
                "Notification transport error",
                extra={"channel": channel, "recipient": recipient, "error": str(e)},
            )
            raise NotificationDeliveryError(f"{channel} delivery failed: {e}") from e

        if resp.status_code >= 400:
            self._logger.error(
                "Notification send failed",
                extra={
                    "channel": channel,
                    "status": resp.status_code,
                    "recipient": recipient,
                    "error": resp.text[:200],
                },
            )
            raise NotificationDeliveryError(f"{channel} delivery failed with status {resp.status_code}")

        self._logger.info("Notification delivered", extra={"channel": channel, "recipient": recipient})
