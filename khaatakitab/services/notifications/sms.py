"""
SMS Gateway Client

Sends text messages through an HTTP gateway:

    POST {SMS_API_URL}/send-sms   {"to": "+9198...", "message": "..."}
    ->   {"success": true} | {"success": false, "error": "..."}

The client is synchronous (requests); the notification service hands it
to a background worker thread so it never holds up the caller.
"""

from typing import Optional

import requests
import structlog
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from khaatakitab.config import SmsSettings, get_settings


logger = structlog.get_logger(__name__)


class NotificationError(Exception):
    """Base exception for notification delivery."""
    pass


class SmsDeliveryError(NotificationError):
    """The SMS gateway could not be reached or refused the message."""
    pass


class SmsGatewayClient:
    """
    Thin wrapper around the SMS gateway HTTP API.

    Connection errors and timeouts are retried with exponential backoff.
    Any answer from the gateway (an error status, an unreadable body or
    success=false) is final and is not retried.
    """

    def __init__(
        self,
        settings: Optional[SmsSettings] = None,
        session: Optional[requests.Session] = None,
    ):
        self._settings = settings or get_settings().sms
        self._session = session or requests.Session()

    @property
    def is_configured(self) -> bool:
        return self._settings.is_configured

    @property
    def endpoint(self) -> str:
        return f"{self._settings.api_url}/send-sms"

    @retry(
        retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=8),
        reraise=True,
    )
    def _post(self, payload: dict) -> requests.Response:
        # Retried only while the gateway has not answered
        return self._session.post(
            self.endpoint,
            json=payload,
            timeout=self._settings.timeout_seconds,
        )

    def send_sms(self, phone_number: str, message: str) -> bool:
        """
        Send one SMS.

        Returns:
            True when the gateway accepted the message

        Raises:
            SmsDeliveryError: If unconfigured, unreachable, or rejected
        """
        if not self.is_configured:
            raise SmsDeliveryError("SMS gateway is not configured (set SMS_API_URL)")

        try:
            response = self._post({"to": phone_number, "message": message})
        except requests.RequestException as e:
            raise SmsDeliveryError(f"Network error sending SMS: {e}") from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise SmsDeliveryError(f"SMS gateway returned an error status: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise SmsDeliveryError(f"SMS gateway sent an unreadable response: {e}") from e

        if not isinstance(data, dict) or not data.get("success"):
            error = data.get("error") if isinstance(data, dict) else data
            raise SmsDeliveryError(f"SMS gateway rejected message: {error}")

        logger.info("sms_sent", to=phone_number[-4:].rjust(len(phone_number), "*"))
        return True
