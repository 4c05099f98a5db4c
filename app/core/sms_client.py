"""
Twilio SMS client used for tuition reminders.
Talks to the Twilio Messages REST endpoint over httpx. Raises SmsDeliveryError on any failure,
including missing configuration, so callers can log the message text.
"""
import logging

import httpx

from app.core.config import settings
from app.core.exceptions import SmsDeliveryError

logger = logging.getLogger(__name__)

_sms_client = None


class TwilioSmsClient:
    def __init__(
        self,
        account_sid: str,
        auth_token: str,
        from_number: str,
        base_url: str = "https://api.twilio.com",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.account_sid = (account_sid or "").strip()
        self.auth_token = (auth_token or "").strip()
        self.from_number = (from_number or "").strip()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}/2010-04-01/Accounts/{self.account_sid}/Messages.json"

    def _check_configured(self) -> None:
        if not self.from_number or self.from_number.startswith("<"):
            raise SmsDeliveryError(
                "Twilio FROM number not configured. Set TWILIO_FROM_NUMBER or replace placeholder."
            )
        if not self.account_sid or not self.auth_token:
            raise SmsDeliveryError("Twilio credentials not configured. Set TWILIO_ACCOUNT_SID and TWILIO_AUTH_TOKEN.")

    async def send(self, to: str, body: str) -> str:
        """Send one SMS. Returns the Twilio message SID."""
        if not to:
            raise SmsDeliveryError("Missing 'to' for SMS")
        if not body:
            raise SmsDeliveryError("Missing 'body' for SMS")
        self._check_configured()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    self.messages_url,
                    auth=(self.account_sid, self.auth_token),
                    data={"From": self.from_number, "To": to, "Body": body},
                )
        except httpx.HTTPError as e:
            raise SmsDeliveryError(f"SMS gateway unreachable: {e}") from e

        if response.status_code >= 400:
            try:
                detail = response.json().get("message")
            except ValueError:
                detail = None
            raise SmsDeliveryError(detail or f"SMS gateway returned HTTP {response.status_code}")

        try:
            sid = response.json().get("sid", "")
        except ValueError:
            sid = ""
        logger.debug("Twilio accepted message %s to %s", sid, to)
        return sid


def get_sms_client() -> TwilioSmsClient:
    """Lazily build the Twilio client from settings."""
    global _sms_client
    if _sms_client is None:
        _sms_client = TwilioSmsClient(
            account_sid=settings.TWILIO_ACCOUNT_SID,
            auth_token=settings.TWILIO_AUTH_TOKEN,
            from_number=settings.TWILIO_FROM_NUMBER,
            base_url=settings.TWILIO_API_BASE_URL,
            timeout=settings.SMS_TIMEOUT_SECONDS,
        )
    return _sms_client
