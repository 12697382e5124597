import logging
import secrets
from functools import lru_cache
from typing import Optional

import requests

from .config import settings
from .errors import TransportError, ValidationError

logger = logging.getLogger(__name__)

OTP_MIN = 100000
OTP_MAX = 999999


class HttpMailTransport:
    """Sends plain-text mail through a provider's JSON ``/emails`` endpoint."""

    def __init__(self, api_url: str, api_key: Optional[str], timeout: float = 10):
        self.api_url = api_url
        self.api_key = api_key
        self.timeout = timeout

    def send(self, sender: str, to: str, subject: str, text: str) -> None:
        if not self.api_key:
            raise TransportError("Mail transport is not configured")
        payload = {"from": sender, "to": [to], "subject": subject, "text": text}
        headers = {"Authorization": f"Bearer {self.api_key}"}
        try:
            resp = requests.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("[Mail] Request to %s failed: %s", self.api_url, e)
            raise TransportError("Failed to send email") from e
        if resp.status_code >= 300:
            logger.warning("[Mail] Error %s: %s", resp.status_code, resp.text[:100])
            raise TransportError("Failed to send email")


@lru_cache(maxsize=1)
def get_mailer() -> HttpMailTransport:
    return HttpMailTransport(settings.mail_api_url, settings.mail_api_key, settings.mail_timeout)


def generate_otp() -> str:
    return str(secrets.randbelow(OTP_MAX - OTP_MIN + 1) + OTP_MIN)


def send_otp(transport, email: str) -> str:
    """Generate a code and mail it to ``email``. Returns the code."""
    if not email:
        raise ValidationError("Email is required")
    otp = generate_otp()
    transport.send(
        sender=settings.mail_from,
        to=email,
        subject=settings.otp_subject,
        text=f"Your OTP code is {otp}",
    )
    logger.info("OTP sent to %s", email)
    return otp
