import logging
import re

import httpx

from ..config import get_settings

logger = logging.getLogger(__name__)

INTELLISMS_API_URL = "https://mc5.smartmessagingservices.net/services/rest/message/sendSingle2"

# IntelliSMS reports 10 for an accepted message
ACCEPTED_MESSAGE_STATUS = 10


def normalize_uk_phone(phone: str) -> str:
    """Strip separators and convert a 0-prefixed UK number to 44-prefixed international form."""
    cleaned = re.sub(r"[\s\-+()]", "", phone or "")
    if re.fullmatch(r"0\d{9,10}", cleaned):
        cleaned = "44" + cleaned[1:]
    return cleaned


class SmsService:
    @staticmethod
    def send(to_phone: str, message: str) -> bool:
        settings = get_settings()
        if not settings.intellisms_username or not settings.intellisms_password:
            logger.info(f"SMS not sent (no IntelliSMS credentials): to={to_phone}")
            return False

        recipient = normalize_uk_phone(to_phone)
        try:
            resp = httpx.get(
                INTELLISMS_API_URL,
                params={
                    "username": settings.intellisms_username,
                    "password": settings.intellisms_password,
                    "recipient": recipient,
                    "sender": settings.intellisms_sender_id,
                    "text": message,
                    "replyTo": "log",
                    "encoding": "gsm",
                },
                headers={"Accept": "application/json"},
                timeout=settings.http_timeout,
            )
            resp.raise_for_status()
            status = resp.json().get("messageStatus")
            if status is not None and status != ACCEPTED_MESSAGE_STATUS:
                logger.warning(f"IntelliSMS message status {status} for recipient={recipient}")
            logger.info(f"SMS sent: to={recipient}")
            return True
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"SMS send failed: to={recipient} error={e}")
            return False
