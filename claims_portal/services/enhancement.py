import logging
import re
from dataclasses import dataclass
from typing import Optional

import httpx

from ..config import get_settings
from ..constants import ENHANCE_TEXT_MIN

logger = logging.getLogger(__name__)

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"

SYSTEM_PROMPT = """You are an insurance claim writing assistant. Rewrite the incident description
so it is clear, detailed and professional while staying accurate. Do not embellish or add
information that is not in the original.
Focus on:
- a clear chronological account of events
- specific details about the extent and location of damage
- a professional, neutral tone
- correct grammar and structure
Return only the rewritten description."""


class EnhancementInputError(ValueError):
    pass


@dataclass
class EnhancementResult:
    text: str
    source: str  # "ai" or "fallback"
    warning: Optional[str] = None


def format_text_fallback(text: str) -> str:
    """Tidy a description without AI: capitalise each sentence and end with a full stop."""
    sentences = [s.strip() for s in re.split(r"\.\s+", text.strip())]
    formatted = ". ".join(s[0].upper() + s[1:] for s in sentences if s)
    return formatted if formatted.endswith(".") else f"{formatted}."


def _warning_for(error: Exception) -> Optional[str]:
    if isinstance(error, httpx.HTTPStatusError):
        if error.response.status_code == 401:
            return "AI service authentication failed. Please contact support."
        if error.response.status_code == 429:
            return "AI service temporarily unavailable due to rate limits. Please try again in a moment."
        return None
    if isinstance(error, (httpx.ConnectError, httpx.TimeoutException)):
        return "AI service is temporarily unavailable. Please try again later."
    return None


class DescriptionEnhancer:
    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, transport: Optional[httpx.BaseTransport] = None):
        settings = get_settings()
        self.api_key = settings.openai_api_key if api_key is None else api_key
        self.model = model or settings.openai_model
        self.timeout = settings.http_timeout
        self.transport = transport

    def enhance(self, text: str) -> EnhancementResult:
        if not text or len(text.strip()) < ENHANCE_TEXT_MIN:
            raise EnhancementInputError(f"Text must be at least {ENHANCE_TEXT_MIN} characters to enhance")

        if not self.api_key:
            logger.info("OpenAI not configured; using fallback enhancement")
            return EnhancementResult(format_text_fallback(text), "fallback")

        try:
            enhanced = self._llm_enhance(text)
        except (httpx.HTTPError, KeyError, IndexError, ValueError) as e:
            warning = _warning_for(e)
            logger.warning(f"AI enhancement failed, falling back to template: {e}")
            return EnhancementResult(format_text_fallback(text), "fallback", warning)

        if not enhanced:
            logger.warning("AI returned empty response; using fallback enhancement")
            return EnhancementResult(format_text_fallback(text), "fallback")
        return EnhancementResult(enhanced, "ai")

    def _llm_enhance(self, text: str) -> str:
        with httpx.Client(transport=self.transport, timeout=self.timeout) as client:
            resp = client.post(
                OPENAI_CHAT_URL,
                headers={"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"},
                json={
                    "model": self.model,
                    "messages": [
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": f"Please enhance this insurance claim incident description:\n\n{text}"},
                    ],
                    "temperature": 0.3,
                },
            )
            resp.raise_for_status()
            content = resp.json()["choices"][0]["message"]["content"]
        return (content or "").strip()


def get_enhancer() -> DescriptionEnhancer:
    return DescriptionEnhancer()
