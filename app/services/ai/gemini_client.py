"""
Gemini REST client.

Calls the Generative Language API `generateContent` endpoint over httpx and
parses the model's JSON answer.
"""
import json
import logging
import re
from typing import Optional, Any

import httpx

from app.config import settings


logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


class GeminiError(Exception):
    """Raised when the model call fails or returns unusable output."""
    pass


def strip_code_fences(text: str) -> str:
    """Remove Markdown ```json fences the model tends to wrap answers in."""
    return _CODE_FENCE.sub("", text).strip()


class GeminiClient:
    """Thin async client for a single Gemini model."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GEMINI_API_KEY
        self.model = model or settings.GEMINI_MODEL
        self.base_url = (base_url or settings.GEMINI_API_URL).rstrip("/")
        self.timeout = timeout or settings.GEMINI_TIMEOUT_SECONDS
        self.transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    async def generate_text(self, prompt: str) -> str:
        """Send a prompt and return the first candidate's text."""
        if not self.is_configured:
            raise GeminiError("GEMINI_API_KEY is not configured")

        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(url, params={"key": self.api_key}, json=payload)
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise GeminiError(f"Gemini request failed: {e}") from e

        try:
            data = response.json()
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GeminiError("Gemini response has no candidate text") from e

    async def generate_json(self, prompt: str) -> Any:
        """Send a prompt and parse the answer as JSON."""
        text = await self.generate_text(prompt)
        try:
            return json.loads(strip_code_fences(text))
        except json.JSONDecodeError as e:
            raise GeminiError(f"Gemini returned malformed JSON: {text[:200]!r}") from e
