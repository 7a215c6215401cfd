from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from loguru import logger

from .config import Settings
from .exceptions import TranslationAuthFailed, TranslationRateLimited, TranslationUnitFailed


class Translator:
    """LibreTranslate client. One call translates one string from English."""

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None) -> None:
        self._url = settings.translate_url
        self._api_key = settings.translate_api_key
        self._timeout = settings.translate_timeout_sec
        self._owns_client = client is None
        self._client = client or httpx.Client()
        logger.info(
            "Translation client initialized (url={}, has_api_key={})",
            self._url, self.has_api_key,
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    def translate_text(self, text: str, target: str, *, source: str = "en") -> str:
        """
        Translate `text` into `target`. Returns "" when the response carries no translation.

        Raises TranslationAuthFailed (403 with a key), TranslationRateLimited (429),
        or TranslationUnitFailed for anything else that goes wrong.
        """
        payload: Dict[str, Any] = {
            "q": text,
            "source": source,
            "target": target,
            "format": "text",
        }
        if self._api_key:
            payload["api_key"] = self._api_key

        try:
            response = self._client.post(
                self._url,
                json=payload,
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            raise TranslationUnitFailed(text, f"{type(e).__name__}: {e}") from e

        status = response.status_code
        if status == 403:
            if self._api_key:
                logger.error("Translator rejected the configured API key")
                raise TranslationAuthFailed(
                    "Translation service authentication failed. Please check API key."
                )
            logger.warning("Translator refused an unauthenticated request; consider adding LIBRETRANSLATE_API_KEY")
            raise TranslationUnitFailed(text, "HTTP 403 (no API key)")
        if status == 429:
            logger.error("Translator rate limit exceeded")
            raise TranslationRateLimited(
                "Translation service rate limit exceeded. Please try again later."
            )
        if not response.is_success:
            raise TranslationUnitFailed(text, f"HTTP {status}")

        try:
            data = response.json()
        except ValueError as e:
            raise TranslationUnitFailed(text, f"invalid JSON ({e})") from e
        if not isinstance(data, dict):
            raise TranslationUnitFailed(text, "response is not an object")

        translated = data.get("translatedText")
        return translated if isinstance(translated, str) else ""

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "Translator":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
