from __future__ import annotations

from typing import Iterable


class FeedError(Exception):
    """Base class for history_feed errors."""


class SourceUnavailable(FeedError):
    """Raised when the event source cannot deliver a day's events (network, status, or payload)."""

    def __init__(self, day: str, reason: str) -> None:
        super().__init__(f"Event source unavailable for {day}: {reason}")
        self.day = day
        self.reason = reason


class ParseError(FeedError):
    """Raised when an upstream event record cannot be mapped into an Event."""


class UnsupportedLanguage(FeedError):
    """Raised when a translation target is not in the supported catalog."""

    def __init__(self, language: str, supported: Iterable[str]) -> None:
        self.language = language
        self.supported = tuple(supported)
        super().__init__(
            f"Unsupported language: {language!r}. Supported languages: {', '.join(self.supported)}"
        )


class TranslationAuthFailed(FeedError):
    """Raised when the translator rejects a configured API key."""


class TranslationRateLimited(FeedError):
    """Raised when the translator reports its quota is exceeded."""


class TranslationUnitFailed(FeedError):
    """Raised when a single string could not be translated. Callers fall back to the original."""

    def __init__(self, text: str, reason: str) -> None:
        super().__init__(f"Translation failed: {reason}")
        self.text = text
        self.reason = reason
