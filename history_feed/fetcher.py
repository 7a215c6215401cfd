from __future__ import annotations

from typing import List, Optional

import httpx
from loguru import logger

from .config import Settings
from .exceptions import ParseError, SourceUnavailable
from .models import Event
from .parser import parse_events


class EventSource:
    """
    Client for the Wikimedia "on this day" events feed. One call fetches one calendar day.

    `fetch_events` raises SourceUnavailable on network/status/payload issues;
    `events_for` is the best-effort variant that maps those to an empty list.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.Client] = None) -> None:
        self._settings = settings
        self._owns_client = client is None
        self._client = client or httpx.Client()

    def url_for(self, day: str) -> str:
        base = self._settings.wikipedia_api_url.rstrip("/")
        return f"{base}/{self._settings.wikipedia_language}/onthisday/events/{day}"

    def fetch_events(self, day: str) -> List[Event]:
        """Fetch events for one `MM/DD` day, in the order the source returns them."""
        url = self.url_for(day)
        try:
            response = self._client.get(
                url,
                headers={
                    "User-Agent": self._settings.user_agent,
                    "Accept": "application/json",
                },
                timeout=self._settings.events_timeout_sec,
            )
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise SourceUnavailable(day, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SourceUnavailable(day, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise SourceUnavailable(day, f"invalid JSON ({e})") from e

        if not isinstance(payload, dict):
            raise SourceUnavailable(day, "payload is not an object")
        try:
            return parse_events(payload, drop_last_page=self._settings.drop_last_page)
        except ParseError as e:
            raise SourceUnavailable(day, str(e)) from e

    def events_for(self, day: str) -> List[Event]:
        """
        Best-effort fetch for callers outside the aggregator: failures are logged and give [].

        FeedAggregator calls `fetch_events` directly because it counts failed days.
        """
        try:
            return self.fetch_events(day)
        except SourceUnavailable as e:
            logger.warning("Failed to fetch events for {}: {}", day, e.reason)
            return []

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "EventSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
