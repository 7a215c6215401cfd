import threading
from datetime import date
from typing import Dict, Iterable, List, Optional

import pytest

from history_feed.config import Settings
from history_feed.exceptions import SourceUnavailable
from history_feed.models import Event, FeedContent, DateSeparator, Thumbnail, WikiPage


def make_events(n: int, tag: str = "e", year: int = 1900) -> List[Event]:
    return [Event(text=f"{tag}{i}", year=year + i) for i in range(n)]


class ScriptedSource:
    """Fake event source: days map MM/DD -> events; days in `failing` raise SourceUnavailable."""

    def __init__(self, days: Optional[Dict[str, List[Event]]] = None, failing: Iterable[str] = ()) -> None:
        self.days = days or {}
        self.failing = set(failing)
        self.calls: List[str] = []

    def fetch_events(self, day: str) -> List[Event]:
        self.calls.append(day)
        if day in self.failing:
            raise SourceUnavailable(day, "boom")
        return list(self.days.get(day, []))


class RecordingTranslator:
    """Fake translator: prefixes text with the target code; `responses` overrides per input text."""

    def __init__(self, responses=None) -> None:
        self.responses = responses or {}
        self.calls: List[tuple] = []
        self._lock = threading.Lock()

    def translate_text(self, text: str, target: str) -> str:
        with self._lock:
            self.calls.append((text, target))
        if text in self.responses:
            res = self.responses[text]
            if isinstance(res, Exception):
                raise res
            return res
        return f"[{target}] {text}"


@pytest.fixture
def today():
    return date(2024, 3, 3)


@pytest.fixture
def settings():
    return Settings(
        wikipedia_api_url="https://wiki.test/feed/v1/wikipedia",
        retry_delay_sec=0.0,
        translate_url="https://translate.test/translate",
    )


@pytest.fixture
def sample_payload():
    return {
        "events": [
            {
                "text": "Julius Caesar is assassinated on the Ides of March.",
                "year": -44,
                "pages": [
                    {
                        "title": "Assassination of Julius Caesar",
                        "extract": "Julius Caesar was assassinated by a group of senators.",
                        "thumbnail": {"source": "https://img.test/caesar.jpg", "width": 800, "height": 600},
                    },
                    {"title": "44 BC", "extract": "Year 44 BC."},
                ],
            },
            {"text": "Something else happens.", "year": 1969},
        ]
    }


@pytest.fixture
def sample_content():
    return FeedContent(
        page=1,
        events=(
            DateSeparator(date="03/15"),
            Event(
                text="Caesar is assassinated.",
                year=-44,
                pages=(
                    WikiPage(
                        title="Assassination of Julius Caesar",
                        extract="Caesar was killed by senators.",
                        thumbnail=Thumbnail(source="https://img.test/c.jpg", width=800, height=600),
                    ),
                ),
            ),
            Event(text="Apollo mission.", year=1969),
            DateSeparator(date="03/14"),
            Event(text="Einstein is born.", year=1879, pages=()),
        ),
    )
