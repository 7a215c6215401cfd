from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

ITEMS_PER_PAGE = 20


@dataclass(frozen=True)
class Thumbnail:
    source: str
    width: int
    height: int

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "width": self.width, "height": self.height}


@dataclass(frozen=True)
class WikiPage:
    title: str
    extract: str
    thumbnail: Optional[Thumbnail] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"title": self.title, "extract": self.extract}
        if self.thumbnail is not None:
            out["thumbnail"] = self.thumbnail.to_dict()
        return out


@dataclass(frozen=True)
class DateSeparator:
    """Marks the start of one day's events in the flattened feed. `date` is MM/DD."""
    date: str

    type = "date_separator"

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "date": self.date}


@dataclass(frozen=True)
class Event:
    """A single historical event. BC years are negative."""
    text: str
    year: int
    pages: Optional[Tuple[WikiPage, ...]] = None

    type = "event"

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"type": self.type, "text": self.text, "year": self.year}
        if self.pages is not None:
            out["pages"] = [p.to_dict() for p in self.pages]
        return out


FeedItem = Union[DateSeparator, Event]


@dataclass(frozen=True)
class FeedContent:
    """
    One page of the backward-walked feed.

    WARNING: Do not change fields lightly. `to_dict` is the wire contract for callers.
    """
    page: int
    events: Tuple[FeedItem, ...]
    items_per_page: int = ITEMS_PER_PAGE
    language: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "page": self.page,
            "itemsPerPage": self.items_per_page,
            "events": [e.to_dict() for e in self.events],
        }
        if self.language is not None:
            out["language"] = self.language
        return out
