from __future__ import annotations

from typing import Any, Dict, List, Optional

from loguru import logger

from .exceptions import ParseError
from .models import Event, Thumbnail, WikiPage


def parse_thumbnail(raw: Any) -> Optional[Thumbnail]:
    """
    Map an upstream thumbnail dict to a Thumbnail.
    Returns None when absent or incomplete (missing source, non-positive size).
    """
    if not isinstance(raw, dict):
        return None
    source = raw.get("source")
    width = raw.get("width")
    height = raw.get("height")
    if not isinstance(source, str) or not source:
        return None
    if not isinstance(width, int) or isinstance(width, bool) or width <= 0:
        return None
    if not isinstance(height, int) or isinstance(height, bool) or height <= 0:
        return None
    return Thumbnail(source=source, width=width, height=height)


def parse_page(raw: Dict[str, Any]) -> WikiPage:
    title = raw.get("title")
    # The feed also carries `titles.normalized`; prefer it when the plain title is missing
    if not isinstance(title, str):
        titles = raw.get("titles") or {}
        title = titles.get("normalized") if isinstance(titles, dict) else None
    extract = raw.get("extract")
    return WikiPage(
        title=title if isinstance(title, str) else "",
        extract=extract if isinstance(extract, str) else "",
        thumbnail=parse_thumbnail(raw.get("thumbnail")),
    )


def parse_event(raw: Any, *, drop_last_page: bool = False) -> Event:
    """
    Map one upstream event record to an Event.

    Requires string `text` and integer `year`; `pages` is optional and kept in source order.
    With `drop_last_page`, the trailing page entry (usually the year article) is dropped.
    """
    if not isinstance(raw, dict):
        raise ParseError(f"Event record is not an object: {type(raw).__name__}")
    text = raw.get("text")
    year = raw.get("year")
    if not isinstance(text, str):
        raise ParseError("Event record lacks `text`")
    if not isinstance(year, int) or isinstance(year, bool):
        raise ParseError(f"Event record has invalid `year`: {year!r}")

    raw_pages = raw.get("pages")
    pages = None
    if isinstance(raw_pages, list):
        entries = [p for p in raw_pages if isinstance(p, dict)]
        if drop_last_page and entries:
            entries = entries[:-1]
        pages = tuple(parse_page(p) for p in entries)

    return Event(text=text, year=year, pages=pages)


def parse_events(payload: Dict[str, Any], *, drop_last_page: bool = False) -> List[Event]:
    """
    Map an `onthisday/events` payload to Events, preserving source order.

    A missing `events` key means zero events. Malformed records are skipped.
    """
    raw_events = payload.get("events")
    if raw_events is None:
        return []
    if not isinstance(raw_events, list):
        raise ParseError(f"`events` is not a list: {type(raw_events).__name__}")

    out: List[Event] = []
    for raw in raw_events:
        try:
            out.append(parse_event(raw, drop_last_page=drop_last_page))
        except ParseError as e:
            logger.debug("Skipping malformed event record: {}", e)
            continue
    return out
