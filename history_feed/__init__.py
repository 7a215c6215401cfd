"""
history_feed

A small library that builds a paginated "on this day" feed of historical events and can
translate it into another language.

Core ideas:
- Input: a page number, optional start date (MM/DD), optional target language
- Process: walk back day by day → flatten with date separators → slice page → translate (optional)
- Output: FeedContent

Example
-------
from history_feed import HistoryFeed

with HistoryFeed() as feed:
    content = feed.get_translated_page(page=1, target="es")

for item in content.events:
    print(item.to_dict())
"""
from .config import Settings
from .core import HistoryFeed
from .exceptions import (
    FeedError,
    SourceUnavailable,
    TranslationAuthFailed,
    TranslationRateLimited,
    TranslationUnitFailed,
    UnsupportedLanguage,
)
from .models import ITEMS_PER_PAGE, DateSeparator, Event, FeedContent, FeedItem, Thumbnail, WikiPage
from .overlay import SUPPORTED_LANGUAGES

__all__ = [
    "HistoryFeed",
    "Settings",
    "FeedContent",
    "FeedItem",
    "DateSeparator",
    "Event",
    "WikiPage",
    "Thumbnail",
    "ITEMS_PER_PAGE",
    "SUPPORTED_LANGUAGES",
    "FeedError",
    "SourceUnavailable",
    "UnsupportedLanguage",
    "TranslationAuthFailed",
    "TranslationRateLimited",
    "TranslationUnitFailed",
]
