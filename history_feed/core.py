from __future__ import annotations

import re
from typing import Optional, Tuple

from .aggregator import FeedAggregator, StartDate
from .config import Settings
from .exceptions import UnsupportedLanguage
from .fetcher import EventSource
from .models import ITEMS_PER_PAGE, FeedContent
from .overlay import TranslationOverlay
from .translator import Translator


_LANGUAGE_CODE = re.compile(r"^[a-z]{2}$")


class HistoryFeed:
    """
    High-level API: build a page of "on this day" events, optionally translated.

    Pipeline: walk back day by day → flatten with date separators → slice page → (translate)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        source: Optional[EventSource] = None,
        translator: Optional[Translator] = None,
        aggregator: Optional[FeedAggregator] = None,
        overlay: Optional[TranslationOverlay] = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        s = self.settings

        self._owned = []
        if aggregator is None:
            if source is None:
                source = EventSource(s)
                self._owned.append(source)
            aggregator = FeedAggregator(
                source,
                items_per_page=ITEMS_PER_PAGE,
                max_retries=s.max_retries,
                retry_delay_sec=s.retry_delay_sec,
                max_lookback_days=s.max_lookback_days,
            )
        if overlay is None:
            if translator is None:
                translator = Translator(s)
                self._owned.append(translator)
            overlay = TranslationOverlay(translator, max_workers=s.translate_max_workers)

        self.aggregator = aggregator
        self.overlay = overlay

    def get_page(self, page: Optional[int] = 1, start_date: StartDate = None) -> FeedContent:
        page = 1 if page is None else page
        events = self.aggregator.aggregate(page, start_date=start_date)
        return FeedContent(
            page=page,
            events=tuple(events),
            items_per_page=self.aggregator.items_per_page,
        )

    def get_translated_page(
        self,
        page: Optional[int] = 1,
        target: str = "en",
        start_date: StartDate = None,
    ) -> FeedContent:
        code = (target or "").strip().lower()
        if not _LANGUAGE_CODE.match(code):
            raise ValueError(f"Language must be a 2-letter code, got {target!r}")
        # Reject unknown targets before walking the source
        supported = self.overlay.supported_languages()
        if code not in supported:
            raise UnsupportedLanguage(code, supported)
        content = self.get_page(page, start_date=start_date)
        return self.overlay.translate(content, code)

    def supported_languages(self) -> Tuple[str, ...]:
        return self.overlay.supported_languages()

    def close(self) -> None:
        for client in self._owned:
            client.close()
        self._owned = []

    def __enter__(self) -> "HistoryFeed":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
