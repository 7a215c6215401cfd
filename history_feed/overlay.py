from __future__ import annotations

import concurrent.futures as _fut
from dataclasses import replace
from typing import Iterator, List, Protocol, Sequence, Tuple

from loguru import logger

from .exceptions import TranslationUnitFailed, UnsupportedLanguage
from .models import DateSeparator, Event, FeedContent, FeedItem


SOURCE_LANGUAGE = "en"
SUPPORTED_LANGUAGES: Tuple[str, ...] = (
    "en", "es", "fr", "de", "it", "pt", "ru", "zh", "ja", "ar", "uk",
)


class TextTranslator(Protocol):
    def translate_text(self, text: str, target: str) -> str:  # pragma: no cover - interface
        ...


def _collect_units(items: Sequence[FeedItem]) -> List[str]:
    """Flatten every translatable string in feed order: event text, then each page's title and extract."""
    units: List[str] = []
    for item in items:
        if isinstance(item, Event):
            units.append(item.text)
            for page in item.pages or ():
                units.append(page.title)
                units.append(page.extract)
    return units


def _rebuild(item: FeedItem, translated: Iterator[str]) -> FeedItem:
    if isinstance(item, DateSeparator):
        return item
    if isinstance(item, Event):
        text = next(translated)
        pages = None
        if item.pages is not None:
            pages = tuple(
                replace(page, title=next(translated), extract=next(translated))
                for page in item.pages
            )
        return replace(item, text=text, pages=pages)
    raise TypeError(f"Unknown feed item: {type(item).__name__}")


class TranslationOverlay:
    """
    Translates every human-readable field of a FeedContent into a target language.

    Each event text, page title and page extract is an independent unit; all units are sent
    concurrently and reattached to their original slots. Per-unit failures fall back to the
    original text; auth and rate-limit rejections abort the whole call.
    """

    def __init__(self, translator: TextTranslator, *, max_workers: int = 8) -> None:
        self.translator = translator
        self.max_workers = max(1, int(max_workers or 1))

    def supported_languages(self) -> Tuple[str, ...]:
        return SUPPORTED_LANGUAGES

    def translate(self, content: FeedContent, target: str) -> FeedContent:
        if target not in SUPPORTED_LANGUAGES:
            raise UnsupportedLanguage(target, SUPPORTED_LANGUAGES)
        if target == SOURCE_LANGUAGE:
            return content

        units = _collect_units(content.events)
        translated = self._translate_all(units, target)
        it = iter(translated)
        events = tuple(_rebuild(item, it) for item in content.events)
        return replace(content, events=events, language=target)

    def _one(self, text: str, target: str) -> str:
        try:
            result = self.translator.translate_text(text, target)
        except TranslationUnitFailed as e:
            logger.debug("Keeping original text: {}", e.reason)
            return text
        if not result or not result.strip():
            logger.warning("Translation response missing translatedText; keeping original")
            return text
        return result

    def _translate_all(self, units: List[str], target: str) -> List[str]:
        out = list(units)
        # Blank strings are never sent
        pending = [i for i, u in enumerate(units) if u and u.strip()]
        if not pending:
            return out

        with _fut.ThreadPoolExecutor(max_workers=min(self.max_workers, len(pending))) as ex:
            futures = {ex.submit(self._one, units[i], target): i for i in pending}
            done, not_done = _fut.wait(futures, return_when=_fut.FIRST_EXCEPTION)
            failed = [f for f in futures if f in done and f.exception() is not None]
            if failed:
                for f in not_done:
                    f.cancel()
                raise failed[0].exception()
            for f, i in futures.items():
                out[i] = f.result()
        return out
