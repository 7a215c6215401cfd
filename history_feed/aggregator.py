from __future__ import annotations

import calendar
import time
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Protocol, Union

from loguru import logger

from .exceptions import SourceUnavailable
from .models import ITEMS_PER_PAGE, DateSeparator, Event, FeedItem


StartDate = Union[date, str, None]


class DaySource(Protocol):
    def fetch_events(self, day: str) -> List[Event]:  # pragma: no cover - interface
        ...


def format_day(d: date) -> str:
    return f"{d.month:02d}/{d.day:02d}"


def resolve_start(value: StartDate, today: date) -> date:
    """
    Turn a start date into a calendar date to walk back from.

    `MM/DD` strings are anchored to `today`'s year; 02/29 in a non-leap year
    is anchored to the most recent leap year so the day still exists.
    """
    if value is None:
        return today
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        # Parse against a leap year so 02/29 is accepted
        parsed = datetime.strptime(f"2000/{value.strip()}", "%Y/%m/%d")
    except ValueError as e:
        raise ValueError(f"Start date must be MM/DD, got {value!r}") from e

    year = today.year
    if parsed.month == 2 and parsed.day == 29:
        while not calendar.isleap(year):
            year -= 1
    return date(year, parsed.month, parsed.day)


class FeedAggregator:
    """
    Walks backward one day at a time from a start date, flattening each non-empty day
    into `[DateSeparator, Event, Event, ...]` until the requested page window is filled.

    Failed days count as zero events. After `max_retries` consecutive failures the walk
    stops early and whatever was gathered is sliced and returned; the aggregator never
    raises for upstream problems.
    """

    def __init__(
        self,
        source: DaySource,
        *,
        items_per_page: int = ITEMS_PER_PAGE,
        max_retries: int = 3,
        retry_delay_sec: float = 0.5,
        max_lookback_days: Optional[int] = 365,
        start_date: StartDate = None,
        today: Callable[[], date] = date.today,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if items_per_page < 1:
            raise ValueError("items_per_page must be >= 1")
        self.source = source
        self.items_per_page = items_per_page
        self.max_retries = max_retries
        self.retry_delay_sec = retry_delay_sec
        self.max_lookback_days = max_lookback_days
        self.start_date = start_date
        self._today = today
        self._sleep = sleep

    def aggregate(self, page: int, start_date: StartDate = None) -> List[FeedItem]:
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")

        needed = page * self.items_per_page
        current = resolve_start(start_date or self.start_date, self._today())
        acc: List[FeedItem] = []
        failures = 0
        days_walked = 0

        while True:
            day = format_day(current)
            try:
                day_events = self.source.fetch_events(day)
                failures = 0
            except SourceUnavailable as e:
                day_events = []
                failures += 1
                logger.warning(
                    "Events for {} unavailable ({}), failure {}/{}",
                    day, e.reason, failures, self.max_retries,
                )
            days_walked += 1
            logger.debug("Fetched {} events for {}", len(day_events), day)

            if day_events:
                acc.append(DateSeparator(date=day))
                acc.extend(day_events)

            if len(acc) >= needed:
                break
            if failures and failures >= self.max_retries:
                logger.info(
                    "Stopping walk at {} after {} consecutive failures ({} items gathered)",
                    day, failures, len(acc),
                )
                break
            if self.max_lookback_days is not None and days_walked >= self.max_lookback_days:
                logger.info(
                    "Stopping walk at {} after {} days ({} items gathered)",
                    day, days_walked, len(acc),
                )
                break

            if failures:
                self._sleep(self.retry_delay_sec * failures)
            current -= timedelta(days=1)

        start = (page - 1) * self.items_per_page
        return acc[start:start + self.items_per_page]
