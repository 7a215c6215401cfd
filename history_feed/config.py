from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


DEFAULT_WIKIPEDIA_API_URL = "https://api.wikimedia.org/feed/v1/wikipedia"
DEFAULT_TRANSLATE_URL = "https://libretranslate.com/translate"
DEFAULT_USER_AGENT = "HistoryFeed/1.0 (https://github.com/history-feed)"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_str(name: str, default: Optional[str]) -> Optional[str]:
    val = os.getenv(name)
    if val is None or not val.strip():
        return default
    return val.strip()


def _env_float(name: str, default: float) -> float:
    val = _env_str(name, None)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {val!r}") from e


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    val = _env_str(name, None)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {val!r}") from e


@dataclass(frozen=True)
class Settings:
    """
    Process-wide, read-only configuration for both upstream clients.

    Build once at startup (usually via `Settings.from_env()`) and pass it to the clients.
    """
    wikipedia_api_url: str = DEFAULT_WIKIPEDIA_API_URL
    wikipedia_language: str = "en"
    user_agent: str = DEFAULT_USER_AGENT
    events_timeout_sec: float = 5.0
    max_retries: int = 3
    retry_delay_sec: float = 0.5
    max_lookback_days: Optional[int] = 365  # None -> walk back without limit
    drop_last_page: bool = False
    translate_url: str = DEFAULT_TRANSLATE_URL
    translate_api_key: Optional[str] = None
    translate_timeout_sec: float = 10.0
    translate_max_workers: int = 8

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        # Set but empty, or <= 0, means no lookback limit
        raw_lookback = os.getenv("FEED_MAX_LOOKBACK_DAYS")
        if raw_lookback is not None and not raw_lookback.strip():
            lookback = None
        else:
            lookback = _env_int("FEED_MAX_LOOKBACK_DAYS", 365)
        if lookback is not None and lookback <= 0:
            lookback = None
        drop = (_env_str("FEED_DROP_LAST_PAGE", "false") or "").lower() in _TRUTHY
        return cls(
            wikipedia_api_url=(_env_str("WIKIPEDIA_API_URL", DEFAULT_WIKIPEDIA_API_URL) or "").rstrip("/"),
            wikipedia_language=_env_str("WIKIPEDIA_LANGUAGE", "en") or "en",
            user_agent=_env_str("WIKIPEDIA_USER_AGENT", DEFAULT_USER_AGENT) or DEFAULT_USER_AGENT,
            events_timeout_sec=_env_float("EVENTS_TIMEOUT_SEC", 5.0),
            max_retries=_env_int("FEED_MAX_RETRIES", 3) or 0,
            retry_delay_sec=_env_float("FEED_RETRY_DELAY_SEC", 0.5),
            max_lookback_days=lookback,
            drop_last_page=drop,
            translate_url=_env_str("LIBRETRANSLATE_API_URL", DEFAULT_TRANSLATE_URL) or DEFAULT_TRANSLATE_URL,
            translate_api_key=_env_str("LIBRETRANSLATE_API_KEY", None),
            translate_timeout_sec=_env_float("TRANSLATE_TIMEOUT_SEC", 10.0),
            translate_max_workers=max(1, _env_int("TRANSLATE_MAX_WORKERS", 8) or 1),
        )
