import httpx
import pytest

from history_feed.config import Settings
from history_feed.exceptions import SourceUnavailable
from history_feed.fetcher import EventSource


def _source(settings, handler):
    return EventSource(settings, client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_fetch_events_builds_url_and_headers(settings, sample_payload):
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["ua"] = request.headers.get("User-Agent")
        seen["accept"] = request.headers.get("Accept")
        return httpx.Response(200, json=sample_payload)

    with _source(settings, handler) as source:
        events = source.fetch_events("03/15")

    assert seen["url"] == "https://wiki.test/feed/v1/wikipedia/en/onthisday/events/03/15"
    assert seen["ua"] == settings.user_agent
    assert seen["accept"] == "application/json"
    assert len(events) == 2


def test_missing_events_key_returns_empty(settings):
    source = _source(settings, lambda request: httpx.Response(200, json={"other": 1}))
    assert source.fetch_events("01/01") == []


@pytest.mark.parametrize("status", [404, 500, 503])
def test_non_2xx_raises_source_unavailable(settings, status):
    source = _source(settings, lambda request: httpx.Response(status, json={"message": "nope"}))
    with pytest.raises(SourceUnavailable) as exc:
        source.fetch_events("01/01")
    assert exc.value.day == "01/01"
    assert str(status) in exc.value.reason


def test_timeout_raises_source_unavailable(settings):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    source = _source(settings, handler)
    with pytest.raises(SourceUnavailable):
        source.fetch_events("01/01")


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, content=b"<html>not json</html>"),
        httpx.Response(200, json=["a", "list"]),
        httpx.Response(200, json={"events": {"not": "a list"}}),
    ],
)
def test_malformed_payload_raises_source_unavailable(settings, response):
    source = _source(settings, lambda request: response)
    with pytest.raises(SourceUnavailable):
        source.fetch_events("01/01")


def test_events_for_maps_failures_to_empty(settings):
    source = _source(settings, lambda request: httpx.Response(502))
    assert source.events_for("01/01") == []


def test_language_and_drop_last_page_from_settings(sample_payload):
    settings = Settings(wikipedia_api_url="https://wiki.test/api/", wikipedia_language="de", drop_last_page=True)
    urls = []

    def handler(request):
        urls.append(str(request.url))
        return httpx.Response(200, json=sample_payload)

    events = _source(settings, handler).fetch_events("12/31")

    assert urls == ["https://wiki.test/api/de/onthisday/events/12/31"]
    assert [p.title for p in events[0].pages] == ["Assassination of Julius Caesar"]
