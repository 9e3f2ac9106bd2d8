import asyncio
import pytest
from unittest.mock import AsyncMock, patch
from pydantic import ValidationError
from campaign_tracker.cache.store import LastKnownCache
from campaign_tracker.core.config import settings
from campaign_tracker.core.errors import BrowserError, UpstreamFetchError
from campaign_tracker.extract.raised import RaisedValue
from campaign_tracker.fetch.base import FetchResult
from campaign_tracker.schemas import ResultPayload
from campaign_tracker.services.tracker import (
    EXCEPTION_NOTE,
    FETCH_FAILED_NOTE,
    PARSE_FAILED_NOTE,
    build_payload,
    get_total_raised,
)

FETCHED_AT = "2026-10-18T12:00:00.000Z"

def _page(html, text=None):
    return FetchResult(
        url=settings.CAMPAIGN_URL,
        status_code=200,
        final_url=settings.CAMPAIGN_URL,
        html=html,
        text=text,
        fetched_at=FETCHED_AT,
    )

def _run(cache, **patch_kwargs):
    with patch("campaign_tracker.fetch.scraper.fetch_campaign_page", new=AsyncMock(**patch_kwargs)):
        return asyncio.run(get_total_raised(cache))

class TestBuildPayload:
    """Unit tests for payload normalization"""

    def test_fields(self):
        payload = build_payload(RaisedValue(125000, "raised-pattern"), FETCHED_AT, "https://example.org")
        assert payload == {
            "totalRaised": 125000,
            "totalRaisedDisplay": "$125,000",
            "goal": 250000,
            "goalDisplay": "$250,000",
            "progressPct": 50.0,
            "updatedAt": FETCHED_AT,
            "source": "https://example.org",
            "method": "raised-pattern",
            "stale": False,
        }

    def test_integral_amount_stays_int(self):
        payload = build_payload(RaisedValue(186576, "raised-pattern"), FETCHED_AT, "https://example.org")
        assert isinstance(payload["totalRaised"], int)

    def test_payload_model_requires_fields(self):
        with pytest.raises(ValidationError):
            ResultPayload(total_raised=1000)

    def test_payload_model_accepts_aliases(self):
        payload = ResultPayload(
            totalRaised=1000,
            totalRaisedDisplay="$1,000",
            goal=250000,
            goalDisplay="$250,000",
            progressPct=0.4,
            updatedAt=FETCHED_AT,
            source="https://example.org",
            method="raised-pattern",
        )
        assert payload.total_raised == 1000
        assert payload.stale is False
        assert payload.note is None

class TestGetTotalRaised:
    """Responder behaviour on success and on each failure kind"""

    def test_success_caches_payload(self, campaign_html):
        cache = LastKnownCache()
        result = _run(cache, return_value=_page(campaign_html))

        assert result.status_code == 200
        assert result.body["totalRaised"] == 186576
        assert result.body["stale"] is False
        assert result.body["source"] == settings.CAMPAIGN_URL
        assert result.headers == {"Cache-Control": "s-maxage=120, stale-while-revalidate=600"}
        assert cache.get() == result.body

    def test_first_fetch_failure(self):
        result = _run(LastKnownCache(), side_effect=UpstreamFetchError("HTTP error 503", status_code=503))
        assert result.status_code == 502
        assert result.body["error"] == "Failed to fetch campaign page"
        assert "503" in result.body["details"]
        assert result.headers == {}

    def test_first_parse_failure(self):
        result = _run(LastKnownCache(), return_value=_page("<html><body>Coming soon</body></html>", "Coming soon"))
        assert result.status_code == 500
        assert result.body == {"error": "Could not parse total raised"}

    def test_first_browser_failure(self):
        result = _run(LastKnownCache(), side_effect=BrowserError("Timeout while rendering"))
        assert result.status_code == 500
        assert result.body == {"error": "Server error", "details": "Timeout while rendering"}

    @pytest.mark.parametrize("patch_kwargs,note", [
        ({"side_effect": UpstreamFetchError("HTTP error 503", status_code=503)}, FETCH_FAILED_NOTE),
        ({"return_value": _page("<p>Coming soon</p>", "Coming soon")}, PARSE_FAILED_NOTE),
        ({"side_effect": BrowserError("browser crashed")}, EXCEPTION_NOTE),
        ({"side_effect": RuntimeError("unexpected")}, EXCEPTION_NOTE),
    ])
    def test_failure_after_success_serves_stale(self, campaign_html, patch_kwargs, note):
        cache = LastKnownCache()
        first = _run(cache, return_value=_page(campaign_html))

        result = _run(cache, **patch_kwargs)

        assert result.status_code == 200
        assert result.body["stale"] is True
        assert result.body["note"] == note
        assert result.body["totalRaised"] == first.body["totalRaised"]
        assert result.body["updatedAt"] == first.body["updatedAt"]
        assert result.headers == {}
        # The cached payload itself is untouched
        assert cache.get()["stale"] is False

    def test_newer_success_overwrites_cache(self, campaign_html):
        cache = LastKnownCache()
        _run(cache, return_value=_page(campaign_html))
        _run(cache, return_value=_page("<p>$190,000 RAISED</p>"))
        assert cache.get()["totalRaised"] == 190000

    def test_defaults_to_process_cache(self, campaign_html):
        from campaign_tracker.cache.store import last_known
        with patch("campaign_tracker.fetch.scraper.fetch_campaign_page",
                   new=AsyncMock(return_value=_page(campaign_html))):
            asyncio.run(get_total_raised())
        assert last_known.get()["totalRaised"] == 186576
