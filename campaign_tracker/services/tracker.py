from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from campaign_tracker.core.config import settings
from campaign_tracker.core.errors import ExtractionError, UpstreamFetchError
from campaign_tracker.fetch import scraper
from campaign_tracker.fetch.utils import format_money, progress_pct
from campaign_tracker.extract.raised import RaisedValue, explain_extraction, require_raised
from campaign_tracker.cache import store
from campaign_tracker.cache.store import LastKnownCache
from campaign_tracker.schemas import ErrorPayload, ResultPayload

FETCH_FAILED_NOTE = "source fetch failed; returning last known value"
PARSE_FAILED_NOTE = "parse failed; returning last known value"
EXCEPTION_NOTE = "exception; returning last known value"

@dataclass
class TrackerResponse:
    status_code: int
    body: Dict[str, Any]
    headers: Dict[str, str] = field(default_factory=dict)

def cache_control_header() -> str:
    return f"s-maxage={settings.CACHE_MAX_AGE}, stale-while-revalidate={settings.CACHE_STALE_WHILE_REVALIDATE}"

def build_payload(extracted: RaisedValue, fetched_at: str, source: str) -> Dict[str, Any]:
    """Normalize an extracted value into the public JSON payload."""
    goal = settings.CAMPAIGN_GOAL
    payload = ResultPayload(
        total_raised=extracted.value,
        total_raised_display=format_money(extracted.value, settings.CURRENCY_SYMBOL),
        goal=goal,
        goal_display=format_money(goal, settings.CURRENCY_SYMBOL),
        progress_pct=progress_pct(extracted.value, goal),
        updated_at=fetched_at,
        source=source,
        method=extracted.method,
        stale=False,
    )
    return payload.model_dump(by_alias=True, exclude_none=True)

def _stale_or_error(cache: LastKnownCache, note: str, status_code: int, error: str,
                    details: Optional[str] = None) -> TrackerResponse:
    cached = cache.get()
    if cached:
        print(f"SERVING STALE value from {cached.get('updatedAt')}: {note}")
        cached["stale"] = True
        cached["note"] = note
        return TrackerResponse(status_code=200, body=cached)

    body = ErrorPayload(error=error, details=details).model_dump(exclude_none=True)
    return TrackerResponse(status_code=status_code, body=body)

async def get_total_raised(cache: Optional[LastKnownCache] = None) -> TrackerResponse:
    """
    Main pipeline: fetch -> extract -> respond.

    1. Fetch the campaign page with the configured strategy
    2. Run the extraction heuristics over markup and visible text
    3. On success build the payload, remember it and advertise caching
    4. On any failure serve the last known payload marked stale, or an error
    """
    if cache is None:
        cache = store.last_known
    url = settings.CAMPAIGN_URL

    try:
        print(f"FETCHING {url} (mode={settings.FETCH_MODE})")
        page = await scraper.fetch_campaign_page(url)
        print(f"PAGE RECEIVED: {len(page.html or '')} chars html, {len(page.text or '')} chars text")

        extracted = require_raised(page.html, page.text)
        print(f"EXTRACTED {extracted.value} via {extracted.method}")

        payload = build_payload(extracted, page.fetched_at, url)
        cache.set(payload)

        return TrackerResponse(
            status_code=200,
            body=payload,
            headers={"Cache-Control": cache_control_header()},
        )

    except UpstreamFetchError as e:
        print(f"FETCH FAILED for {url}: {str(e)}")
        return _stale_or_error(cache, FETCH_FAILED_NOTE, 502, "Failed to fetch campaign page", str(e))
    except ExtractionError as e:
        print(f"PARSE FAILED for {url}: {str(e)}")
        return _stale_or_error(cache, PARSE_FAILED_NOTE, 500, "Could not parse total raised")
    except Exception as e:
        print(f"ERROR processing {url}: {str(e)}")
        return _stale_or_error(cache, EXCEPTION_NOTE, 500, "Server error", str(e))

async def debug_extract() -> Dict[str, Any]:
    """Fetch the campaign page once and report every extraction stage, without touching the cache"""
    url = settings.CAMPAIGN_URL
    page = await scraper.fetch_campaign_page(url)
    html = page.html or ""
    text = page.text or ""

    return {
        "url": url,
        "final_url": page.final_url,
        "mode": page.mode,
        "status_code": page.status_code,
        "html_length": len(html),
        "text_length": len(text),
        "goal": settings.CAMPAIGN_GOAL,
        "stages": explain_extraction(html, text),
        "text_preview": text[:1000] + "..." if len(text) > 1000 else text,
    }

def get_cache_stats(cache: Optional[LastKnownCache] = None) -> Dict[str, Any]:
    """Get cache statistics for debugging"""
    return (cache or store.last_known).get_stats()
