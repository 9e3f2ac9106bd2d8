import httpx
from bs4 import BeautifulSoup
from campaign_tracker.core.config import settings
from campaign_tracker.core.errors import UpstreamFetchError
from campaign_tracker.fetch.base import FetchResult
from campaign_tracker.fetch.utils import normalize_text, utc_now_iso

async def fetch_html(url: str) -> FetchResult:
    """Fetch raw HTML with a plain GET, no caching, browser-like headers."""
    headers = {
        "User-Agent": settings.USER_AGENT,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": settings.ACCEPT_LANGUAGE,
        "Cache-Control": "no-store",
        "Pragma": "no-cache",
    }

    try:
        async with httpx.AsyncClient(
            timeout=settings.REQUEST_TIMEOUT,
            headers=headers,
            follow_redirects=True
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
    except httpx.TimeoutException as e:
        raise UpstreamFetchError(f"Timeout while fetching {url}") from e
    except httpx.HTTPStatusError as e:
        raise UpstreamFetchError(
            f"HTTP error {e.response.status_code} for {url}",
            status_code=e.response.status_code
        ) from e
    except httpx.HTTPError as e:
        raise UpstreamFetchError(f"Failed to fetch {url}: {str(e)}") from e

    html = response.text
    return FetchResult(
        url=url,
        status_code=response.status_code,
        final_url=str(response.url),
        html=html,
        text=extract_visible_text(html),
        fetched_at=utc_now_iso(),
        mode="http",
    )

async def fetch_campaign_page(url: str) -> FetchResult:
    """
    Retrieve the campaign page with the strategy configured for this deployment.
    FETCH_MODE=http uses a plain GET, FETCH_MODE=browser renders it in Chromium.
    """
    if settings.USE_MOCK:
        return await _mock_fetch_page(url)

    if settings.FETCH_MODE == "browser":
        from campaign_tracker.fetch.js_scraper import fetch_rendered_page
        return await fetch_rendered_page(url)

    return await fetch_html(url)

def extract_visible_text(html: str) -> str:
    """Visible page text with scripts and styles stripped."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(["script", "style", "noscript", "template"]):
        tag.decompose()
    return normalize_text(soup.get_text("\n"))

async def _mock_fetch_page(url: str) -> FetchResult:
    """Canned campaign page for running without network access"""
    html = """
    <html>
    <head><title>Score for Cancer</title></head>
    <body>
        <header>
            <nav>Donate | Teams | Participants</nav>
        </header>
        <main>
            <section class="campaign-header">
                <h1>Score for Cancer</h1>
                <div class="tracker">
                    <div class="tracker-raised"><span>$186,576</span> RAISED</div>
                    <div class="tracker-goal"><span>$250,000</span> GOAL</div>
                </div>
            </section>
            <section class="leaderboard">
                <h2>Top teams</h2>
                <ul>
                    <li>Team Puck Drop $12,340</li>
                    <li>Net Minders $9,870</li>
                </ul>
            </section>
        </main>
        <footer>
            <p>Canadian Cancer Society</p>
        </footer>
    </body>
    </html>
    """
    return FetchResult(
        url=url,
        status_code=200,
        final_url=url,
        html=html,
        text=extract_visible_text(html),
        fetched_at=utc_now_iso(),
        mode="mock",
    )
