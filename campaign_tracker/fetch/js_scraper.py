from playwright.async_api import async_playwright, Error as PlaywrightError, TimeoutError as PlaywrightTimeout
from campaign_tracker.core.config import settings
from campaign_tracker.core.errors import BrowserError, UpstreamFetchError
from campaign_tracker.fetch.base import FetchResult
from campaign_tracker.fetch.utils import normalize_text, utc_now_iso

async def fetch_rendered_page(url: str) -> FetchResult:
    """
    Render the campaign page in headless Chromium and read what a visitor sees.

    Navigation waits for DOM content, then for network idle (a page that never
    goes idle is still read), then pauses RENDER_SETTLE_MS so late widgets such
    as the donation tracker can paint. The browser is closed on every path.

    Args:
        url: The URL to render

    Returns:
        FetchResult with the rendered markup and the body's innerText
    """
    timeout_ms = settings.NAVIGATION_TIMEOUT_MS
    try:
        async with async_playwright() as p:
            browser = await p.chromium.launch(
                headless=settings.PLAYWRIGHT_HEADLESS,
                args=[
                    '--no-sandbox',
                    '--disable-dev-shm-usage',
                    '--disable-gpu',
                ]
            )
            try:
                page = await browser.new_page(
                    user_agent=settings.USER_AGENT,
                    extra_http_headers={"Accept-Language": settings.ACCEPT_LANGUAGE},
                )

                response = await page.goto(url, timeout=timeout_ms, wait_until="domcontentloaded")
                if response is not None and not response.ok:
                    raise UpstreamFetchError(
                        f"HTTP error {response.status} for {url}",
                        status_code=response.status
                    )

                try:
                    await page.wait_for_load_state("networkidle", timeout=timeout_ms)
                except PlaywrightTimeout:
                    pass

                await page.wait_for_timeout(settings.RENDER_SETTLE_MS)

                text = await page.inner_text("body")
                html = await page.content()

                return FetchResult(
                    url=url,
                    status_code=response.status if response is not None else 200,
                    final_url=page.url,
                    html=html,
                    text=normalize_text(text or ""),
                    fetched_at=utc_now_iso(),
                    mode="browser",
                )
            finally:
                try:
                    await browser.close()
                except PlaywrightError as e:
                    print(f"Browser close failed for {url}: {str(e)}")

    except PlaywrightTimeout as e:
        raise BrowserError(f"Timeout while rendering {url}") from e
    except PlaywrightError as e:
        raise BrowserError(f"Failed to render {url}: {str(e)}") from e
