import os

class Settings:
    # Campaign
    CAMPAIGN_URL: str = os.getenv("CAMPAIGN_URL", "https://fundraisemyway.cancer.ca/campaigns/scoreforcancer")
    CAMPAIGN_GOAL: int = int(os.getenv("CAMPAIGN_GOAL", "250000"))
    MIN_PLAUSIBLE_AMOUNT: int = int(os.getenv("MIN_PLAUSIBLE_AMOUNT", "1000"))
    CURRENCY_SYMBOL: str = os.getenv("CURRENCY_SYMBOL", "$")

    # Development
    USE_MOCK: bool = os.getenv("USE_MOCK", "0").lower() in ("1", "true", "yes")

    # Scraping ("http" or "browser")
    FETCH_MODE: str = os.getenv("FETCH_MODE", "http").lower()
    REQUEST_TIMEOUT: int = int(os.getenv("REQUEST_TIMEOUT", "30"))
    USER_AGENT: str = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36",
    )
    ACCEPT_LANGUAGE: str = os.getenv("ACCEPT_LANGUAGE", "en-CA,en;q=0.9")
    RAISED_CASE_SENSITIVE: bool = os.getenv("RAISED_CASE_SENSITIVE", "0").lower() in ("1", "true", "yes")

    # Playwright / JS rendering
    PLAYWRIGHT_HEADLESS: bool = os.getenv("PLAYWRIGHT_HEADLESS", "1").lower() in ("1", "true", "yes")
    NAVIGATION_TIMEOUT_MS: int = int(os.getenv("NAVIGATION_TIMEOUT_MS", "90000"))
    RENDER_SETTLE_MS: int = int(os.getenv("RENDER_SETTLE_MS", "3000"))

    # Response caching directive, in seconds
    CACHE_MAX_AGE: int = int(os.getenv("CACHE_MAX_AGE", "120"))
    CACHE_STALE_WHILE_REVALIDATE: int = int(os.getenv("CACHE_STALE_WHILE_REVALIDATE", "600"))

settings = Settings()
