import pytest
from campaign_tracker.cache import store
from campaign_tracker.core import config

CAMPAIGN_HTML = """
<html>
<body>
    <div class="campaign">
        <h1>Score for Cancer</h1>
        <div class="tracker">
            <div class="raised">$186,576 RAISED</div>
            <div class="goal">$250,000 GOAL</div>
        </div>
    </div>
</body>
</html>
"""

@pytest.fixture(autouse=True)
def setup_test_environment():
    """Fresh cache and predictable settings for every test"""
    # Store original values
    original = {
        "USE_MOCK": config.settings.USE_MOCK,
        "FETCH_MODE": config.settings.FETCH_MODE,
        "CAMPAIGN_GOAL": config.settings.CAMPAIGN_GOAL,
        "MIN_PLAUSIBLE_AMOUNT": config.settings.MIN_PLAUSIBLE_AMOUNT,
        "RAISED_CASE_SENSITIVE": config.settings.RAISED_CASE_SENSITIVE,
        "RENDER_SETTLE_MS": config.settings.RENDER_SETTLE_MS,
    }

    config.settings.USE_MOCK = False
    config.settings.FETCH_MODE = "http"
    config.settings.CAMPAIGN_GOAL = 250000
    config.settings.MIN_PLAUSIBLE_AMOUNT = 1000
    config.settings.RAISED_CASE_SENSITIVE = False
    config.settings.RENDER_SETTLE_MS = 0
    store.last_known.clear()

    yield

    # Restore original values
    for name, value in original.items():
        setattr(config.settings, name, value)
    store.last_known.clear()

@pytest.fixture
def campaign_html():
    return CAMPAIGN_HTML
