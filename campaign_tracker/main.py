from fastapi import FastAPI
from contextlib import asynccontextmanager
from campaign_tracker.api.routes import router
from campaign_tracker.core.config import settings

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Report configuration on startup.
    """
    # Startup
    print("Initializing Campaign Raised Tracker...")
    print(f"Tracking {settings.CAMPAIGN_URL} (goal {settings.CAMPAIGN_GOAL}, mode {settings.FETCH_MODE})")

    yield

    # Shutdown
    print("Shutting down Campaign Raised Tracker...")

app = FastAPI(
    title="Campaign Raised Tracker",
    description="API reporting the amount raised on a fundraising campaign page",
    version="1.0.0",
    lifespan=lifespan
)

# Include API routes
app.include_router(router)

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "service": "Campaign Raised Tracker",
        "version": "1.0.0",
        "endpoints": {
            "score_total": "ANY /api/score-total",
            "debug_extract": "POST /debug-extract",
            "health": "GET /health",
            "cache_stats": "GET /cache/stats",
            "cache_clear": "DELETE /cache/clear"
        }
    }
