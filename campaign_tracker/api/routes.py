from fastapi import APIRouter, HTTPException, status
from fastapi.responses import JSONResponse
from campaign_tracker.services import tracker

router = APIRouter()

ANY_METHOD = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"]

@router.api_route("/api/score-total", methods=ANY_METHOD)
async def score_total():
    """
    Amount raised so far on the campaign page.

    Any method works and no parameters are read. When the page cannot be
    fetched or parsed, the last good result is returned marked stale.
    """
    result = await tracker.get_total_raised()
    return JSONResponse(
        status_code=result.status_code,
        content=result.body,
        headers=result.headers
    )

@router.post("/debug-extract")
async def debug_extract():
    """Debug endpoint to see what every extraction stage finds on the campaign page"""
    try:
        return await tracker.debug_extract()
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )

@router.get("/cache/stats")
async def cache_statistics():
    """Get cache statistics for debugging"""
    return tracker.get_cache_stats()

@router.delete("/cache/clear")
async def clear_cache():
    """Forget the last known value"""
    from campaign_tracker.cache.store import last_known
    last_known.clear()
    return {"message": "Cache cleared successfully"}

@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "Campaign Raised Tracker"}
