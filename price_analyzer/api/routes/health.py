from fastapi import APIRouter
from sqlalchemy import text

from price_analyzer.config import settings
from price_analyzer.infrastructure.database.connection import AsyncSessionLocal

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check() -> dict:  # type: ignore[type-arg]
    """Liveness + dependency health check."""
    db_status = "connected"
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as exc:
        db_status = f"error: {exc}"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
        "llm_configured": bool(settings.openai_api_key),
        "search_configured": bool(settings.serpapi_api_key),
        "search_enabled": settings.search_enabled,
    }
