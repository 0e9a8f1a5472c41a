from fastapi import APIRouter, Depends, Query

from price_analyzer.api.dependencies import get_search_history_repo
from price_analyzer.api.schemas.assistant import SearchHistoryEntryResponse
from price_analyzer.application.interfaces.search_history_repository import (
    SearchHistoryRepository,
)

router = APIRouter(prefix="/history", tags=["history"])


@router.get("", response_model=list[SearchHistoryEntryResponse])
async def list_history(
    limit: int = Query(default=100, ge=1, le=100),
    repo: SearchHistoryRepository = Depends(get_search_history_repo),
) -> list[SearchHistoryEntryResponse]:
    """Most recent price searches, newest first."""
    return [SearchHistoryEntryResponse.model_validate(e) for e in await repo.list_recent(limit)]
