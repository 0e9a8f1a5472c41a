from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from price_analyzer.application.interfaces.search_history_repository import (
    SearchHistoryEntry,
    SearchHistoryRepository,
)
from price_analyzer.domain.enums.search_type import SearchType
from price_analyzer.infrastructure.database.models import SearchHistoryModel


class SqlAlchemySearchHistoryRepository(SearchHistoryRepository):
    """SQLAlchemy-backed implementation of SearchHistoryRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, entry: SearchHistoryEntry) -> None:
        self._session.add(
            SearchHistoryModel(
                id=entry.id,
                timestamp=entry.timestamp,
                search_type=entry.search_type.value,
                product_name=entry.product_name,
                result=entry.result,
                min_price=entry.min_price,
                matched_product_id=entry.matched_product_id,
            )
        )
        await self._session.flush()

    async def list_recent(self, limit: int = 100) -> list[SearchHistoryEntry]:
        result = await self._session.execute(
            select(SearchHistoryModel)
            .order_by(SearchHistoryModel.timestamp.desc(), SearchHistoryModel.id.desc())
            .limit(limit)
        )
        return [
            SearchHistoryEntry(
                id=m.id,
                timestamp=m.timestamp,
                search_type=SearchType(m.search_type),
                product_name=m.product_name,
                result=m.result,
                min_price=m.min_price,
                matched_product_id=m.matched_product_id,
            )
            for m in result.scalars().all()
        ]

    async def prune(self, keep: int) -> int:
        stale = (
            select(SearchHistoryModel.id)
            .order_by(SearchHistoryModel.timestamp.desc(), SearchHistoryModel.id.desc())
            .offset(keep)
        )
        stale_ids = list((await self._session.execute(stale)).scalars().all())
        if not stale_ids:
            return 0

        await self._session.execute(
            delete(SearchHistoryModel).where(SearchHistoryModel.id.in_(stale_ids))
        )
        await self._session.flush()
        return len(stale_ids)
