from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import uuid4

from price_analyzer.domain.enums.search_type import SearchType


@dataclass
class SearchHistoryEntry:
    search_type: SearchType
    product_name: str
    result: str
    min_price: int | None = None
    matched_product_id: str | None = None
    id: str = field(default_factory=lambda: uuid4().hex)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SearchHistoryRepository(ABC):
    """Port for the log of past price searches."""

    @abstractmethod
    async def save(self, entry: SearchHistoryEntry) -> None:
        ...

    @abstractmethod
    async def list_recent(self, limit: int = 100) -> list[SearchHistoryEntry]:
        """Newest first."""
        ...

    @abstractmethod
    async def prune(self, keep: int) -> int:
        """Drop all but the newest `keep` entries. Returns the number removed."""
        ...
