from abc import ABC, abstractmethod

from price_analyzer.domain.entities.product import Product


class ProductRepository(ABC):
    """Port for persisting and querying the tracked product list."""

    @abstractmethod
    async def save(self, product: Product) -> None:
        """Insert or update by id."""
        ...

    @abstractmethod
    async def get_by_id(self, product_id: str) -> Product | None:
        ...

    @abstractmethod
    async def list_all(self) -> list[Product]:
        """Return every product in insertion order."""
        ...

    @abstractmethod
    async def delete(self, product_id: str) -> bool:
        """Return False when no such product existed."""
        ...
