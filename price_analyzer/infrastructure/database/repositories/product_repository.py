from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from price_analyzer.application.interfaces.product_repository import ProductRepository
from price_analyzer.domain.entities.product import Product
from price_analyzer.infrastructure.database.models import ProductModel


def _dec(value: float | Decimal | None) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def _to_domain(model: ProductModel) -> Product:
    return Product(
        id=model.id,
        name=model.name,
        description=model.description,
        quantity=model.quantity,
        purchase_price=_dec(model.purchase_price),
        sale_price=_dec(model.sale_price),
        competitor_new_price=_dec(model.competitor_new_price),
        competitor_used_price=_dec(model.competitor_used_price),
        created_at=model.created_at,
        last_updated=model.last_updated,
    )


def _copy_fields(product: Product, model: ProductModel) -> None:
    model.name = product.name
    model.description = product.description
    model.quantity = product.quantity
    model.purchase_price = float(product.purchase_price)
    model.sale_price = float(product.sale_price)
    model.competitor_new_price = float(product.competitor_new_price)
    model.competitor_used_price = float(product.competitor_used_price)
    model.last_updated = product.last_updated


class SqlAlchemyProductRepository(ProductRepository):
    """SQLAlchemy-backed implementation of ProductRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, product: Product) -> None:
        model = await self._session.get(ProductModel, product.id)
        if model is None:
            next_position = await self._session.scalar(
                select(func.coalesce(func.max(ProductModel.position), 0) + 1)
            )
            model = ProductModel(
                id=product.id, position=next_position, created_at=product.created_at
            )
            _copy_fields(product, model)
            self._session.add(model)
        else:
            _copy_fields(product, model)
        await self._session.flush()

    async def get_by_id(self, product_id: str) -> Product | None:
        model = await self._session.get(ProductModel, product_id)
        return _to_domain(model) if model is not None else None

    async def list_all(self) -> list[Product]:
        result = await self._session.execute(
            select(ProductModel).order_by(ProductModel.position.asc())
        )
        return [_to_domain(m) for m in result.scalars().all()]

    async def delete(self, product_id: str) -> bool:
        model = await self._session.get(ProductModel, product_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
