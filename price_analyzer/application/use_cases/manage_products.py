from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import structlog

from price_analyzer.application.interfaces.product_repository import ProductRepository
from price_analyzer.domain.entities.product import EDITABLE_FIELDS, Product

logger = structlog.get_logger(__name__)


class ProductNotFoundError(Exception):
    def __init__(self, product_id: str) -> None:
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found.")


@dataclass
class CreateProductInput:
    name: str
    description: str = ""
    quantity: int = 0
    purchase_price: Decimal = Decimal("0")
    sale_price: Decimal = Decimal("0")


class CreateProduct:
    """Use case: Add a product to the tracked list."""

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    async def execute(self, input_data: CreateProductInput) -> Product:
        product = Product.create(
            name=input_data.name,
            description=input_data.description,
            quantity=input_data.quantity,
            purchase_price=input_data.purchase_price,
            sale_price=input_data.sale_price,
        )
        await self._product_repo.save(product)
        logger.info("product_created", product_id=product.id, name=product.name)
        return product


@dataclass
class UpdateProductInput:
    product_id: str
    changes: dict[str, Any] = field(default_factory=dict)


class UpdateProduct:
    """Use case: Partially update a stored product."""

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    async def execute(self, input_data: UpdateProductInput) -> Product:
        product = await self._product_repo.get_by_id(input_data.product_id)
        if product is None:
            raise ProductNotFoundError(input_data.product_id)

        # May raise InvalidProductDataError
        product.update_fields(**input_data.changes)
        await self._product_repo.save(product)

        logger.info(
            "product_updated",
            product_id=product.id,
            fields=sorted(input_data.changes),
        )
        return product


class DeleteProduct:
    """Use case: Remove a product from the tracked list."""

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    async def execute(self, product_id: str) -> None:
        deleted = await self._product_repo.delete(product_id)
        if not deleted:
            raise ProductNotFoundError(product_id)
        logger.info("product_deleted", product_id=product_id)


@dataclass
class ImportProductsOutput:
    created: int
    updated: int
    products: list[Product]


class ImportProducts:
    """
    Use case: Load a product list exported earlier (or written by hand).

    Items are upserted by id; items without an id, or with an unknown id,
    become new products. All items are validated before anything is saved.
    """

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    async def execute(self, items: list[dict[str, Any]]) -> ImportProductsOutput:
        staged: list[tuple[Product, bool]] = []

        for item in items:
            fields = {key: value for key, value in item.items() if key in EDITABLE_FIELDS}
            product_id = item.get("id")
            existing = await self._product_repo.get_by_id(product_id) if product_id else None

            if existing is not None:
                existing.update_fields(**fields)
                staged.append((existing, False))
                continue

            product = Product.create(
                name=str(fields.pop("name", "")),
                description=str(fields.pop("description", "")),
                product_id=product_id,
            )
            if fields:
                product.update_fields(**fields)
            staged.append((product, True))

        for product, _ in staged:
            await self._product_repo.save(product)

        created = sum(1 for _, is_new in staged if is_new)
        output = ImportProductsOutput(
            created=created,
            updated=len(staged) - created,
            products=[product for product, _ in staged],
        )
        logger.info("products_imported", created=output.created, updated=output.updated)
        return output
