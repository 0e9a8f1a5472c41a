from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

from price_analyzer.domain.enums.search_type import SearchType

EDITABLE_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "description",
        "quantity",
        "purchase_price",
        "sale_price",
        "competitor_new_price",
        "competitor_used_price",
    }
)

_PRICE_FIELDS: tuple[str, ...] = (
    "purchase_price",
    "sale_price",
    "competitor_new_price",
    "competitor_used_price",
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid4().hex


class InvalidProductDataError(Exception):
    """Raised when a product would end up with a blank name or negative numbers."""

    def __init__(self, field_name: str, message: str) -> None:
        self.field_name = field_name
        super().__init__(f"Invalid value for '{field_name}': {message}")


@dataclass
class Product:
    """
    A tracked product and the competitor prices found for it.

    Competitor prices of 0 mean "not known yet". Every mutation refreshes
    last_updated.
    """

    id: str = field(default_factory=_new_id)
    name: str = ""
    description: str = ""
    quantity: int = 0

    purchase_price: Decimal = Decimal("0")
    sale_price: Decimal = Decimal("0")

    # Filled in from price searches
    competitor_new_price: Decimal = Decimal("0")
    competitor_used_price: Decimal = Decimal("0")

    created_at: datetime = field(default_factory=_utcnow)
    last_updated: datetime = field(default_factory=_utcnow)

    # -------------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------------

    @classmethod
    def create(
        cls,
        *,
        name: str,
        description: str = "",
        quantity: int = 0,
        purchase_price: Decimal = Decimal("0"),
        sale_price: Decimal = Decimal("0"),
        product_id: str | None = None,
    ) -> "Product":
        product = cls(
            id=product_id or _new_id(),
            name=name.strip(),
            description=description.strip(),
            quantity=quantity,
            purchase_price=Decimal(str(purchase_price)),
            sale_price=Decimal(str(sale_price)),
        )
        product.validate()
        return product

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def update_fields(self, **changes: object) -> None:
        """Apply a partial update. Unknown fields are rejected."""
        unknown = set(changes) - EDITABLE_FIELDS
        if unknown:
            raise InvalidProductDataError(sorted(unknown)[0], "field cannot be edited")

        nulls = sorted(name for name, value in changes.items() if value is None)
        if nulls:
            raise InvalidProductDataError(nulls[0], "must not be null")

        for name, value in changes.items():
            if name in _PRICE_FIELDS:
                value = Decimal(str(value))
            elif name == "quantity":
                value = int(value)  # type: ignore[call-overload]
            elif isinstance(value, str):
                value = value.strip()
            setattr(self, name, value)

        self.validate()
        self.touch()

    def apply_competitor_price(self, search_type: SearchType, price: int) -> None:
        """Store a price found by a competitor or Avito search."""
        setattr(self, search_type.price_field, Decimal(price))
        self.touch()

    def touch(self) -> None:
        self.last_updated = _utcnow()

    # -------------------------------------------------------------------------
    # Invariants
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        if not self.name.strip():
            raise InvalidProductDataError("name", "must not be blank")
        if self.quantity < 0:
            raise InvalidProductDataError("quantity", "must not be negative")
        for price_field in _PRICE_FIELDS:
            if getattr(self, price_field) < 0:
                raise InvalidProductDataError(price_field, "must not be negative")
