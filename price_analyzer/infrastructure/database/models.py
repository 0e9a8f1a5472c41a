"""
SQLAlchemy ORM models.

These are purely infrastructure concerns. Domain entities are mapped to/from
these models inside the repository implementations.
"""
from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from price_analyzer.infrastructure.database.connection import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductModel(Base):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # Insertion order; created_at alone can tie within one clock tick.
    position: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(512), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    purchase_price: Mapped[float] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    sale_price: Mapped[float] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    competitor_new_price: Mapped[float] = mapped_column(Numeric(12, 2), nullable=False, default=0)
    competitor_used_price: Mapped[float] = mapped_column(Numeric(12, 2), nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True
    )
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )


class SearchHistoryModel(Base):
    """One row per price search. Only the newest entries are kept."""

    __tablename__ = "search_history"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    search_type: Mapped[str] = mapped_column(String(32), nullable=False)
    product_name: Mapped[str] = mapped_column(String(512), nullable=False)
    result: Mapped[str] = mapped_column(Text, nullable=False)
    min_price: Mapped[int | None] = mapped_column(Integer, nullable=True)
    matched_product_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
