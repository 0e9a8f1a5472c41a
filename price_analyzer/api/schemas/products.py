from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from price_analyzer.domain.enums.search_type import SearchType


class ProductCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=512)
    description: str = ""
    quantity: int = Field(default=0, ge=0)
    purchase_price: Decimal = Field(default=Decimal("0"), ge=0)
    sale_price: Decimal = Field(default=Decimal("0"), ge=0)


class ProductUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=512)
    description: str | None = None
    quantity: int | None = Field(default=None, ge=0)
    purchase_price: Decimal | None = Field(default=None, ge=0)
    sale_price: Decimal | None = Field(default=None, ge=0)
    competitor_new_price: Decimal | None = Field(default=None, ge=0)
    competitor_used_price: Decimal | None = Field(default=None, ge=0)


class ProductImportItem(ProductUpdateRequest):
    id: str | None = Field(default=None, max_length=64)
    name: str = Field(min_length=1, max_length=512)  # type: ignore[assignment]


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str
    quantity: int
    purchase_price: Decimal
    sale_price: Decimal
    competitor_new_price: Decimal
    competitor_used_price: Decimal
    created_at: datetime
    last_updated: datetime

    model_config = {"from_attributes": True}


class ProductImportResponse(BaseModel):
    created: int
    updated: int
    products: list[ProductResponse]


class SearchOfferResponse(BaseModel):
    title: str
    price: int | None
    source: str
    url: str
    snippet: str
    synthetic: bool

    model_config = {"from_attributes": True}


class PriceSearchResponse(BaseModel):
    product_name: str
    search_type: SearchType
    answer: str
    message: str
    min_price: int | None = None
    matched_product_id: str | None = None
    product_updated: bool = False
    history_entry_id: str | None = None
    offers: list[SearchOfferResponse] = []

    model_config = {"from_attributes": True}
