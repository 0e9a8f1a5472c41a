from datetime import datetime

from pydantic import BaseModel, Field

from price_analyzer.api.schemas.products import PriceSearchResponse
from price_analyzer.domain.enums.command_intent import CommandIntent
from price_analyzer.domain.enums.search_type import SearchType


class CommandRequest(BaseModel):
    text: str = Field(min_length=1, max_length=2000)


class EditResultResponse(BaseModel):
    message: str
    product_id: str | None = None
    product_updated: bool = False
    used_llm: bool = False

    model_config = {"from_attributes": True}


class CommandResponse(BaseModel):
    intent: CommandIntent
    message: str
    product_name: str | None = None
    is_error: bool = False
    search: PriceSearchResponse | None = None
    edit: EditResultResponse | None = None

    model_config = {"from_attributes": True}


class ConnectionTestResponse(BaseModel):
    ok: bool
    message: str
    answer: str | None = None
    error_code: str | None = None

    model_config = {"from_attributes": True}


class SearchHistoryEntryResponse(BaseModel):
    id: str
    timestamp: datetime
    search_type: SearchType
    product_name: str
    result: str
    min_price: int | None = None
    matched_product_id: str | None = None

    model_config = {"from_attributes": True}
