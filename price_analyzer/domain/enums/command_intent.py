from enum import Enum


class CommandIntent(str, Enum):
    """What a free-text user command is asking the assistant to do."""

    COMPETITOR_SEARCH = "competitor_search"
    USED_PRICE_SEARCH = "used_price_search"
    EDIT = "edit"
    UNRECOGNIZED = "unrecognized"
