from enum import Enum


class SearchType(str, Enum):
    """Kinds of price lookup a product can be searched for."""

    COMPETITOR = "competitor"
    AVITO = "avito"

    @property
    def price_field(self) -> str:
        """Name of the Product attribute this search writes into."""
        if self is SearchType.AVITO:
            return "competitor_used_price"
        return "competitor_new_price"

    @property
    def is_used_goods(self) -> bool:
        return self is SearchType.AVITO
