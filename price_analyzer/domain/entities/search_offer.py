from dataclasses import dataclass


@dataclass(frozen=True)
class SearchOffer:
    """One price offer found for a query, from a web search or the synthetic generator."""

    title: str
    price: int | None
    source: str
    url: str = ""
    snippet: str = ""
    synthetic: bool = False
