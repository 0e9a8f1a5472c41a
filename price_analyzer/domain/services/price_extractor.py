"""Pull a minimum ruble price out of free-form LLM answers and match products by name."""

import re
from collections.abc import Iterable

from price_analyzer.domain.entities.product import Product

# Open plausibility band: anything at or outside it is noise (years, SKUs, phone numbers).
MIN_PLAUSIBLE_PRICE = 100
MAX_PLAUSIBLE_PRICE = 10_000_000

# Digit run: plain "84990", or thousands grouped by a space (NBSP and narrow
# NBSP included): "84 990", "1 250 000". Commas and dots never group digits,
# so "150,300" is two numbers. Only horizontal separators, so numbers on
# separate lines never merge.
_AMOUNT = (
    r"(?<!\d)"
    r"(?P<amount>\d{1,3}(?:[ \t\u00a0\u202f]\d{3})+(?!\d)|\d+)"
)
# Kopecks/cents are dropped.
_FRACTION = r"(?:[.,]\d{1,2}(?!\d))?"
_GAP = r"[ \t\u00a0\u202f]*"
_LABEL_SEP = r"(?:\s*[:=–—-])?\s*(?:(?:от|from|около|about|~)\s*)?"

_CURRENCY = r"(?:₽|руб(?:лей|ля|ль)?(?![а-яё])\.?|р\.|rub(?:les?)?\b)"

# --- Pattern families (each scanned independently) ---
_CURRENCY_RE = re.compile(_AMOUNT + _FRACTION + _GAP + _CURRENCY, re.IGNORECASE)

_MIN_LABEL_RE = re.compile(
    r"(?:минимальн(?:ая|ой|ую)\s+(?:б/у\s+)?цен[аыу]|min(?:imum)?\s+(?:used\s+)?price)"
    + _LABEL_SEP
    + _AMOUNT,
    re.IGNORECASE,
)

_PRICE_LABEL_RE = re.compile(
    r"(?:\bцен[аыеу]\b|\bprices?\b)" + _LABEL_SEP + _AMOUNT,
    re.IGNORECASE,
)

_COST_LABEL_RE = re.compile(
    r"(?:\bстоимост[ьи]\b|\bcost\b|\bvalue\b)" + _LABEL_SEP + _AMOUNT,
    re.IGNORECASE,
)

PRICE_PATTERNS: tuple[re.Pattern[str], ...] = (
    _CURRENCY_RE,
    _MIN_LABEL_RE,
    _PRICE_LABEL_RE,
    _COST_LABEL_RE,
)

_NON_DIGIT_RE = re.compile(r"\D")


def _to_int(amount: str) -> int | None:
    digits = _NON_DIGIT_RE.sub("", amount)
    if not digits:
        return None
    return int(digits)


def _is_plausible(price: int) -> bool:
    return MIN_PLAUSIBLE_PRICE < price < MAX_PLAUSIBLE_PRICE


def find_candidate_prices(text: str) -> list[int]:
    """Every in-band price found by any pattern family, in pattern order."""
    candidates: list[int] = []
    for pattern in PRICE_PATTERNS:
        for match in pattern.finditer(text):
            price = _to_int(match.group("amount"))
            if price is not None and _is_plausible(price):
                candidates.append(price)
    return candidates


def extract_min_price(text: str | None) -> int | None:
    """
    Return the smallest plausible ruble price mentioned in text, or None.

    A number counts when it is tagged with a currency ("84 990 ₽", "5000 руб.")
    or follows a price label ("Минимальная цена: ...", "цена", "стоимость",
    "price", "cost"). The smallest candidate wins even when it is a decoy.
    """
    if not text:
        return None
    candidates = find_candidate_prices(text)
    return min(candidates) if candidates else None


def normalize_name(name: str) -> str:
    return " ".join(name.casefold().split())


def match_product(
    products: Iterable[Product],
    name: str | None,
    *,
    strict: bool = False,
) -> Product | None:
    """
    First product whose name contains the query or is contained by it.

    Comparison is case-insensitive. With strict=True only whitespace-normalised
    equality counts. A blank query matches nothing.
    """
    query = normalize_name(name or "")
    if not query:
        return None

    for product in products:
        stored = normalize_name(product.name)
        if not stored:
            continue
        if strict:
            if stored == query:
                return product
        elif query in stored or stored in query:
            return product
    return None
