"""Keyword routing for natural-language assistant commands."""

import re
from dataclasses import dataclass
from decimal import Decimal

from price_analyzer.domain.enums.command_intent import CommandIntent

_EDIT_KEYWORDS_RU = ("измени", "установи", "обнови")
_EDIT_KEYWORDS_EN_RE = re.compile(r"\b(?:update|change|set)\b")
_FIND_EN_RE = re.compile(r"\bfind\b")
_COMPETITOR_EN_RE = re.compile(r"\bcompetitors?\b")
_USED_EN_RE = re.compile(r"\b(?:used|avito)\b")

# --- Product name patterns (first match wins) ---
_SEARCH_NAME_PATTERNS: list[re.Pattern[str]] = [
    re.compile(
        r"найди.*?(?:цену|б/у).*?\bна\s+(.+?)(?:\s+(?:у|на\s+(?:avito|авито))\b|\s*$)",
        re.IGNORECASE,
    ),
    re.compile(
        r"\bfind\b.*?\bprice\b.*?\b(?:for|of)\s+(.+?)(?:\s+(?:on|at|from)\b|\s*$)",
        re.IGNORECASE,
    ),
]

_QUANTITY_PATTERNS: list[re.Pattern[str]] = [
    re.compile(r"(?:измени|обнови|установи).*?количество\s+(.+?)\s+на\s+(\d+)", re.IGNORECASE),
    re.compile(
        r"\b(?:update|change|set)\s+(?:the\s+)?quantity\s+of\s+(.+?)\s+to\s+(\d+)",
        re.IGNORECASE,
    ),
]

_SALE_PRICE_PATTERNS: list[re.Pattern[str]] = [
    re.compile(
        r"(?:установи|измени|обнови).*?цену(?:\s+продажи)?\s+(.+?)\s+(?:на\s+)?"
        r"(\d+(?:[.,]\d{1,2})?)\s*(?:₽|руб(?:лей)?\.?|р\.)?[\s.!]*$",
        re.IGNORECASE,
    ),
    re.compile(
        r"\b(?:set|update|change)\s+(?:the\s+)?(?:sale\s+)?price\s+of\s+(.+?)\s+to\s+(\d+(?:[.,]\d{1,2})?)",
        re.IGNORECASE,
    ),
]

_QUOTES = "\"'«»“”„"


@dataclass(frozen=True)
class ParsedCommand:
    intent: CommandIntent
    raw: str
    product_name: str | None = None
    field: str | None = None
    value: int | Decimal | None = None

    @property
    def is_direct_edit(self) -> bool:
        return (
            self.intent == CommandIntent.EDIT
            and self.product_name is not None
            and self.field is not None
            and self.value is not None
        )


def _clean_name(raw: str) -> str | None:
    name = raw.strip().strip(_QUOTES).strip().rstrip(".!?").strip()
    return name or None


def detect_intent(text: str) -> CommandIntent:
    """Classify a command by keyword containment, checked in priority order."""
    lowered = text.lower()

    if ("найди цену" in lowered and "конкурент" in lowered) or (
        _FIND_EN_RE.search(lowered) and _COMPETITOR_EN_RE.search(lowered)
    ):
        return CommandIntent.COMPETITOR_SEARCH

    if ("найди" in lowered and "б/у" in lowered) or (
        _FIND_EN_RE.search(lowered) and _USED_EN_RE.search(lowered)
    ):
        return CommandIntent.USED_PRICE_SEARCH

    if any(keyword in lowered for keyword in _EDIT_KEYWORDS_RU) or _EDIT_KEYWORDS_EN_RE.search(
        lowered
    ):
        return CommandIntent.EDIT

    return CommandIntent.UNRECOGNIZED


def extract_product_name(text: str) -> str | None:
    """Pull the product name out of a search or edit command."""
    for pattern in (*_SEARCH_NAME_PATTERNS, *_QUANTITY_PATTERNS, *_SALE_PRICE_PATTERNS):
        match = pattern.search(text)
        if match:
            return _clean_name(match.group(1))
    return None


def _parse_edit(text: str) -> tuple[str | None, str | None, int | Decimal | None]:
    for pattern in _QUANTITY_PATTERNS:
        match = pattern.search(text)
        if match:
            return _clean_name(match.group(1)), "quantity", int(match.group(2))

    for pattern in _SALE_PRICE_PATTERNS:
        match = pattern.search(text)
        if match:
            return (
                _clean_name(match.group(1)),
                "sale_price",
                Decimal(match.group(2).replace(",", ".")),
            )

    return None, None, None


def parse_command(text: str) -> ParsedCommand:
    raw = text.strip()
    intent = detect_intent(raw)

    if intent in (CommandIntent.COMPETITOR_SEARCH, CommandIntent.USED_PRICE_SEARCH):
        name = None
        for pattern in _SEARCH_NAME_PATTERNS:
            match = pattern.search(raw)
            if match:
                name = _clean_name(match.group(1))
                break
        return ParsedCommand(intent=intent, raw=raw, product_name=name)

    if intent == CommandIntent.EDIT:
        name, field_name, value = _parse_edit(raw)
        return ParsedCommand(
            intent=intent, raw=raw, product_name=name, field=field_name, value=value
        )

    return ParsedCommand(intent=intent, raw=raw)
