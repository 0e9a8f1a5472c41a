"""
Deterministic stand-in offers used when web search is unavailable.

The same query and search type always produce the same offers, so repeated
searches (and tests) are stable.
"""

import hashlib
import random
from urllib.parse import quote_plus

from price_analyzer.domain.entities.search_offer import SearchOffer
from price_analyzer.domain.enums.search_type import SearchType
from price_analyzer.domain.services.price_extractor import normalize_name

# Rough new-goods price levels in rubles, most specific keywords first.
BASE_PRICES: list[tuple[str, int]] = [
    ("iphone 15 pro max", 139_990),
    ("iphone 15 pro", 119_990),
    ("iphone", 89_990),
    ("macbook pro", 199_990),
    ("macbook", 119_990),
    ("ipad", 59_990),
    ("apple watch", 39_990),
    ("airpods", 19_990),
    ("galaxy s", 84_990),
    ("samsung", 49_990),
    ("xiaomi", 29_990),
    ("playstation", 59_990),
    ("ps5", 59_990),
    ("xbox", 54_990),
    ("nintendo switch", 32_990),
    ("dyson", 44_990),
    ("ноутбук", 69_990),
    ("телевизор", 49_990),
    ("смартфон", 29_990),
    ("планшет", 29_990),
    ("наушники", 7_990),
    ("холодильник", 59_990),
    ("стиральная машина", 39_990),
]

_HASHED_PRICE_MIN = 2_000
_HASHED_PRICE_MAX = 150_000

NEW_GOODS_SPREAD = 0.15
USED_GOODS_RANGE = (0.45, 0.80)

_SHOPS: list[tuple[str, str]] = [
    ("DNS", "https://www.dns-shop.ru/search/?q={q}"),
    ("М.Видео", "https://www.mvideo.ru/product-list-page?q={q}"),
    ("Эльдорадо", "https://www.eldorado.ru/search/catalog.php?q={q}"),
    ("Ozon", "https://www.ozon.ru/search/?text={q}"),
    ("Wildberries", "https://www.wildberries.ru/catalog/0/search.aspx?search={q}"),
    ("Ситилинк", "https://www.citilink.ru/search/?text={q}"),
    ("Яндекс Маркет", "https://market.yandex.ru/search?text={q}"),
]

_AVITO_URL = "https://www.avito.ru/rossiya?q={q}"
_AVITO_CITIES = ["Москва", "Санкт-Петербург", "Казань", "Екатеринбург", "Новосибирск", "Краснодар"]
_USED_CONDITIONS = [
    "отличное состояние",
    "хорошее состояние",
    "есть следы использования",
    "полный комплект",
    "без коробки",
]


def _seed(query: str, search_type: SearchType) -> int:
    digest = hashlib.sha256(f"{search_type.value}:{query}".encode("utf-8")).hexdigest()
    return int(digest[:16], 16)


def base_price_for(query: str) -> int:
    """Keyword-table price level for a query, else one derived from its hash."""
    normalized = normalize_name(query)
    for keyword, price in BASE_PRICES:
        if keyword in normalized:
            return price

    digest = hashlib.sha256(normalized.encode("utf-8")).hexdigest()
    span = _HASHED_PRICE_MAX - _HASHED_PRICE_MIN
    return retail_round(_HASHED_PRICE_MIN + int(digest[:8], 16) % span)


def retail_round(price: float) -> int:
    """Round to the nearest thousand and end in 990 (84 990, 119 990)."""
    return max(990, int(round(price / 1000.0)) * 1000 - 10)


def format_price(price: int) -> str:
    return f"{price:,}".replace(",", " ")


def generate_synthetic_offers(
    query: str,
    search_type: SearchType,
    count: int = 5,
) -> list[SearchOffer]:
    normalized = normalize_name(query)
    if not normalized or count <= 0:
        return []

    rng = random.Random(_seed(normalized, search_type))
    base = base_price_for(normalized)
    q = quote_plus(query.strip())
    title = query.strip()

    offers: list[SearchOffer] = []
    if search_type.is_used_goods:
        low, high = USED_GOODS_RANGE
        for _ in range(count):
            price = retail_round(base * rng.uniform(low, high))
            condition = rng.choice(_USED_CONDITIONS)
            city = rng.choice(_AVITO_CITIES)
            offers.append(
                SearchOffer(
                    title=f"{title}, б/у",
                    price=price,
                    source="Avito",
                    url=_AVITO_URL.format(q=q),
                    snippet=f"{condition}, {city}",
                    synthetic=True,
                )
            )
    else:
        shops = rng.sample(_SHOPS, k=min(count, len(_SHOPS)))
        for shop_name, url_template in shops:
            factor = rng.uniform(1 - NEW_GOODS_SPREAD, 1 + NEW_GOODS_SPREAD)
            offers.append(
                SearchOffer(
                    title=title,
                    price=retail_round(base * factor),
                    source=shop_name,
                    url=url_template.format(q=q),
                    snippet="новый, в наличии" if rng.random() > 0.2 else "новый, под заказ",
                    synthetic=True,
                )
            )

    offers.sort(key=lambda offer: offer.price or 0)
    return offers


def format_offers_for_prompt(
    offers: list[SearchOffer],
    query: str,
    search_type: SearchType,
) -> str:
    """Render offers as context for the LLM."""
    scope = "б/у предложения на Avito" if search_type.is_used_goods else "новые товары у магазинов"
    if not offers:
        return f"Поиск по запросу «{query}» ({scope}) не дал результатов."

    lines = [f"Результаты поиска по запросу «{query}» ({scope}):"]
    for index, offer in enumerate(offers, start=1):
        price = f"{format_price(offer.price)} ₽" if offer.price else "цена не указана"
        line = f"{index}. {offer.title}: {price}, {offer.source}"
        if offer.snippet:
            line += f" ({offer.snippet})"
        if offer.url:
            line += f" {offer.url}"
        lines.append(line)

    if any(offer.synthetic for offer in offers):
        lines.append(
            "Примечание: живой поиск недоступен, цены ориентировочные и сгенерированы автоматически."
        )
    return "\n".join(lines)
