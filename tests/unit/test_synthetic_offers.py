"""Unit tests for the deterministic synthetic offer generator."""
from price_analyzer.domain.entities.search_offer import SearchOffer
from price_analyzer.domain.enums.search_type import SearchType
from price_analyzer.domain.services.price_extractor import extract_min_price
from price_analyzer.domain.services.synthetic_offers import (
    base_price_for,
    format_offers_for_prompt,
    format_price,
    generate_synthetic_offers,
    retail_round,
)


class TestBasePrice:
    def test_keyword_table(self) -> None:
        assert base_price_for("Apple iPhone 15 Pro 256GB") == 119_990
        assert base_price_for("MacBook Air M2") == 119_990

    def test_unknown_query_uses_stable_hash(self) -> None:
        price = base_price_for("Чайник Bosch TWK")
        assert price == base_price_for("  чайник   bosch twk ")
        assert price % 1000 == 990


class TestRetailRound:
    def test_rounds_to_990_ending(self) -> None:
        assert retail_round(84_321) == 83_990
        assert retail_round(84_700) == 84_990

    def test_floor(self) -> None:
        assert retail_round(120) == 990


class TestGenerateSyntheticOffers:
    def test_deterministic(self) -> None:
        first = generate_synthetic_offers("iPhone 15", SearchType.COMPETITOR)
        second = generate_synthetic_offers("iPhone 15", SearchType.COMPETITOR)
        assert first == second

    def test_competitor_offers_within_spread(self) -> None:
        offers = generate_synthetic_offers("iPhone 15", SearchType.COMPETITOR)
        base = base_price_for("iPhone 15")

        assert len(offers) == 5
        assert len({offer.source for offer in offers}) == 5
        for offer in offers:
            assert offer.synthetic
            assert offer.price is not None
            assert offer.price % 1000 == 990
            # +-15% plus up to 1000 of rounding
            assert base * 0.85 - 1000 <= offer.price <= base * 1.15 + 1000

    def test_avito_offers_are_discounted(self) -> None:
        offers = generate_synthetic_offers("iPhone 15", SearchType.AVITO)
        base = base_price_for("iPhone 15")

        assert offers
        for offer in offers:
            assert offer.source == "Avito"
            assert "avito.ru" in offer.url
            assert offer.price is not None
            assert base * 0.45 - 1000 <= offer.price <= base * 0.80 + 1000

    def test_sorted_by_price(self) -> None:
        offers = generate_synthetic_offers("Sony PlayStation 5", SearchType.AVITO, count=4)
        prices = [offer.price for offer in offers]
        assert prices == sorted(prices)
        assert len(offers) == 4

    def test_blank_query(self) -> None:
        assert generate_synthetic_offers("  ", SearchType.COMPETITOR) == []


class TestFormatOffersForPrompt:
    def test_lists_offers_with_extractable_prices(self) -> None:
        offers = [
            SearchOffer(title="iPhone 15", price=84990, source="DNS", url="https://dns"),
            SearchOffer(title="iPhone 15", price=89990, source="Ozon"),
        ]
        text = format_offers_for_prompt(offers, "iPhone 15", SearchType.COMPETITOR)

        assert "1. iPhone 15: 84 990 ₽, DNS https://dns" in text
        assert "2. iPhone 15: 89 990 ₽, Ozon" in text
        assert "Примечание" not in text
        assert extract_min_price(text) == 84990

    def test_synthetic_note(self) -> None:
        offers = generate_synthetic_offers("iPhone 15", SearchType.AVITO)
        text = format_offers_for_prompt(offers, "iPhone 15", SearchType.AVITO)
        assert "б/у предложения на Avito" in text
        assert "Примечание" in text

    def test_no_offers(self) -> None:
        text = format_offers_for_prompt([], "iPhone 15", SearchType.COMPETITOR)
        assert "не дал результатов" in text

    def test_format_price(self) -> None:
        assert format_price(1250000) == "1 250 000"
