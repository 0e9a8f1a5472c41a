"""Unit tests for assistant command routing and product name extraction."""
from decimal import Decimal

import pytest

from price_analyzer.domain.enums.command_intent import CommandIntent
from price_analyzer.domain.services.command_router import (
    detect_intent,
    extract_product_name,
    parse_command,
)


class TestDetectIntent:
    @pytest.mark.parametrize(
        "text, intent",
        [
            ("Найди цену на iPhone 15 у конкурентов", CommandIntent.COMPETITOR_SEARCH),
            ("найди б/у цену на MacBook Air", CommandIntent.USED_PRICE_SEARCH),
            ("Измени количество iPhone 15 на 10", CommandIntent.EDIT),
            ("Установи цену продажи iPhone 15 99990", CommandIntent.EDIT),
            ("обнови описание товара", CommandIntent.EDIT),
            ("Find competitor price for iPhone 15", CommandIntent.COMPETITOR_SEARCH),
            ("find used price for iPhone 15 on Avito", CommandIntent.USED_PRICE_SEARCH),
            ("set quantity of iPhone 15 to 3", CommandIntent.EDIT),
            ("Привет!", CommandIntent.UNRECOGNIZED),
            ("reset everything", CommandIntent.UNRECOGNIZED),
        ],
    )
    def test_intents(self, text: str, intent: CommandIntent) -> None:
        assert detect_intent(text) == intent

    def test_competitor_search_checked_before_used_search(self) -> None:
        # Mentions both "конкурент" and "б/у": the competitor rule comes first.
        assert (
            detect_intent("Найди цену на б/у iPhone у конкурентов")
            == CommandIntent.COMPETITOR_SEARCH
        )

    def test_find_without_used_marker_is_not_a_search(self) -> None:
        assert detect_intent("найди iPhone") == CommandIntent.UNRECOGNIZED


class TestExtractProductName:
    @pytest.mark.parametrize(
        "text, name",
        [
            ("Найди цену на iPhone 15 Pro у конкурентов", "iPhone 15 Pro"),
            ("Найди цену у конкурентов на iPhone 15", "iPhone 15"),
            ("Найди минимальную б/у цену на MacBook Air на Avito", "MacBook Air"),
            ("найди б/у цену на «Sony WH-1000XM5»", "Sony WH-1000XM5"),
            ("Find competitor price for Galaxy S24 on Ozon", "Galaxy S24"),
            ("Измени количество iPhone 15 на 10", "iPhone 15"),
            ("Установи цену продажи iPhone 15 99990", "iPhone 15"),
        ],
    )
    def test_names(self, text: str, name: str) -> None:
        assert extract_product_name(text) == name

    def test_unparseable(self) -> None:
        assert extract_product_name("найди цену у конкурентов") is None


class TestParseCommand:
    def test_competitor_search(self) -> None:
        command = parse_command("  Найди цену на iPhone 15 у конкурентов  ")
        assert command.intent == CommandIntent.COMPETITOR_SEARCH
        assert command.product_name == "iPhone 15"
        assert command.raw == "Найди цену на iPhone 15 у конкурентов"
        assert command.field is None

    def test_quantity_edit(self) -> None:
        command = parse_command("Измени количество iPhone 15 на 10")
        assert command.intent == CommandIntent.EDIT
        assert command.product_name == "iPhone 15"
        assert command.field == "quantity"
        assert command.value == 10
        assert command.is_direct_edit

    def test_sale_price_edit(self) -> None:
        command = parse_command("Установи цену продажи iPhone 15 99990 ₽")
        assert command.field == "sale_price"
        assert command.product_name == "iPhone 15"
        assert command.value == Decimal("99990")

    def test_english_sale_price_edit(self) -> None:
        command = parse_command("set sale price of MacBook Air to 119990.50")
        assert command.field == "sale_price"
        assert command.product_name == "MacBook Air"
        assert command.value == Decimal("119990.50")

    def test_free_form_edit_is_not_direct(self) -> None:
        command = parse_command("обнови описание товара")
        assert command.intent == CommandIntent.EDIT
        assert not command.is_direct_edit

    def test_unrecognized(self) -> None:
        command = parse_command("Какая погода?")
        assert command.intent == CommandIntent.UNRECOGNIZED
        assert command.product_name is None
