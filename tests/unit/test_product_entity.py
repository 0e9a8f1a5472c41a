"""Unit tests for the Product domain entity."""
from datetime import timedelta
from decimal import Decimal

import pytest

from price_analyzer.domain.entities.product import InvalidProductDataError, Product
from price_analyzer.domain.enums.search_type import SearchType


def _make_product(**overrides) -> Product:  # type: ignore[no-untyped-def]
    defaults = dict(
        name="iPhone 15 Pro",
        description="256 GB",
        quantity=3,
        purchase_price=Decimal("90000"),
        sale_price=Decimal("119990"),
    )
    defaults.update(overrides)
    return Product.create(**defaults)


class TestCreate:
    def test_defaults(self) -> None:
        product = Product.create(name="  MacBook Air  ")
        assert product.name == "MacBook Air"
        assert product.quantity == 0
        assert product.competitor_new_price == Decimal("0")
        assert product.competitor_used_price == Decimal("0")
        assert product.id

    def test_ids_are_unique(self) -> None:
        assert _make_product().id != _make_product().id

    def test_explicit_id_is_kept(self) -> None:
        assert _make_product(product_id="abc123").id == "abc123"

    def test_blank_name_rejected(self) -> None:
        with pytest.raises(InvalidProductDataError) as exc_info:
            _make_product(name="   ")
        assert exc_info.value.field_name == "name"

    def test_negative_quantity_rejected(self) -> None:
        with pytest.raises(InvalidProductDataError):
            _make_product(quantity=-1)

    def test_negative_price_rejected(self) -> None:
        with pytest.raises(InvalidProductDataError):
            _make_product(sale_price=Decimal("-5"))


class TestUpdateFields:
    def test_updates_and_touches(self) -> None:
        product = _make_product()
        product.last_updated -= timedelta(minutes=5)
        before = product.last_updated

        product.update_fields(quantity=10, sale_price="109990.50")

        assert product.quantity == 10
        assert product.sale_price == Decimal("109990.50")
        assert product.last_updated > before

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(InvalidProductDataError) as exc_info:
            _make_product().update_fields(id="other")
        assert exc_info.value.field_name == "id"

    def test_invalid_value_rejected(self) -> None:
        with pytest.raises(InvalidProductDataError):
            _make_product().update_fields(quantity=-3)

    @pytest.mark.parametrize("field_name", ["name", "quantity", "sale_price"])
    def test_null_value_rejected(self, field_name: str) -> None:
        product = _make_product()
        with pytest.raises(InvalidProductDataError) as exc_info:
            product.update_fields(**{field_name: None})
        assert exc_info.value.field_name == field_name
        assert product.name


class TestApplyCompetitorPrice:
    def test_competitor_search_sets_new_price(self) -> None:
        product = _make_product()
        product.apply_competitor_price(SearchType.COMPETITOR, 84990)
        assert product.competitor_new_price == Decimal("84990")
        assert product.competitor_used_price == Decimal("0")

    def test_avito_search_sets_used_price(self) -> None:
        product = _make_product()
        product.last_updated -= timedelta(minutes=5)
        before = product.last_updated

        product.apply_competitor_price(SearchType.AVITO, 55990)

        assert product.competitor_used_price == Decimal("55990")
        assert product.competitor_new_price == Decimal("0")
        assert product.last_updated > before
