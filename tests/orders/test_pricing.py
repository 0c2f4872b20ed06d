"""
Tests unitaires du calcul des prix (fonctions pures, sans base de données).
"""
from decimal import Decimal

import pytest

from designshop.orders.exceptions import InvalidTierException
from designshop.orders.pricing import (
    PricedLineItem,
    compute_pricing,
    flatten_customizations,
    price_line_item,
    resolve_tier,
)
from designshop.products.models import Product


def _product(price: dict, product_id: int = 1) -> Product:
    return Product(id=product_id, name="Logo Design", category="logo", price=price, images=[])


def test_resolve_tier_prefers_tier_then_package_type():
    assert resolve_tier("premium", "enterprise") == "premium"
    assert resolve_tier(None, "enterprise") == "enterprise"
    assert resolve_tier(None, None) == "base"
    assert resolve_tier("", "") == "base"


def test_price_line_item_copies_tier_price():
    item = price_line_item(_product({"base": 500, "premium": 900}), tier="premium", quantity=3)

    assert item.product_id == 1
    assert item.package_type == "premium"
    assert item.quantity == 3
    assert item.price == Decimal("900")
    assert item.line_total == Decimal("2700")


def test_price_line_item_defaults_quantity_and_tier():
    item = price_line_item(_product({"base": 500}))

    assert item.package_type == "base"
    assert item.quantity == 1
    assert item.customizations == []


def test_price_line_item_zero_quantity_falls_back_to_one():
    item = price_line_item(_product({"base": 500}), quantity=0)
    assert item.quantity == 1


def test_price_line_item_uses_legacy_package_type():
    item = price_line_item(_product({"base": 500, "enterprise": 1500}), package_type="enterprise")
    assert item.package_type == "enterprise"
    assert item.price == Decimal("1500")


@pytest.mark.parametrize("price_grid", [{"base": 500}, {"base": 500, "premium": 0}, {}])
def test_price_line_item_missing_or_zero_tier_raises(price_grid):
    with pytest.raises(InvalidTierException) as exc_info:
        price_line_item(_product(price_grid), tier="premium")

    assert exc_info.value.message == "Pricing tier 'premium' not found"
    assert exc_info.value.status_code == 400


def test_price_line_item_keeps_float_prices_exact():
    item = price_line_item(_product({"base": 250.5}), quantity=2)
    assert item.price == Decimal("250.5")
    assert item.line_total == Decimal("501.0")


def test_flatten_customizations_keeps_insertion_order():
    flattened = flatten_customizations({"color": "red", "font": "Serif", "size": 12})

    assert flattened == [
        {"option_name": "color", "selected_value": "red"},
        {"option_name": "font", "selected_value": "Serif"},
        {"option_name": "size", "selected_value": 12},
    ]
    assert flatten_customizations(None) == []


def test_compute_pricing_base_scenario():
    """base=500, quantité 2 -> 1000 / 100 / 1100."""
    item = price_line_item(_product({"base": 500}), tier="base", quantity=2)
    pricing = compute_pricing([item], 0.10)

    assert pricing.subtotal == Decimal("1000")
    assert pricing.tax == Decimal("100.00")
    assert pricing.total == Decimal("1100.00")


def test_compute_pricing_sums_lines_and_rounds_tax():
    items = [
        PricedLineItem(product_id=1, package_type="base", quantity=1, price=Decimal("99.95")),
        PricedLineItem(product_id=2, package_type="premium", quantity=3, price=Decimal("10.10")),
    ]
    pricing = compute_pricing(items, "0.10")

    assert pricing.subtotal == Decimal("130.25")
    # 13.025 arrondi au centime supérieur
    assert pricing.tax == Decimal("13.03")
    assert pricing.total == Decimal("143.28")


def test_compute_pricing_empty_is_zero():
    pricing = compute_pricing([], 0.10)
    assert pricing.subtotal == Decimal("0")
    assert pricing.total == Decimal("0")
