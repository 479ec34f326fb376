"""Pricing calculator: effective price, shipping threshold, tax rounding, totals."""

from decimal import Decimal

import pytest

from shopfront.services.pricing import (
    FLAT_SHIPPING_FEE,
    effective_price,
    line_subtotal,
    order_totals,
    shipping_cost,
    tax,
)


def test_discount_price_wins_when_positive():
    assert effective_price(Decimal("10.00"), Decimal("7.50")) == Decimal("7.50")


@pytest.mark.parametrize("discount", [None, Decimal("0"), Decimal("0.00")])
def test_list_price_used_without_usable_discount(discount):
    assert effective_price(Decimal("10.00"), discount) == Decimal("10.00")


def test_line_subtotal_multiplies_and_quantizes():
    assert line_subtotal(Decimal("3.33"), 3) == Decimal("9.99")


def test_shipping_is_flat_below_threshold():
    assert shipping_cost(Decimal("99.99")) == FLAT_SHIPPING_FEE


def test_shipping_is_free_at_threshold():
    assert shipping_cost(Decimal("100.00")) == Decimal("0.00")
    assert shipping_cost(Decimal("250.00")) == Decimal("0.00")


def test_tax_rounds_half_up_to_cents():
    # 0.05 * 0.10 = 0.005, which rounds up
    assert tax(Decimal("0.05")) == Decimal("0.01")
    assert tax(Decimal("20.00")) == Decimal("2.00")


def test_order_totals_two_items_at_ten():
    totals = order_totals([line_subtotal(Decimal("10.00"), 2)])

    assert totals.subtotal == Decimal("20.00")
    assert totals.shipping_cost == Decimal("9.99")
    assert totals.tax == Decimal("2.00")
    assert totals.discount == Decimal("0.00")
    assert totals.total_amount == Decimal("31.99")


def test_order_totals_free_shipping_and_discount():
    totals = order_totals([Decimal("60.00"), Decimal("40.00")], discount=Decimal("5.00"))

    assert totals.subtotal == Decimal("100.00")
    assert totals.shipping_cost == Decimal("0.00")
    assert totals.tax == Decimal("10.00")
    assert totals.total_amount == Decimal("105.00")


def test_order_totals_are_immutable():
    totals = order_totals([Decimal("1.00")])

    with pytest.raises(AttributeError):
        totals.total_amount = Decimal("0")
