"""
Tests unitaires du calcul des montants de lignes.
"""
from decimal import Decimal

import pytest

from scms.core.exceptions import DuplicateProductException, ValidationException
from scms.pricing.service import clamp_discount, compute_line_total, round_currency, sum_line_totals
from scms.pricing.validation import validate_line_items
from scms.quotations.domain.entities import QuotationItem


@pytest.mark.parametrize(
    "quantity, price, discount, expected",
    [
        (2, "100", "10", Decimal("180")),
        (1, "50", "0", Decimal("50")),
        (0, "100", "25", Decimal("0")),
        (3, "19.99", "100", Decimal("0")),
        (7, "0", "15", Decimal("0")),
    ],
)
def test_compute_line_total(quantity, price, discount, expected):
    assert compute_line_total(quantity, price, discount) == expected


def test_compute_line_total_without_discount_is_quantity_times_price():
    assert compute_line_total(4, Decimal("12.50")) == Decimal("50.00")


def test_compute_line_total_missing_quantity_counts_as_zero():
    assert compute_line_total(None, Decimal("10"), Decimal("5")) == Decimal("0")


def test_compute_line_total_is_not_rounded():
    # 1 * 10.01 * 0.975 = 9.75975
    total = compute_line_total(1, Decimal("10.01"), Decimal("2.5"))
    assert total == Decimal("9.75975")
    assert round_currency(total) == Decimal("9.76")


def test_float_inputs_are_converted_through_str():
    assert compute_line_total(3, 0.1, 0) == Decimal("0.3")


def test_round_currency_half_up():
    assert round_currency(Decimal("2.005")) == Decimal("2.01")
    assert round_currency(Decimal("2.004")) == Decimal("2.00")
    assert round_currency(None) == Decimal("0.00")


@pytest.mark.parametrize(
    "raw, expected",
    [(-5, Decimal("0")), ("12.5", Decimal("12.5")), (150, Decimal("100")), (None, Decimal("0")), ("33.333", Decimal("33.33"))],
)
def test_clamp_discount(raw, expected):
    assert clamp_discount(raw) == expected


def test_line_is_priced_at_stored_precision():
    item = QuotationItem(product_id=1, quantity=3, unit_price=Decimal("100.004"), discount=Decimal("33.333"))
    assert (item.unit_price, item.discount) == (Decimal("100.00"), Decimal("33.33"))
    assert round_currency(item.line_total) == item.line_total == Decimal("200.01")


def test_sum_line_totals_of_two_line_quotation():
    items = [
        QuotationItem(product_id=1, quantity=2, unit_price=Decimal("100"), discount=Decimal("10")),
        QuotationItem(product_id=2, quantity=1, unit_price=Decimal("50"), discount=Decimal("0")),
    ]
    assert sum_line_totals(items) == Decimal("230")
    assert sum_line_totals([]) == Decimal("0")


def test_validate_line_items_rejects_duplicates():
    items = [
        QuotationItem(product_id=1, quantity=1, unit_price=Decimal("10")),
        QuotationItem(product_id=1, quantity=2, unit_price=Decimal("10")),
    ]
    with pytest.raises(DuplicateProductException) as exc_info:
        validate_line_items(items)
    assert exc_info.value.product_id == 1


@pytest.mark.parametrize(
    "item, field",
    [
        (QuotationItem(product_id=None, quantity=1, unit_price=Decimal("10")), "product_id"),
        (QuotationItem(product_id=1, quantity=0, unit_price=Decimal("10")), "quantity"),
        (QuotationItem(product_id=1, quantity=1, unit_price=Decimal("-1")), "unit_price"),
        (QuotationItem(product_id=1, quantity=1, unit_price=Decimal("10"), discount=Decimal("101")), "discount"),
    ],
)
def test_validate_line_items_rejects_invalid_values(item, field):
    with pytest.raises(ValidationException) as exc_info:
        validate_line_items([item])
    assert exc_info.value.field == field
