import pytest

from scms.stock.domain.entities import InventoryRecord
from scms.stock.exceptions import InsufficientStockException
from scms.stock.service import StockGate


def test_available_stock_defaults_to_zero_without_record(stock_gate):
    assert stock_gate.available_stock(3) == 3
    assert stock_gate.available_stock(404) == 0


def test_ensure_available(stock_gate):
    stock_gate.ensure_available(3, 3)
    with pytest.raises(InsufficientStockException) as exc_info:
        stock_gate.ensure_available(3, 5)
    assert (exc_info.value.product_id, exc_info.value.requested, exc_info.value.available) == (3, 5, 3)


def test_cap_quantity_never_negative(stock_gate):
    assert stock_gate.cap_quantity(3, 5) == 3
    assert stock_gate.cap_quantity(3, -2) == 0


def test_low_stock_listing_sorted_by_stock():
    gate = StockGate([
        InventoryRecord(product_id=1, current_stock=8, reorder_level=10),
        InventoryRecord(product_id=2, current_stock=50, reorder_level=10),
        InventoryRecord(product_id=3, current_stock=2, reorder_level=5),
        InventoryRecord(product_id=4, current_stock=5, reorder_level=5),
    ])
    assert [r.product_id for r in gate.low_stock()] == [3, 4, 1]
    assert gate.is_low_stock(4)
    assert not gate.is_low_stock(2)
    assert gate.is_low_stock(99)


def test_gate_does_not_decrement_stock(stock_gate):
    stock_gate.ensure_available(1, 10)
    stock_gate.ensure_available(1, 10)
    assert stock_gate.available_stock(1) == 10
