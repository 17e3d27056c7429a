"""
Tests unitaires de l'OrderMaterializer.
"""
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from scms.core.exceptions import (
    DependencyUnavailableException,
    DuplicateProductException,
    ValidationException,
)
from scms.customers.domain.entities import Customer
from scms.orders.application.materializer import OrderMaterializer
from scms.orders.domain.entities import FROM_STORAGE, Order, OrderItem
from scms.orders.domain.exceptions import QuotationNotApprovedException
from scms.orders.domain.status import OrderStatus
from scms.quotations.domain.exceptions import AlreadyConvertedException
from scms.quotations.domain.status import QuotationStatus
from scms.quotations.application.aggregator import QuotationAggregator
from scms.stock.domain.entities import InventoryRecord
from scms.stock.exceptions import InsufficientStockException
from scms.stock.service import StockGate

CUSTOMER_ADDRESS = "12 rue des Lilas, 69003 Lyon"


@pytest.fixture
def materializer(aggregator) -> OrderMaterializer:
    return OrderMaterializer(aggregator)


@pytest.fixture
def approved_quotation(aggregator):
    quotation = aggregator.new_quotation(1, quote_date=datetime(2026, 3, 2, tzinfo=timezone.utc))
    quotation = aggregator.add_item(quotation, 1, 2, discount=10)
    quotation = aggregator.add_item(quotation, 2, 1)
    return quotation.model_copy(update={"id": 11, "status": QuotationStatus.APPROVED})


def _existing_order(quotation_id):
    return Order(
        id=500,
        customer_id=1,
        quotation_id=quotation_id,
        order_date=datetime(2026, 3, 3, tzinfo=timezone.utc),
        shipping_address=CUSTOMER_ADDRESS,
        total_amount=Decimal("50"),
        items=[OrderItem(product_id=2, quantity=1, unit_price=Decimal("50"))],
    )


def test_order_snapshot_copies_quotation(materializer, approved_quotation, customer):
    order = materializer.create_order_from_quotation(approved_quotation, [], customer)

    assert order.quotation_id == 11
    assert order.customer_id == 1
    assert order.status == OrderStatus.PENDING
    assert order.shipping_address == CUSTOMER_ADDRESS
    assert order.total_amount == Decimal("230")
    assert [(i.product_id, i.quantity, i.unit_price, i.discount) for i in order.items] == [
        (1, 2, Decimal("100.00"), Decimal("10")),
        (2, 1, Decimal("50.00"), Decimal("0")),
    ]


def test_order_is_unaffected_by_later_quotation_edits(materializer, aggregator, approved_quotation, customer):
    order = materializer.create_order_from_quotation(approved_quotation, [], customer)
    aggregator.remove_item(approved_quotation, 0)
    assert order.total_amount == Decimal("230")
    assert len(order.items) == 2


def test_shipping_address_override(materializer, approved_quotation, customer):
    order = materializer.create_order_from_quotation(
        approved_quotation, [], customer, shipping_address="  Quai Perrache, Lyon  "
    )
    assert order.shipping_address == "Quai Perrache, Lyon"


@pytest.mark.parametrize("address", ["abc", "x" * 256])
def test_shipping_address_length_is_checked(materializer, approved_quotation, customer, address):
    with pytest.raises(ValidationException) as exc_info:
        materializer.create_order_from_quotation(approved_quotation, [], customer, shipping_address=address)
    assert exc_info.value.field == "shipping_address"


def test_missing_shipping_address(materializer, approved_quotation):
    customer = Customer(id=1, company_name="Sans adresse")
    with pytest.raises(ValidationException):
        materializer.create_order_from_quotation(approved_quotation, [], customer)


@pytest.mark.parametrize("status", list(QuotationStatus))
def test_already_converted_regardless_of_status(materializer, approved_quotation, customer, status):
    quotation = approved_quotation.model_copy(update={"status": status})
    with pytest.raises(AlreadyConvertedException) as exc_info:
        materializer.create_order_from_quotation(quotation, [_existing_order(11)], customer)
    assert exc_info.value.order_id == 500


def test_orders_for_other_quotations_do_not_block(materializer, approved_quotation, customer):
    order = materializer.create_order_from_quotation(
        approved_quotation, [_existing_order(12), _existing_order(None)], customer
    )
    assert order.quotation_id == 11


@pytest.mark.parametrize("status", [QuotationStatus.PENDING, QuotationStatus.REJECTED, QuotationStatus.EXPIRED])
def test_quotation_must_be_approved(materializer, approved_quotation, customer, status):
    quotation = approved_quotation.model_copy(update={"status": status})
    with pytest.raises(QuotationNotApprovedException):
        materializer.create_order_from_quotation(quotation, [], customer)


def test_customer_must_exist_and_match(materializer, approved_quotation):
    with pytest.raises(DependencyUnavailableException):
        materializer.create_order_from_quotation(approved_quotation, [], None)
    with pytest.raises(ValidationException):
        materializer.create_order_from_quotation(
            approved_quotation, [], Customer(id=2, company_name="Autre", address=CUSTOMER_ADDRESS)
        )


def test_stock_is_checked_again_at_conversion(aggregator, approved_quotation, customer):
    depleted = StockGate([
        InventoryRecord(product_id=1, current_stock=1),
        InventoryRecord(product_id=2, current_stock=10),
    ])
    materializer = OrderMaterializer(QuotationAggregator(aggregator.catalog, depleted))
    with pytest.raises(InsufficientStockException):
        materializer.create_order_from_quotation(approved_quotation, [], customer)


def test_stale_snapshot_admits_both_conversions(materializer, approved_quotation, customer):
    # Deux sessions lisent la même liste (vide) avant que l'une d'elles n'écrive
    snapshot = []
    first = materializer.create_order_from_quotation(approved_quotation, snapshot, customer)
    second = materializer.create_order_from_quotation(approved_quotation, snapshot, customer)
    assert first.quotation_id == second.quotation_id == 11


def test_standalone_order_prices_from_catalog(materializer, customer):
    lines = [
        SimpleNamespace(product_id=1, quantity=2, discount=Decimal("10")),
        SimpleNamespace(product_id=None, quantity=None, discount=Decimal("0")),
        SimpleNamespace(product_id=2, quantity=1, discount=Decimal("0")),
    ]
    order = materializer.create_standalone_order(customer, None, lines, status="Shipped")

    assert order.quotation_id is None
    assert order.status == OrderStatus.SHIPPED
    assert order.total_amount == Decimal("230")
    assert order.shipping_address == CUSTOMER_ADDRESS


def test_standalone_order_item_rules(materializer, customer):
    duplicate = [SimpleNamespace(product_id=1, quantity=1, discount=0)] * 2
    with pytest.raises(DuplicateProductException):
        materializer.create_standalone_order(customer, None, duplicate)

    with pytest.raises(InsufficientStockException):
        materializer.create_standalone_order(customer, None, [SimpleNamespace(product_id=3, quantity=4, discount=0)])

    with pytest.raises(ValidationException):
        materializer.create_standalone_order(customer, None, [])


def test_order_total_must_match_lines():
    with pytest.raises(ValueError):
        Order(
            customer_id=1,
            order_date=datetime(2026, 3, 3, tzinfo=timezone.utc),
            shipping_address=CUSTOMER_ADDRESS,
            total_amount=Decimal("10"),
            items=[OrderItem(product_id=2, quantity=1, unit_price=Decimal("50"))],
        )


def test_discount_is_priced_at_stored_precision(materializer, customer):
    lines = [SimpleNamespace(product_id=1, quantity=3, discount=Decimal("33.333"))]
    order = materializer.create_standalone_order(customer, None, lines)

    assert order.items[0].discount == Decimal("33.33")
    assert order.total_amount == Decimal("200.01")


def test_stored_order_with_drifted_total_is_still_loaded():
    row = {
        "id": 8,
        "customer_id": 1,
        "order_date": datetime(2026, 3, 3, tzinfo=timezone.utc),
        "shipping_address": CUSTOMER_ADDRESS,
        "status": "Pending",
        "total_amount": Decimal("10"),
        "items": [{"product_id": 2, "quantity": 1, "unit_price": Decimal("50")}],
    }
    order = Order.model_validate(row, context=FROM_STORAGE)
    assert order.total_amount == Decimal("10")

    with pytest.raises(ValueError):
        Order.model_validate(row)
