"""
Tests du OrderService sur base SQLite en mémoire.
"""
from decimal import Decimal
from typing import List

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from scms.customers.infrastructure.persistence import SQLAlchemyCustomerRepository
from scms.orders.application.schemas import OrderHeaderCreate
from scms.orders.application.services import OrderService
from scms.orders.domain.entities import Order
from scms.orders.infrastructure.persistence import SQLAlchemyOrderRepository
from scms.products.infrastructure.persistence import SQLAlchemyProductRepository
from scms.quotations.application.aggregator import QuotationAggregator
from scms.quotations.domain.exceptions import AlreadyConvertedException
from scms.quotations.domain.status import QuotationStatus
from scms.quotations.infrastructure.persistence import SQLAlchemyQuotationRepository
from scms.stock.infrastructure.persistence import SQLAlchemyInventoryRepository
from scms.stock.service import StockService

pytestmark = pytest.mark.asyncio


class StaleOrderRepository(SQLAlchemyOrderRepository):
    """Simule une session dont la liste des commandes a été lue avant toute conversion."""

    async def list_all(self, customer_id=None, quotation_id=None) -> List[Order]:
        return []


def _service(session: AsyncSession, order_repo: SQLAlchemyOrderRepository) -> OrderService:
    return OrderService(
        order_repo=order_repo,
        quotation_repo=SQLAlchemyQuotationRepository(session),
        customer_repo=SQLAlchemyCustomerRepository(session),
        product_repo=SQLAlchemyProductRepository(session),
        stock_service=StockService(SQLAlchemyInventoryRepository(session)),
    )


async def _approved_quotation_id(session: AsyncSession, customer_id: int, catalog, stock_gate) -> int:
    aggregator = QuotationAggregator(catalog, stock_gate)
    quotation = aggregator.new_quotation(customer_id)
    quotation = aggregator.add_item(quotation, 1, 2, discount=10)
    quotation = aggregator.add_item(quotation, 2, 1)
    quotation = quotation.model_copy(update={"status": QuotationStatus.APPROVED})
    created = await SQLAlchemyQuotationRepository(session).add(quotation)
    return created.id


async def test_unique_constraint_rejects_second_conversion_with_stale_snapshot(
    db_session: AsyncSession, seeded_customer, seeded_catalog, catalog, stock_gate
):
    customer_id = seeded_customer.id
    quotation_id = await _approved_quotation_id(db_session, customer_id, catalog, stock_gate)
    service = _service(db_session, StaleOrderRepository(db_session))
    header = OrderHeaderCreate(customer_id=customer_id)

    first = await service.create_order_from_quotation(quotation_id, header)
    assert first.quotation_id == quotation_id

    with pytest.raises(AlreadyConvertedException) as exc_info:
        await service.create_order_from_quotation(quotation_id, header)
    assert exc_info.value.order_id == first.id

    orders = await SQLAlchemyOrderRepository(db_session).list_all(quotation_id=quotation_id)
    assert [o.id for o in orders] == [first.id]


async def test_converted_order_total_survives_reload(
    db_session: AsyncSession, seeded_customer, seeded_catalog, catalog, stock_gate
):
    customer_id = seeded_customer.id
    quotation_id = await _approved_quotation_id(db_session, customer_id, catalog, stock_gate)
    service = _service(db_session, SQLAlchemyOrderRepository(db_session))

    created = await service.create_order_from_quotation(quotation_id, OrderHeaderCreate())
    db_session.expunge_all()

    reloaded = await service.get_order(created.id)
    assert reloaded.total_amount == Decimal("230")
    assert reloaded.customer_id == customer_id
