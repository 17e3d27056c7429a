import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from scms.database import get_db_session

# Repositories
from scms.orders.domain.repositories import AbstractOrderRepository
from scms.orders.infrastructure.persistence import SQLAlchemyOrderRepository
from scms.quotations.interfaces.dependencies import QuotationRepositoryDep
from scms.customers.interfaces.dependencies import CustomerRepositoryDep
from scms.products.interfaces.dependencies import ProductRepositoryDep
from scms.stock.interfaces.dependencies import StockServiceDep

# Services
from scms.orders.application.services import OrderService

logger = logging.getLogger(__name__)

# --- Dépendances Repository ---
def get_order_repository(db: AsyncSession = Depends(get_db_session)) -> AbstractOrderRepository:
    """Injecte SQLAlchemyOrderRepository."""
    logger.debug("Fourniture de SQLAlchemyOrderRepository")
    return SQLAlchemyOrderRepository(session=db)

OrderRepositoryDep = Annotated[AbstractOrderRepository, Depends(get_order_repository)]

# --- Dépendances Service ---
def get_order_service(
    order_repo: OrderRepositoryDep,
    quotation_repo: QuotationRepositoryDep,
    customer_repo: CustomerRepositoryDep,
    product_repo: ProductRepositoryDep,
    stock_service: StockServiceDep,
) -> OrderService:
    """Injecte OrderService avec ses dépendances."""
    logger.debug("Fourniture de OrderService")
    return OrderService(
        order_repo=order_repo,
        quotation_repo=quotation_repo,
        customer_repo=customer_repo,
        product_repo=product_repo,
        stock_service=stock_service,
    )

OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
