import logging
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from scms.database import get_db_session

# Repositories
from scms.quotations.domain.repositories import AbstractQuotationRepository
from scms.quotations.infrastructure.persistence import SQLAlchemyQuotationRepository
from scms.customers.interfaces.dependencies import CustomerRepositoryDep
from scms.products.interfaces.dependencies import ProductRepositoryDep
from scms.stock.interfaces.dependencies import StockServiceDep
from scms.orders.infrastructure.persistence import SQLAlchemyOrderRepository

# Services
from scms.quotations.application.services import QuotationService

logger = logging.getLogger(__name__)

# --- Dépendances Repository ---
def get_quotation_repository(db: AsyncSession = Depends(get_db_session)) -> AbstractQuotationRepository:
    """Injecte SQLAlchemyQuotationRepository."""
    logger.debug("Fourniture de SQLAlchemyQuotationRepository")
    return SQLAlchemyQuotationRepository(session=db)

QuotationRepositoryDep = Annotated[AbstractQuotationRepository, Depends(get_quotation_repository)]

# --- Dépendances Service ---
def get_quotation_service(
    quotation_repo: QuotationRepositoryDep,
    customer_repo: CustomerRepositoryDep,
    product_repo: ProductRepositoryDep,
    stock_service: StockServiceDep,
    db: AsyncSession = Depends(get_db_session),
) -> QuotationService:
    """Injecte QuotationService avec ses dépendances."""
    logger.debug("Fourniture de QuotationService")
    return QuotationService(
        quotation_repo=quotation_repo,
        order_repo=SQLAlchemyOrderRepository(session=db),  # Pour savoir si un devis a déjà été converti
        customer_repo=customer_repo,
        product_repo=product_repo,
        stock_service=stock_service,
    )

QuotationServiceDep = Annotated[QuotationService, Depends(get_quotation_service)]
