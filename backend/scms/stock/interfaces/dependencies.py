from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from scms.database import get_db_session
from scms.stock.domain.repositories import AbstractInventoryRepository
from scms.stock.infrastructure.persistence import SQLAlchemyInventoryRepository
from scms.stock.service import StockService


def get_inventory_repository(
    session: AsyncSession = Depends(get_db_session)
) -> AbstractInventoryRepository:
    """Fournit une instance de SQLAlchemyInventoryRepository."""
    return SQLAlchemyInventoryRepository(session=session)

InventoryRepositoryDep = Annotated[AbstractInventoryRepository, Depends(get_inventory_repository)]


def get_stock_service(inventory_repo: InventoryRepositoryDep) -> StockService:
    return StockService(inventory_repository=inventory_repo)

StockServiceDep = Annotated[StockService, Depends(get_stock_service)]
