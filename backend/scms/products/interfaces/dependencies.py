from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from scms.database import get_db_session
from scms.products.domain.repositories import AbstractProductRepository
from scms.products.infrastructure.persistence import SQLAlchemyProductRepository


def get_product_repository(session: AsyncSession = Depends(get_db_session)) -> AbstractProductRepository:
    """Fournit une instance de SQLAlchemyProductRepository."""
    return SQLAlchemyProductRepository(session=session)

ProductRepositoryDep = Annotated[AbstractProductRepository, Depends(get_product_repository)]
