from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from scms.database import get_db_session
from scms.customers.domain.repositories import AbstractCustomerRepository
from scms.customers.infrastructure.persistence import SQLAlchemyCustomerRepository


def get_customer_repository(session: AsyncSession = Depends(get_db_session)) -> AbstractCustomerRepository:
    return SQLAlchemyCustomerRepository(session=session)

CustomerRepositoryDep = Annotated[AbstractCustomerRepository, Depends(get_customer_repository)]
