import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from scms.customers.models import CustomerDB
from scms.customers.domain.entities import Customer
from scms.customers.domain.repositories import AbstractCustomerRepository

logger = logging.getLogger(__name__)


class SQLAlchemyCustomerRepository(AbstractCustomerRepository):
    """Implémentation SQLAlchemy du repository Clients (lecture seule)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, customer_id: int) -> Optional[Customer]:
        customer_db = await self.session.get(CustomerDB, customer_id)
        if not customer_db:
            logger.debug(f"Client ID {customer_id} non trouvé.")
            return None
        return Customer.model_validate(customer_db)
