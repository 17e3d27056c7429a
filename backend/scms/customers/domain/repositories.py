from abc import ABC, abstractmethod
from typing import Optional

from .entities import Customer


class AbstractCustomerRepository(ABC):
    """Interface abstraite pour le repository des clients."""

    @abstractmethod
    async def get_by_id(self, customer_id: int) -> Optional[Customer]:
        raise NotImplementedError
