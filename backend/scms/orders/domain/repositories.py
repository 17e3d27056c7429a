from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import Order
from .status import OrderStatus


class AbstractOrderRepository(ABC):
    """Interface abstraite pour le repository des commandes."""

    @abstractmethod
    async def get_by_id(self, order_id: int) -> Optional[Order]:
        """Récupère une commande par son ID, incluant ses items."""
        raise NotImplementedError

    @abstractmethod
    async def get_by_quotation_id(self, quotation_id: int) -> Optional[Order]:
        """Commande issue du devis donné, s'il y en a une."""
        raise NotImplementedError

    @abstractmethod
    async def list_all(
        self,
        customer_id: Optional[int] = None,
        quotation_id: Optional[int] = None,
    ) -> List[Order]:
        raise NotImplementedError

    @abstractmethod
    async def add(self, order: Order) -> Order:
        """Enregistre une commande et ses items.

        Lève AlreadyConvertedException si une commande existe déjà pour le même devis.
        """
        raise NotImplementedError

    @abstractmethod
    async def update_status(self, order_id: int, status: OrderStatus) -> Optional[Order]:
        raise NotImplementedError
