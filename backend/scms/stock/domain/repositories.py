from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from .entities import InventoryRecord


class AbstractInventoryRepository(ABC):
    """Interface abstraite pour le repository d'inventaire (lecture seule côté moteur)."""

    @abstractmethod
    async def get_by_product_id(self, product_id: int) -> Optional[InventoryRecord]:
        raise NotImplementedError

    @abstractmethod
    async def list_for_products(self, product_ids: Iterable[int]) -> List[InventoryRecord]:
        raise NotImplementedError

    @abstractmethod
    async def list_all(self) -> List[InventoryRecord]:
        raise NotImplementedError
