from abc import ABC, abstractmethod
from typing import Dict, Iterable

from .entities import Product


class AbstractProductRepository(ABC):
    """Interface abstraite pour le repository des produits."""

    @abstractmethod
    async def get_catalog(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        """Retourne un instantané {product_id: Product} pour les IDs demandés (les absents sont omis)."""
        raise NotImplementedError
