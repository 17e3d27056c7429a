from abc import ABC, abstractmethod
from typing import List, Optional

from .entities import Quotation
from .status import QuotationStatus


class AbstractQuotationRepository(ABC):
    """Interface abstraite pour le repository des devis."""

    @abstractmethod
    async def get_by_id(self, quotation_id: int) -> Optional[Quotation]:
        """Récupère un devis par son ID, incluant ses items."""
        raise NotImplementedError

    @abstractmethod
    async def list_all(
        self,
        customer_id: Optional[int] = None,
        status: Optional[QuotationStatus] = None,
    ) -> List[Quotation]:
        raise NotImplementedError

    @abstractmethod
    async def add(self, quotation: Quotation) -> Quotation:
        """Enregistre un nouveau devis et ses items, retourne le devis avec son ID."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, quotation: Quotation) -> Quotation:
        """Remplace l'en-tête et les items d'un devis existant."""
        raise NotImplementedError

    @abstractmethod
    async def update_status(self, quotation_id: int, status: QuotationStatus) -> Optional[Quotation]:
        raise NotImplementedError
