import logging
from enum import Enum
from typing import List, Union

from scms.quotations.domain.exceptions import InvalidQuotationStatusException

logger = logging.getLogger(__name__)


class QuotationStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    EXPIRED = "Expired"

    @classmethod
    def values(cls) -> List[str]:
        return [s.value for s in cls]

    @classmethod
    def parse(cls, value: Union[str, "QuotationStatus"]) -> "QuotationStatus":
        """Accepte 'Approved', 'approved' ou 'APPROVED'."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for status in cls:
                if status.value.lower() == value.strip().lower():
                    return status
        raise InvalidQuotationStatusException(str(value), cls.values())


class QuotationStatusMachine:
    """Transitions de statut d'un devis.

    Le workflow est un ré-étiquetage libre : tout statut peut succéder à tout autre,
    et reposer le statut courant réussit sans effet. Entrer dans Approved n'a aucun
    effet de bord ; l'approbation n'est consommée que par la création de commande.
    """

    def can_transition(self, current: QuotationStatus, new: QuotationStatus) -> bool:
        return True

    def set_status(self, quotation, new_status: Union[str, QuotationStatus]):
        target = QuotationStatus.parse(new_status)
        if quotation.status == target:
            logger.debug(f"Statut devis {quotation.id} déjà '{target.value}'.")
            return quotation
        if not self.can_transition(quotation.status, target):
            raise InvalidQuotationStatusException(target.value, QuotationStatus.values())
        logger.info(f"Devis {quotation.id}: statut '{quotation.status.value}' -> '{target.value}'.")
        return quotation.model_copy(update={"status": target})
