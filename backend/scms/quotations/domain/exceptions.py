"""Exceptions spécifiques au domaine Quotation."""

from typing import List, Optional

from scms.core.exceptions import DomainException


class QuotationDomainException(DomainException):
    """Classe de base pour les exceptions du domaine Quotation."""
    pass


class QuotationNotFoundException(QuotationDomainException):
    """Levée lorsqu'un devis spécifique n'est pas trouvé."""
    def __init__(self, quotation_id: int):
        super().__init__(f"Devis avec ID {quotation_id} non trouvé.")
        self.quotation_id = quotation_id


class InvalidQuotationStatusException(QuotationDomainException):
    """Levée lorsque le statut fourni pour un devis est invalide."""
    def __init__(self, status: str, allowed: List[str]):
        allowed_str = ", ".join(allowed)
        super().__init__(f"Le statut '{status}' est invalide. Statuts autorisés: {allowed_str}.")
        self.status = status
        self.allowed = allowed


class AlreadyConvertedException(QuotationDomainException):
    """Levée lorsqu'un devis a déjà donné lieu à une commande."""
    def __init__(self, quotation_id: Optional[int], order_id: Optional[int] = None):
        detail = f" (commande ID {order_id})" if order_id is not None else ""
        super().__init__(f"Le devis ID {quotation_id} a déjà été converti en commande{detail}.")
        self.quotation_id = quotation_id
        self.order_id = order_id
