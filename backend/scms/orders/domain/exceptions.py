"""Exceptions spécifiques au domaine Order."""

from typing import List, Optional

from scms.core.exceptions import DomainException


class OrderDomainException(DomainException):
    """Classe de base pour les exceptions du domaine Order."""
    pass


class OrderNotFoundException(OrderDomainException):
    """Levée lorsqu'une commande spécifique n'est pas trouvée."""
    def __init__(self, order_id: int):
        super().__init__(f"Commande avec ID {order_id} non trouvée.")
        self.order_id = order_id


class QuotationNotApprovedException(OrderDomainException):
    """Levée lorsqu'on tente de convertir un devis qui n'est pas approuvé."""
    def __init__(self, quotation_id: Optional[int], status: str):
        super().__init__(
            f"Le devis ID {quotation_id} doit être approuvé avant création de commande (statut actuel: {status})."
        )
        self.quotation_id = quotation_id
        self.status = status


class InvalidOrderStatusException(OrderDomainException):
    """Levée lorsque le statut fourni pour une commande est invalide."""
    def __init__(self, status: str, allowed: List[str]):
        allowed_str = ", ".join(allowed)
        super().__init__(f"Le statut '{status}' est invalide. Statuts autorisés: {allowed_str}.")
        self.status = status
        self.allowed = allowed


class OrderStatusTransitionException(OrderDomainException):
    """Levée lorsqu'une transition de statut de commande est interdite."""
    def __init__(self, order_id: Optional[int], current: str, new: str):
        super().__init__(f"Transition de statut interdite pour la commande {order_id}: '{current}' -> '{new}'.")
        self.order_id = order_id
        self.current = current
        self.new = new
