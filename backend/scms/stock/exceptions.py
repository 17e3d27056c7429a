"""
Exceptions personnalisées pour le module de gestion des stocks.
"""
from scms.core.exceptions import DomainException


class InsufficientStockException(DomainException):
    """Levée lorsque la quantité demandée dépasse le stock disponible."""
    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Stock insuffisant pour le produit ID {product_id}. "
            f"Demandé: {requested}, Disponible: {available}"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available
