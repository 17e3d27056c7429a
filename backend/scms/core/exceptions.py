"""Exceptions partagées par les modules pricing, quotations et orders."""

from typing import Optional


class DomainException(Exception):
    """Classe de base pour toutes les exceptions métier SCMS."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationException(DomainException):
    """Levée lorsqu'un champ requis est absent ou invalide (client, dates, adresse, montants)."""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class DuplicateProductException(DomainException):
    """Levée lorsqu'un produit est déjà présent dans l'ensemble des lignes."""
    def __init__(self, product_id: int):
        super().__init__(f"Le produit ID {product_id} est déjà présent dans les lignes.")
        self.product_id = product_id


class DependencyUnavailableException(DomainException):
    """Levée lorsqu'une donnée de référence requise (client, produit) est introuvable."""
    def __init__(self, resource: str, resource_id: Optional[int]):
        super().__init__(f"{resource} avec ID {resource_id} introuvable.")
        self.resource = resource
        self.resource_id = resource_id
