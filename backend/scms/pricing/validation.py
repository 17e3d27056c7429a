import logging
from typing import Any, Iterable, Set

from scms.core.exceptions import DuplicateProductException, ValidationException
from scms.pricing.config import MAX_DISCOUNT_PERCENT, MIN_DISCOUNT_PERCENT, MIN_LINE_QUANTITY

logger = logging.getLogger(__name__)


def validate_line_values(product_id: Any, quantity: Any, unit_price: Any, discount: Any) -> None:
    """Vérifie les valeurs d'une ligne isolée (produit, quantité, prix, remise)."""
    if product_id is None:
        raise ValidationException("Chaque ligne doit référencer un produit.", field="product_id")
    if quantity is None or quantity < MIN_LINE_QUANTITY:
        raise ValidationException(
            f"Quantité invalide pour le produit ID {product_id}: {quantity} (minimum {MIN_LINE_QUANTITY}).",
            field="quantity",
        )
    if unit_price is None or unit_price < 0:
        raise ValidationException(
            f"Prix unitaire invalide pour le produit ID {product_id}: {unit_price}.",
            field="unit_price",
        )
    if discount is None or discount < MIN_DISCOUNT_PERCENT or discount > MAX_DISCOUNT_PERCENT:
        raise ValidationException(
            f"Remise invalide pour le produit ID {product_id}: {discount} (attendu entre 0 et 100).",
            field="discount",
        )


def validate_line_items(items: Iterable[Any]) -> None:
    """Règles communes aux lignes de devis et de commande.

    - un produit apparaît au plus une fois (DuplicateProductException)
    - quantité >= 1, prix unitaire >= 0, remise dans [0, 100] (ValidationException)
    """
    seen: Set[int] = set()
    for item in items:
        validate_line_values(item.product_id, item.quantity, item.unit_price, item.discount)
        if item.product_id in seen:
            logger.warning(f"Produit ID {item.product_id} présent plusieurs fois dans les lignes.")
            raise DuplicateProductException(item.product_id)
        seen.add(item.product_id)
