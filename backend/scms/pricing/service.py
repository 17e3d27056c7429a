"""
Calcul des montants de lignes (devis et commandes).

Les fonctions de ce module sont pures : aucun accès aux données, aucun effet de bord.
L'arrondi monétaire n'est appliqué qu'au moment de l'affichage ou de la persistance,
jamais avant l'agrégation, pour éviter de cumuler les erreurs d'arrondi.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional, Union

from scms.pricing.config import CURRENCY_QUANTUM, MAX_DISCOUNT_PERCENT, MIN_DISCOUNT_PERCENT

Number = Union[int, float, str, Decimal]

HUNDRED = Decimal("100")


def to_decimal(value: Optional[Number]) -> Decimal:
    """Convertit une valeur numérique en Decimal (None -> 0).

    Les floats passent par str() pour éviter d'embarquer leur représentation binaire.
    """
    if value is None:
        return Decimal(0)
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def compute_line_total(
    quantity: Optional[Number],
    unit_price: Optional[Number],
    discount_percent: Optional[Number] = 0,
) -> Decimal:
    """Calcule le total d'une ligne : quantité * prix unitaire * (1 - remise/100).

    Une quantité absente vaut 0. La remise est supposée déjà bornée à [0, 100]
    par l'appelant (voir clamp_discount), elle n'est pas revalidée ici.
    Le résultat n'est PAS arrondi.
    """
    qty = to_decimal(quantity)
    price = to_decimal(unit_price)
    discount = to_decimal(discount_percent)
    return qty * price * (1 - discount / HUNDRED)


def round_currency(amount: Optional[Number]) -> Decimal:
    """Arrondit un montant à la précision monétaire (2 décimales, demi supérieur)."""
    return to_decimal(amount).quantize(CURRENCY_QUANTUM, rounding=ROUND_HALF_UP)


def clamp_discount(discount: Optional[Number]) -> Decimal:
    """Borne une remise saisie dans l'intervalle [0, 100], à la précision stockée (2 décimales)."""
    value = round_currency(discount)
    if value < MIN_DISCOUNT_PERCENT:
        return MIN_DISCOUNT_PERCENT
    if value > MAX_DISCOUNT_PERCENT:
        return MAX_DISCOUNT_PERCENT
    return value


def sum_line_totals(items: Iterable[Any]) -> Decimal:
    """Somme non arrondie des totaux de lignes (objets exposant `line_total`)."""
    total = Decimal(0)
    for item in items:
        total += item.line_total
    return total
