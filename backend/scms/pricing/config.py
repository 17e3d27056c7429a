"""
Constantes de calcul des montants.
"""
from decimal import Decimal

# Précision monétaire appliquée à l'affichage et à la persistance
CURRENCY_DECIMAL_PLACES: int = 2
CURRENCY_QUANTUM: Decimal = Decimal(1).scaleb(-CURRENCY_DECIMAL_PLACES)

MIN_DISCOUNT_PERCENT: Decimal = Decimal("0")
MAX_DISCOUNT_PERCENT: Decimal = Decimal("100")

MIN_LINE_QUANTITY: int = 1
