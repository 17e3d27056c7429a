"""
Agrégation des lignes de devis.

Le QuotationAggregator travaille sur des instantanés en lecture seule (catalogue
produits, StockGate) fournis par l'appelant ; il ne lit aucun état global. Chaque
opération retourne un nouveau Quotation, l'original n'est jamais modifié, y compris
en cas d'échec.
"""
import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from scms.core.exceptions import (
    DependencyUnavailableException,
    DuplicateProductException,
    ValidationException,
)
from scms.core.utils import utcnow
from scms.pricing.service import Number, to_decimal
from scms.pricing.validation import validate_line_items, validate_line_values
from scms.products.domain.entities import Product
from scms.quotations.config import DEFAULT_VALIDITY_DAYS
from scms.quotations.domain.entities import Quotation, QuotationItem
from scms.quotations.domain.status import QuotationStatus
from scms.stock.service import StockGate

logger = logging.getLogger(__name__)


class QuotationAggregator:

    def __init__(self, catalog: Mapping[int, Product], stock_gate: StockGate):
        self.catalog = catalog
        self.stock_gate = stock_gate

    @staticmethod
    def new_quotation(
        customer_id: Optional[int],
        quote_date: Optional[datetime] = None,
        validity_date: Optional[datetime] = None,
        status: QuotationStatus = QuotationStatus.PENDING,
        validity_days: int = DEFAULT_VALIDITY_DAYS,
    ) -> Quotation:
        """Nouveau devis vide, En attente, valable `validity_days` jours par défaut."""
        quote_date = quote_date or utcnow()
        if validity_date is None:
            validity_date = quote_date + timedelta(days=validity_days)
        return Quotation(
            customer_id=customer_id,
            quote_date=quote_date,
            validity_date=validity_date,
            status=status,
        )

    def price_line(
        self,
        product_id: int,
        quantity: int,
        discount: Number = 0,
        unit_price: Optional[Number] = None,
        existing_ids: Iterable[int] = (),
    ) -> QuotationItem:
        """Construit une ligne chiffrée.

        Contrôles dans l'ordre : produit au catalogue, quantité et remise, doublon
        parmi `existing_ids`, puis stock disponible. Sans `unit_price`, le prix
        courant du produit est figé dans la ligne.
        """
        product = self.catalog.get(product_id)
        if product is None:
            logger.warning(f"[QuotationAggregator] Produit ID {product_id} absent du catalogue.")
            raise DependencyUnavailableException("Produit", product_id)

        price = product.price if unit_price is None else to_decimal(unit_price)
        discount_value = to_decimal(discount)
        validate_line_values(product_id, quantity, price, discount_value)
        if product_id in existing_ids:
            logger.warning(f"[QuotationAggregator] Produit ID {product_id} déjà présent dans les lignes.")
            raise DuplicateProductException(product_id)
        self.stock_gate.ensure_available(product_id, quantity)

        return QuotationItem(
            product_id=product_id,
            quantity=quantity,
            unit_price=price,
            discount=discount_value,
        )

    def add_item(
        self,
        quotation: Quotation,
        product_id: int,
        quantity: int,
        discount: Number = 0,
        unit_price: Optional[Number] = None,
    ) -> Quotation:
        item = self.price_line(product_id, quantity, discount, unit_price, existing_ids=quotation.product_ids())
        return quotation.model_copy(update={"items": [*quotation.items, item]})

    def remove_item(self, quotation: Quotation, index: int) -> Quotation:
        """Retire la ligne à l'index donné ; retirer la dernière ligne laisse un devis vide."""
        if index < 0 or index >= len(quotation.items):
            raise ValidationException(f"Aucune ligne à l'index {index}.", field="items")
        items = [item for i, item in enumerate(quotation.items) if i != index]
        return quotation.model_copy(update={"items": items})

    def update_item_quantity(self, quotation: Quotation, index: int, quantity: int) -> Quotation:
        """Modifie la quantité d'une ligne sans dépasser le stock disponible."""
        if index < 0 or index >= len(quotation.items):
            raise ValidationException(f"Aucune ligne à l'index {index}.", field="items")
        current = quotation.items[index]
        validate_line_values(current.product_id, quantity, current.unit_price, current.discount)
        self.stock_gate.ensure_available(current.product_id, quantity)

        items = list(quotation.items)
        items[index] = current.model_copy(update={"quantity": quantity})
        return quotation.model_copy(update={"items": items})

    def cap_quantity(self, product_id: int, requested: int) -> int:
        return self.stock_gate.cap_quantity(product_id, requested)

    @staticmethod
    def prune_placeholders(quotation: Quotation) -> Quotation:
        """Retire les lignes vides (sans produit) avant enregistrement."""
        items = [item for item in quotation.items if not item.is_placeholder]
        if len(items) == len(quotation.items):
            return quotation
        return quotation.model_copy(update={"items": items})

    @staticmethod
    def validate_for_save(quotation: Quotation) -> None:
        """Validation au niveau du devis avant enregistrement."""
        if quotation.customer_id is None or quotation.customer_id <= 0:
            raise ValidationException("Le client est requis.", field="customer_id")
        if quotation.quote_date is None:
            raise ValidationException("La date du devis est requise.", field="quote_date")
        if quotation.validity_date is None:
            raise ValidationException("La date de validité est requise.", field="validity_date")
        if quotation.validity_date < quotation.quote_date:
            raise ValidationException(
                "La date de validité doit être postérieure ou égale à la date du devis.",
                field="validity_date",
            )

        real_items = [item for item in quotation.items if not item.is_placeholder]
        if not any(item.line_total > Decimal(0) for item in real_items):
            raise ValidationException("Le devis doit comporter au moins une ligne chiffrée.", field="items")
        validate_line_items(real_items)
