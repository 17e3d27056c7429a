import logging
from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from pydantic import (
    BaseModel, ConfigDict, Field, ValidationInfo, computed_field, field_validator, model_validator
)

from scms.core.utils import as_utc
from scms.pricing.service import compute_line_total, round_currency, sum_line_totals
from scms.orders.domain.status import OrderStatus

logger = logging.getLogger(__name__)

# Contexte de validation des lignes relues en base : un écart de total est journalisé, pas levé
FROM_STORAGE = {"from_storage": True}

# Entités du Domaine "Orders"

class OrderItem(BaseModel):
    product_id: int
    quantity: int
    unit_price: Decimal  # Copié du devis ou du catalogue, jamais recalculé ensuite
    discount: Decimal = Decimal(0)

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("unit_price", "discount")
    @classmethod
    def _to_stored_precision(cls, v: Decimal) -> Decimal:
        return round_currency(v)

    @computed_field
    @property
    def line_total(self) -> Decimal:
        return compute_line_total(self.quantity, self.unit_price, self.discount)


class Order(BaseModel):
    """Instantané figé d'une commande ; indépendant des modifications ultérieures du devis."""
    id: Optional[int] = None
    customer_id: int
    quotation_id: Optional[int] = None  # Absent pour une commande directe
    order_date: datetime
    shipping_address: str
    status: OrderStatus = OrderStatus.PENDING
    total_amount: Decimal
    items: List[OrderItem] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("order_date", "created_at", "updated_at")
    @classmethod
    def _normalize_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v):
        return OrderStatus.parse(v)

    @model_validator(mode="after")
    def _check_total(self, info: ValidationInfo):
        # Comparaison à la précision monétaire : la base stocke des NUMERIC(12,2)
        expected = round_currency(sum_line_totals(self.items))
        if round_currency(self.total_amount) == expected:
            return self
        message = f"Total commande incohérent: {self.total_amount} (somme des lignes: {expected})."
        if info.context and info.context.get("from_storage"):
            logger.warning(f"[Order] Commande ID {self.id} : {message}")
            return self
        raise ValueError(message)

    def product_ids(self) -> List[int]:
        return [item.product_id for item in self.items]
