from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from scms.core.utils import as_utc
from scms.pricing.service import compute_line_total, round_currency, sum_line_totals
from scms.quotations.domain.status import QuotationStatus

# Entités du Domaine "Quotations"

class QuotationItem(BaseModel):
    # product_id absent = ligne vide saisie dans le formulaire, ignorée à l'enregistrement
    product_id: Optional[int] = None
    quantity: int = 0
    unit_price: Decimal = Decimal(0)  # Prix figé au moment de l'ajout
    discount: Decimal = Decimal(0)    # Pourcentage

    model_config = ConfigDict(from_attributes=True, frozen=True)

    # Même précision que les colonnes NUMERIC : le montant calculé est celui relu en base
    @field_validator("unit_price", "discount")
    @classmethod
    def _to_stored_precision(cls, v: Decimal) -> Decimal:
        return round_currency(v)

    @computed_field
    @property
    def line_total(self) -> Decimal:
        return compute_line_total(self.quantity, self.unit_price, self.discount)

    @property
    def is_placeholder(self) -> bool:
        return self.product_id is None


class Quotation(BaseModel):
    id: Optional[int] = None  # Absent tant que le devis n'est pas enregistré
    customer_id: Optional[int] = None
    quote_date: Optional[datetime] = None
    validity_date: Optional[datetime] = None
    status: QuotationStatus = QuotationStatus.PENDING
    items: List[QuotationItem] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @field_validator("quote_date", "validity_date", "created_at", "updated_at")
    @classmethod
    def _normalize_dates(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v):
        return QuotationStatus.parse(v)

    @computed_field
    @property
    def total_amount(self) -> Decimal:
        return sum_line_totals(self.items)

    def product_ids(self) -> List[int]:
        return [item.product_id for item in self.items if item.product_id is not None]
