from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from scms.pricing.service import clamp_discount, round_currency
from scms.quotations.config import QUOTATION_STATUS_DISPLAY
from scms.quotations.domain.entities import Quotation
from scms.quotations.domain.status import QuotationStatus

# --- Schémas d'entrée ---

class QuotationItemCreate(BaseModel):
    """Ligne de devis reçue de l'API.

    unit_price et line_total sont acceptés pour compatibilité avec le client mais
    ignorés : le prix est repris du catalogue et le total recalculé.
    """
    product_id: Optional[int] = None
    quantity: Optional[int] = None
    unit_price: Optional[Decimal] = None
    discount: Decimal = Decimal(0)
    line_total: Optional[Decimal] = None

    @field_validator("discount", mode="before")
    @classmethod
    def _clamp_discount(cls, v):
        try:
            return clamp_discount(v)
        except (ArithmeticError, TypeError, ValueError):
            raise ValueError(f"Remise invalide: {v!r}")


class QuotationCreate(BaseModel):
    customer_id: Optional[int] = None
    quote_date: Optional[datetime] = None
    validity_date: Optional[datetime] = None
    status: Optional[str] = None
    items: List[QuotationItemCreate] = Field(default_factory=list)


class QuotationUpdate(QuotationCreate):
    pass


class QuotationStatusUpdate(BaseModel):
    status: str = Field(..., max_length=20)

# --- Schémas de sortie ---

class QuotationItemRead(BaseModel):
    product_id: int
    quantity: int
    unit_price: Decimal
    discount: Decimal
    line_total: Decimal

    @field_serializer("unit_price", "line_total")
    def _money(self, v: Decimal) -> str:
        return str(round_currency(v))

    @field_serializer("discount")
    def _percent(self, v: Decimal) -> str:
        return str(round_currency(v))


class QuotationRead(BaseModel):
    quotation_id: int
    customer_id: int
    quote_date: datetime
    validity_date: datetime
    status: QuotationStatus
    status_label: Optional[str] = None
    total_amount: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[QuotationItemRead] = []

    model_config = ConfigDict(use_enum_values=True)

    @field_serializer("total_amount")
    def _money(self, v: Decimal) -> str:
        return str(round_currency(v))

    @classmethod
    def from_entity(cls, quotation: Quotation) -> "QuotationRead":
        return cls(
            quotation_id=quotation.id,
            customer_id=quotation.customer_id,
            quote_date=quotation.quote_date,
            validity_date=quotation.validity_date,
            status=quotation.status,
            status_label=QUOTATION_STATUS_DISPLAY.get(quotation.status.value),
            total_amount=quotation.total_amount,
            created_at=quotation.created_at,
            updated_at=quotation.updated_at,
            items=[
                QuotationItemRead(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    discount=item.discount,
                    line_total=item.line_total,
                )
                for item in quotation.items
            ],
        )
