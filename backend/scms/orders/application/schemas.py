from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from scms.pricing.service import clamp_discount, round_currency
from scms.orders.config import ORDER_STATUS_DISPLAY
from scms.orders.domain.entities import Order
from scms.orders.domain.status import OrderStatus

# --- Schémas d'entrée ---

class OrderItemCreate(BaseModel):
    """Ligne de commande directe ; le prix est repris du catalogue."""
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


class OrderHeaderCreate(BaseModel):
    customer_id: Optional[int] = None
    order_date: Optional[datetime] = None
    shipping_address: Optional[str] = None  # Absent = adresse enregistrée du client
    status: Optional[str] = None


class QuotationReference(BaseModel):
    quotation_id: int


class OrderCreate(BaseModel):
    """Corps de POST /orders.

    Avec `quotation`, les lignes sont copiées du devis approuvé et `items` est ignoré.
    """
    order: OrderHeaderCreate
    items: List[OrderItemCreate] = Field(default_factory=list)
    quotation: Optional[QuotationReference] = None


class OrderStatusUpdate(BaseModel):
    status: str = Field(..., max_length=20)

# --- Schémas de sortie ---

class OrderItemRead(BaseModel):
    product_id: int
    quantity: int
    unit_price: Decimal
    discount: Decimal
    line_total: Decimal

    @field_serializer("unit_price", "discount", "line_total")
    def _money(self, v: Decimal) -> str:
        return str(round_currency(v))


class OrderRead(BaseModel):
    order_id: int
    customer_id: int
    quotation_id: Optional[int] = None
    order_date: datetime
    shipping_address: str
    status: OrderStatus
    status_label: Optional[str] = None
    total_amount: Decimal
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    items: List[OrderItemRead] = []

    model_config = ConfigDict(use_enum_values=True)

    @field_serializer("total_amount")
    def _money(self, v: Decimal) -> str:
        return str(round_currency(v))

    @classmethod
    def from_entity(cls, order: Order) -> "OrderRead":
        return cls(
            order_id=order.id,
            customer_id=order.customer_id,
            quotation_id=order.quotation_id,
            order_date=order.order_date,
            shipping_address=order.shipping_address,
            status=order.status,
            status_label=ORDER_STATUS_DISPLAY.get(order.status.value),
            total_amount=order.total_amount,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[
                OrderItemRead(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    discount=item.discount,
                    line_total=item.line_total,
                )
                for item in order.items
            ],
        )
