from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship

# --- Modèles de table ---

class OrderItemDB(SQLModel, table=True):
    """Modèle de table pour une ligne de commande."""
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    discount: Decimal = Field(default=Decimal(0), ge=0, le=100, max_digits=5, decimal_places=2)
    line_total: Decimal = Field(..., max_digits=12, decimal_places=2)

    order: "OrderDB" = Relationship(back_populates="items")

    __tablename__ = "order_items"
    __table_args__ = (
        UniqueConstraint("order_id", "product_id", name="uq_order_items_product"),
    )


class OrderDB(SQLModel, table=True):
    """Modèle de table pour une commande."""
    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="customers.id", index=True)
    # Au plus une commande par devis ; NULL pour les commandes directes
    quotation_id: Optional[int] = Field(default=None, foreign_key="quotations.id", unique=True, nullable=True)
    order_date: datetime = Field(sa_type=DateTime(timezone=True))
    shipping_address: str = Field(..., max_length=255)
    status: str = Field(default="Pending", max_length=20, index=True)
    total_amount: Decimal = Field(default=Decimal(0), max_digits=12, decimal_places=2)
    created_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    items: List["OrderItemDB"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "OrderItemDB.id"},
    )

    __tablename__ = "orders"
