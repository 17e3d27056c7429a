from typing import List, Optional
from decimal import Decimal
from datetime import datetime

from sqlalchemy import DateTime, UniqueConstraint
from sqlmodel import SQLModel, Field, Relationship

# --- Modèles de table ---

class QuotationItemDB(SQLModel, table=True):
    """Modèle de table pour une ligne de devis."""
    id: Optional[int] = Field(default=None, primary_key=True)
    quotation_id: int = Field(foreign_key="quotations.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    discount: Decimal = Field(default=Decimal(0), ge=0, le=100, max_digits=5, decimal_places=2)
    line_total: Decimal = Field(..., max_digits=12, decimal_places=2)

    quotation: "QuotationDB" = Relationship(back_populates="items")

    __tablename__ = "quotation_items"
    __table_args__ = (
        UniqueConstraint("quotation_id", "product_id", name="uq_quotation_items_product"),
    )


class QuotationDB(SQLModel, table=True):
    """Modèle de table pour un devis."""
    id: Optional[int] = Field(default=None, primary_key=True)
    customer_id: int = Field(foreign_key="customers.id", index=True)
    quote_date: datetime = Field(sa_type=DateTime(timezone=True))
    validity_date: datetime = Field(sa_type=DateTime(timezone=True))
    status: str = Field(default="Pending", max_length=20, index=True)
    total_amount: Decimal = Field(default=Decimal(0), max_digits=12, decimal_places=2)
    created_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    items: List["QuotationItemDB"] = Relationship(
        back_populates="quotation",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "QuotationItemDB.id"},
    )

    __tablename__ = "quotations"
