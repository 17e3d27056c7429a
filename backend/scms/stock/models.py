from typing import Optional
from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field


class InventoryBase(SQLModel):
    current_stock: int = Field(default=0, ge=0)
    reorder_level: int = Field(default=0, ge=0)
    last_restock_date: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))


class InventoryDB(InventoryBase, table=True):
    """Un enregistrement d'inventaire par produit."""
    id: Optional[int] = Field(default=None, primary_key=True)
    product_id: int = Field(foreign_key="products.id", unique=True, index=True)

    __tablename__ = "inventory"


class InventoryRead(InventoryBase):
    product_id: int
    is_low_stock: bool = False


class AvailableStockRead(SQLModel):
    product_id: int
    available_stock: int
