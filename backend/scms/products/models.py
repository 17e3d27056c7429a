from typing import Any, Dict, Optional
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Column, DateTime
from sqlmodel import SQLModel, Field


class ProductBase(SQLModel):
    """Champs communs d'un produit du catalogue."""
    product_name: str = Field(..., max_length=255, index=True)
    model: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = Field(default=None)
    certifications: Optional[str] = Field(default=None)
    warranty_period: int = Field(default=0, ge=0)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)


class ProductDB(ProductBase, table=True):
    """Modèle de table pour les produits."""
    id: Optional[int] = Field(default=None, primary_key=True)
    technical_specs: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    created_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    __tablename__ = "products"
