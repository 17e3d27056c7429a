from typing import Optional
from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field


class CustomerBase(SQLModel):
    """Champs communs d'un client (entreprise)."""
    company_name: str = Field(..., max_length=255, index=True)
    industry: Optional[str] = Field(default=None, max_length=100)
    address: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=255)


class CustomerDB(CustomerBase, table=True):
    """Modèle de table pour les clients."""
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))
    updated_at: Optional[datetime] = Field(default=None, sa_type=DateTime(timezone=True))

    __tablename__ = "customers"
