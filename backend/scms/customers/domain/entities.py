from typing import Optional

from pydantic import BaseModel, ConfigDict

# Entités du Domaine "Customers"

class Customer(BaseModel):
    id: int
    company_name: str
    address: Optional[str] = None  # Adresse de livraison par défaut des commandes
    email: Optional[str] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)
