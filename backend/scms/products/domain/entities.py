from typing import Any, Dict, Optional
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

# Entités du Domaine "Products"

class Product(BaseModel):
    id: int
    product_name: str
    model: Optional[str] = None
    certifications: Optional[str] = None
    technical_specs: Optional[Dict[str, Any]] = None
    price: Decimal = Field(..., ge=0)

    model_config = ConfigDict(from_attributes=True, frozen=True)
