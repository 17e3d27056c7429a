from typing import Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class InventoryRecord(BaseModel):
    product_id: int
    current_stock: int = Field(default=0, ge=0)
    reorder_level: int = Field(default=0, ge=0)
    last_restock_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, frozen=True)

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.reorder_level
