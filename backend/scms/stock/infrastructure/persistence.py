import logging
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scms.stock.models import InventoryDB
from scms.stock.domain.entities import InventoryRecord
from scms.stock.domain.repositories import AbstractInventoryRepository

logger = logging.getLogger(__name__)


class SQLAlchemyInventoryRepository(AbstractInventoryRepository):
    """Implémentation SQLAlchemy du repository d'inventaire."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_product_id(self, product_id: int) -> Optional[InventoryRecord]:
        result = await self.session.execute(
            select(InventoryDB).where(InventoryDB.product_id == product_id)
        )
        record = result.scalars().first()
        return InventoryRecord.model_validate(record) if record else None

    async def list_for_products(self, product_ids: Iterable[int]) -> List[InventoryRecord]:
        ids = {pid for pid in product_ids if pid is not None}
        if not ids:
            return []
        result = await self.session.execute(
            select(InventoryDB).where(InventoryDB.product_id.in_(ids))
        )
        return [InventoryRecord.model_validate(r) for r in result.scalars().all()]

    async def list_all(self) -> List[InventoryRecord]:
        result = await self.session.execute(select(InventoryDB).order_by(InventoryDB.product_id))
        return [InventoryRecord.model_validate(r) for r in result.scalars().all()]
