import logging
from typing import Dict, Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from scms.products.models import ProductDB
from scms.products.domain.entities import Product
from scms.products.domain.repositories import AbstractProductRepository

logger = logging.getLogger(__name__)


class SQLAlchemyProductRepository(AbstractProductRepository):
    """Implémentation SQLAlchemy du repository Produits (lecture seule)."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_catalog(self, product_ids: Iterable[int]) -> Dict[int, Product]:
        ids = {pid for pid in product_ids if pid is not None}
        if not ids:
            return {}
        result = await self.session.execute(select(ProductDB).where(ProductDB.id.in_(ids)))
        catalog = {p.id: Product.model_validate(p) for p in result.scalars().all()}
        missing = ids - catalog.keys()
        if missing:
            logger.debug(f"Produits absents du catalogue: {sorted(missing)}")
        return catalog
