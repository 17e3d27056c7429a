import logging
from typing import Dict, Iterable, List

from scms.stock.domain.entities import InventoryRecord
from scms.stock.domain.repositories import AbstractInventoryRepository
from scms.stock.exceptions import InsufficientStockException

logger = logging.getLogger(__name__)


class StockGate:
    """Frontière de consultation du stock : borne les quantités devisables / commandables.

    Construit à partir d'un instantané d'inventaire en lecture seule. Le stock n'est
    jamais décrémenté ici : un devis n'est pas une réservation, et l'ajustement du
    stock à la commande appartient au module de gestion d'inventaire.
    """

    def __init__(self, records: Iterable[InventoryRecord] = ()):
        self._records: Dict[int, InventoryRecord] = {r.product_id: r for r in records}

    def available_stock(self, product_id: int) -> int:
        """Stock courant du produit, 0 s'il n'a pas d'enregistrement d'inventaire."""
        record = self._records.get(product_id)
        return record.current_stock if record else 0

    def ensure_available(self, product_id: int, quantity: int) -> None:
        available = self.available_stock(product_id)
        if quantity > available:
            logger.warning(f"[StockGate] Stock insuffisant pour produit ID {product_id}. Demandé: {quantity}, Disponible: {available}")
            raise InsufficientStockException(product_id, quantity, available)

    def cap_quantity(self, product_id: int, requested: int) -> int:
        """Ramène une quantité demandée au stock disponible (jamais négative)."""
        return max(0, min(requested, self.available_stock(product_id)))

    def is_low_stock(self, product_id: int) -> bool:
        record = self._records.get(product_id)
        if record is None:
            return True
        return record.is_low_stock

    def low_stock(self) -> List[InventoryRecord]:
        """Enregistrements dont le stock est au niveau de réapprovisionnement ou en dessous."""
        return sorted(
            (r for r in self._records.values() if r.is_low_stock),
            key=lambda r: r.current_stock,
        )


class StockService:
    """Service applicatif : charge les instantanés d'inventaire et construit les StockGate."""

    def __init__(self, inventory_repository: AbstractInventoryRepository):
        self.inventory_repository = inventory_repository

    async def gate_for_products(self, product_ids: Iterable[int]) -> StockGate:
        records = await self.inventory_repository.list_for_products(product_ids)
        logger.debug(f"[StockService] Instantané inventaire chargé pour {len(records)} produit(s).")
        return StockGate(records)

    async def available_stock(self, product_id: int) -> int:
        record = await self.inventory_repository.get_by_product_id(product_id)
        return StockGate([record] if record else []).available_stock(product_id)

    async def list_low_stock(self) -> List[InventoryRecord]:
        records = await self.inventory_repository.list_all()
        return StockGate(records).low_stock()
