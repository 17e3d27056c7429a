import logging
from typing import List

from fastapi import APIRouter, HTTPException, status

from scms.stock.models import AvailableStockRead, InventoryRead
from scms.stock.interfaces.dependencies import StockServiceDep

logger = logging.getLogger(__name__)

stock_router = APIRouter(
    prefix="/inventory",
    tags=["Inventory"],
)


@stock_router.get("/low-stock", response_model=List[InventoryRead])
async def list_low_stock_endpoint(service: StockServiceDep):
    """Liste les produits dont le stock est au niveau de réapprovisionnement ou en dessous."""
    try:
        records = await service.list_low_stock()
        return [InventoryRead(**r.model_dump(), is_low_stock=True) for r in records]
    except Exception as e:
        logger.exception(f"Erreur listage stock bas: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne du serveur.")


@stock_router.get("/{product_id}/available", response_model=AvailableStockRead)
async def available_stock_endpoint(product_id: int, service: StockServiceDep):
    """Stock disponible pour un produit (0 sans enregistrement d'inventaire)."""
    try:
        available = await service.available_stock(product_id)
        return AvailableStockRead(product_id=product_id, available_stock=available)
    except Exception as e:
        logger.exception(f"Erreur lecture stock produit {product_id}: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne du serveur.")
