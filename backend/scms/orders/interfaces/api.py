import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status, Query, Path, Body

from .dependencies import OrderServiceDep

from scms.orders.application.schemas import OrderCreate, OrderRead, OrderStatusUpdate

from scms.core.exceptions import (
    DependencyUnavailableException, DuplicateProductException, ValidationException
)
from scms.stock.exceptions import InsufficientStockException
from scms.quotations.domain.exceptions import AlreadyConvertedException, QuotationNotFoundException
from scms.orders.domain.exceptions import (
    InvalidOrderStatusException,
    OrderNotFoundException,
    OrderStatusTransitionException,
    QuotationNotApprovedException,
)

logger = logging.getLogger(__name__)

BAD_REQUEST_ERRORS = (
    ValidationException,
    DuplicateProductException,
    InsufficientStockException,
    DependencyUnavailableException,
    QuotationNotApprovedException,
    InvalidOrderStatusException,
)

order_router = APIRouter(
    prefix="/orders",
    tags=["Orders"]
)


@order_router.get("", response_model=List[OrderRead])
async def list_orders(
    order_service: OrderServiceDep,
    customer_id: Optional[int] = Query(None, ge=1, description="Filtrer par client"),
):
    try:
        orders = await order_service.list_orders(customer_id=customer_id)
        return [OrderRead.from_entity(o) for o in orders]
    except Exception as e:
        logger.error(f"Erreur API list_orders: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne listage commandes.")


@order_router.post("", response_model=OrderRead, status_code=status.HTTP_201_CREATED)
async def create_order(order_request: OrderCreate, order_service: OrderServiceDep):
    """Crée une commande directe, ou depuis un devis approuvé si `quotation` est fourni."""
    quotation_id = order_request.quotation.quotation_id if order_request.quotation else None
    logger.info(f"API create_order pour client ID: {order_request.order.customer_id} (devis: {quotation_id})")
    try:
        created = await order_service.create_order(order_request)
        return OrderRead.from_entity(created)
    except QuotationNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except AlreadyConvertedException as e:
        logger.warning(f"Conversion refusée devis {quotation_id}: {e.message}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except BAD_REQUEST_ERRORS as e:
        logger.warning(f"Erreur validation création commande: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error(f"Erreur API create_order: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne création commande.")


@order_router.get("/{order_id}", response_model=OrderRead)
async def read_order(
    order_service: OrderServiceDep,
    order_id: int = Path(..., title="ID de la commande", ge=1),
):
    try:
        order = await order_service.get_order(order_id)
        return OrderRead.from_entity(order)
    except OrderNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except Exception as e:
        logger.error(f"Erreur API read_order {order_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne récupération commande.")


@order_router.post("/{order_id}/status", response_model=OrderRead)
async def update_order_status(
    order_service: OrderServiceDep,
    order_id: int = Path(..., title="ID de la commande à MAJ", ge=1),
    status_update: OrderStatusUpdate = Body(...),
):
    """Change le statut d'une commande (Pending, Shipped, Delivered, Cancelled)."""
    logger.info(f"API update_order_status: ID={order_id} à '{status_update.status}'")
    try:
        updated = await order_service.update_order_status(order_id, status_update.status)
        return OrderRead.from_entity(updated)
    except OrderNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except OrderStatusTransitionException as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except InvalidOrderStatusException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error(f"Erreur API update_order_status {order_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne MAJ statut commande.")
