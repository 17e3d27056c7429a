import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status, Query, Path, Body

# Services Applicatifs (via dépendances)
from .dependencies import QuotationServiceDep

# Schémas/DTOs
from scms.quotations.application.schemas import (
    QuotationCreate, QuotationUpdate, QuotationStatusUpdate, QuotationRead
)

# Exceptions du Domaine (pour mapping)
from scms.core.exceptions import (
    DependencyUnavailableException, DuplicateProductException, ValidationException
)
from scms.stock.exceptions import InsufficientStockException
from scms.quotations.domain.exceptions import (
    AlreadyConvertedException, InvalidQuotationStatusException, QuotationNotFoundException
)

logger = logging.getLogger(__name__)

# Erreurs métier renvoyées en 400
BAD_REQUEST_ERRORS = (
    ValidationException,
    DuplicateProductException,
    InsufficientStockException,
    DependencyUnavailableException,
    InvalidQuotationStatusException,
)

# --- Création du Routeur ---
quotation_router = APIRouter(
    prefix="/quotations",
    tags=["Quotations"]
)

# --- Endpoints pour les Devis ---

@quotation_router.get("", response_model=List[QuotationRead])
async def list_quotations(
    quotation_service: QuotationServiceDep,
    customer_id: Optional[int] = Query(None, ge=1, description="Filtrer par client"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filtrer par statut"),
):
    """Liste les devis, du plus récent au plus ancien."""
    try:
        quotations = await quotation_service.list_quotations(customer_id=customer_id, status=status_filter)
        return [QuotationRead.from_entity(q) for q in quotations]
    except InvalidQuotationStatusException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error(f"Erreur API list_quotations: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne listage devis.")


@quotation_router.post("", response_model=QuotationRead, status_code=status.HTTP_201_CREATED)
async def create_quotation(quotation_request: QuotationCreate, quotation_service: QuotationServiceDep):
    """Crée un devis ; les lignes sont chiffrées côté serveur au prix catalogue."""
    logger.info(f"API create_quotation pour client ID: {quotation_request.customer_id}")
    try:
        created = await quotation_service.create_quotation(quotation_request)
        return QuotationRead.from_entity(created)
    except BAD_REQUEST_ERRORS as e:
        logger.warning(f"Erreur validation création devis client {quotation_request.customer_id}: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error(f"Erreur API create_quotation: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne création devis.")


@quotation_router.get("/{quotation_id}", response_model=QuotationRead)
async def read_quotation(
    quotation_service: QuotationServiceDep,
    quotation_id: int = Path(..., title="ID du devis", ge=1),
):
    """Récupère un devis et ses lignes."""
    try:
        quotation = await quotation_service.get_quotation(quotation_id)
        return QuotationRead.from_entity(quotation)
    except QuotationNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except Exception as e:
        logger.error(f"Erreur API read_quotation {quotation_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne récupération devis.")


@quotation_router.put("/{quotation_id}", response_model=QuotationRead)
async def update_quotation(
    quotation_service: QuotationServiceDep,
    quotation_id: int = Path(..., title="ID du devis à MAJ", ge=1),
    quotation_update: QuotationUpdate = Body(...),
):
    """Remplace l'en-tête et les lignes d'un devis non converti."""
    logger.info(f"API update_quotation: ID={quotation_id}")
    try:
        updated = await quotation_service.update_quotation(quotation_id, quotation_update)
        return QuotationRead.from_entity(updated)
    except QuotationNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except AlreadyConvertedException as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except BAD_REQUEST_ERRORS as e:
        logger.warning(f"Erreur validation MAJ devis {quotation_id}: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error(f"Erreur API update_quotation {quotation_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne MAJ devis.")


@quotation_router.post("/{quotation_id}/status", response_model=QuotationRead)
async def update_quotation_status(
    quotation_service: QuotationServiceDep,
    quotation_id: int = Path(..., title="ID du devis à MAJ", ge=1),
    status_update: QuotationStatusUpdate = Body(...),
):
    """Change le statut d'un devis (Pending, Approved, Rejected, Expired)."""
    logger.info(f"API update_quotation_status: ID={quotation_id} à '{status_update.status}'")
    try:
        updated = await quotation_service.update_quotation_status(quotation_id, status_update.status)
        return QuotationRead.from_entity(updated)
    except QuotationNotFoundException as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)
    except AlreadyConvertedException as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    except InvalidQuotationStatusException as e:
        logger.warning(f"Statut invalide pour devis {quotation_id}: {e.message}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except Exception as e:
        logger.error(f"Erreur API update_quotation_status {quotation_id}: {e}", exc_info=True)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Erreur interne MAJ statut devis.")
