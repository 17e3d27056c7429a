import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from scms.config import settings
from scms.core.exceptions import DependencyUnavailableException
from scms.customers.domain.repositories import AbstractCustomerRepository
from scms.orders.domain.repositories import AbstractOrderRepository
from scms.products.domain.repositories import AbstractProductRepository
from scms.stock.service import StockService
from scms.quotations.application.aggregator import QuotationAggregator
from scms.quotations.application.schemas import QuotationCreate, QuotationUpdate
from scms.quotations.domain.entities import Quotation
from scms.quotations.domain.exceptions import AlreadyConvertedException, QuotationNotFoundException
from scms.quotations.domain.repositories import AbstractQuotationRepository
from scms.quotations.domain.status import QuotationStatus, QuotationStatusMachine

logger = logging.getLogger(__name__)


class QuotationService:
    """Service applicatif pour la gestion des devis."""

    def __init__(self,
                 quotation_repo: AbstractQuotationRepository,
                 order_repo: AbstractOrderRepository,
                 customer_repo: AbstractCustomerRepository,
                 product_repo: AbstractProductRepository,
                 stock_service: StockService,
                 status_machine: Optional[QuotationStatusMachine] = None):
        self.quotation_repo = quotation_repo
        self.order_repo = order_repo
        self.customer_repo = customer_repo
        self.product_repo = product_repo
        self.stock_service = stock_service
        self.status_machine = status_machine or QuotationStatusMachine()

    async def build_aggregator(self, product_ids: Iterable[Optional[int]]) -> QuotationAggregator:
        """Charge les instantanés catalogue et inventaire pour les produits concernés."""
        ids = [pid for pid in product_ids if pid is not None]
        catalog = await self.product_repo.get_catalog(ids)
        stock_gate = await self.stock_service.gate_for_products(ids)
        return QuotationAggregator(catalog, stock_gate)

    async def _ensure_customer(self, customer_id: Optional[int]) -> None:
        # Un identifiant absent est signalé par validate_for_save
        if customer_id is None or customer_id <= 0:
            return
        customer = await self.customer_repo.get_by_id(customer_id)
        if customer is None:
            logger.warning(f"[QuotationService] Client ID {customer_id} introuvable.")
            raise DependencyUnavailableException("Client", customer_id)

    async def _ensure_not_converted(self, quotation_id: int) -> None:
        order = await self.order_repo.get_by_quotation_id(quotation_id)
        if order is not None:
            logger.warning(f"[QuotationService] Devis ID {quotation_id} déjà converti en commande ID {order.id}.")
            raise AlreadyConvertedException(quotation_id, order.id)

    @staticmethod
    def _fill_items(
        aggregator: QuotationAggregator,
        quotation: Quotation,
        data: QuotationCreate,
        price_snapshots: Optional[Dict[int, Decimal]] = None,
    ) -> Quotation:
        price_snapshots = price_snapshots or {}
        for item in data.items:
            if item.product_id is None:
                continue  # ligne vide du formulaire
            quotation = aggregator.add_item(
                quotation,
                item.product_id,
                item.quantity,
                item.discount,
                unit_price=price_snapshots.get(item.product_id),
            )
        aggregator.validate_for_save(quotation)
        return quotation

    async def get_quotation(self, quotation_id: int) -> Quotation:
        logger.debug(f"[QuotationService] Récupération devis ID: {quotation_id}")
        quotation = await self.quotation_repo.get_by_id(quotation_id)
        if not quotation:
            logger.warning(f"[QuotationService] Devis ID {quotation_id} non trouvé.")
            raise QuotationNotFoundException(quotation_id)
        return quotation

    async def list_quotations(
        self,
        customer_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> List[Quotation]:
        status_filter = QuotationStatus.parse(status) if status else None
        logger.debug(f"[QuotationService] Listage devis client={customer_id}, statut={status_filter}")
        return await self.quotation_repo.list_all(customer_id=customer_id, status=status_filter)

    async def create_quotation(self, data: QuotationCreate) -> Quotation:
        """Crée un devis : lignes chiffrées au prix catalogue et bornées par le stock."""
        logger.info(f"[QuotationService] Tentative création devis pour client ID: {data.customer_id}")
        await self._ensure_customer(data.customer_id)

        status = QuotationStatus.parse(data.status) if data.status else QuotationStatus.PENDING
        aggregator = await self.build_aggregator(item.product_id for item in data.items)
        draft = aggregator.new_quotation(
            data.customer_id,
            quote_date=data.quote_date,
            validity_date=data.validity_date,
            status=status,
        )
        quotation = self._fill_items(aggregator, draft, data)

        created = await self.quotation_repo.add(quotation)
        logger.info(f"[QuotationService] Devis ID {created.id} créé pour client {created.customer_id}, total {created.total_amount}.")
        return created

    async def update_quotation(self, quotation_id: int, data: QuotationUpdate) -> Quotation:
        """Remplace l'en-tête et les lignes d'un devis non encore converti.

        Les produits déjà présents conservent leur prix unitaire figé ; les nouveaux
        produits prennent le prix catalogue courant.
        """
        logger.info(f"[QuotationService] Tentative MAJ devis ID: {quotation_id}")
        existing = await self.get_quotation(quotation_id)
        await self._ensure_not_converted(quotation_id)

        customer_id = data.customer_id if data.customer_id is not None else existing.customer_id
        await self._ensure_customer(customer_id)

        base = Quotation(
            id=existing.id,
            customer_id=customer_id,
            quote_date=data.quote_date or existing.quote_date,
            validity_date=data.validity_date or existing.validity_date,
            status=QuotationStatus.parse(data.status) if data.status else existing.status,
            created_at=existing.created_at,
            updated_at=existing.updated_at,
        )
        snapshots = {item.product_id: item.unit_price for item in existing.items}
        aggregator = await self.build_aggregator(item.product_id for item in data.items)
        quotation = self._fill_items(aggregator, base, data, price_snapshots=snapshots)

        updated = await self.quotation_repo.update(quotation)
        logger.info(f"[QuotationService] Devis ID {quotation_id} mis à jour, total {updated.total_amount}.")
        return updated

    async def update_quotation_status(self, quotation_id: int, new_status: str) -> Quotation:
        logger.info(f"[QuotationService] Tentative MAJ statut devis ID: {quotation_id} à '{new_status}'")
        target = QuotationStatus.parse(new_status)
        existing = await self.get_quotation(quotation_id)

        if settings.FREEZE_QUOTATION_STATUS_AFTER_ORDER and existing.status != target:
            await self._ensure_not_converted(quotation_id)

        changed = self.status_machine.set_status(existing, target)
        if changed is existing:
            return existing

        updated = await self.quotation_repo.update_status(quotation_id, changed.status)
        if not updated:
            raise QuotationNotFoundException(quotation_id)
        logger.info(f"[QuotationService] Statut devis ID {quotation_id} mis à jour à '{updated.status.value}'.")
        return updated
