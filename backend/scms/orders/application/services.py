import logging
from typing import Iterable, List, Optional

from scms.core.exceptions import DependencyUnavailableException
from scms.customers.domain.entities import Customer
from scms.customers.domain.repositories import AbstractCustomerRepository
from scms.products.domain.repositories import AbstractProductRepository
from scms.stock.service import StockService
from scms.quotations.application.aggregator import QuotationAggregator
from scms.quotations.domain.exceptions import QuotationNotFoundException
from scms.quotations.domain.repositories import AbstractQuotationRepository
from scms.orders.application.materializer import OrderMaterializer
from scms.orders.application.schemas import OrderCreate, OrderHeaderCreate
from scms.orders.domain.entities import Order
from scms.orders.domain.exceptions import OrderNotFoundException
from scms.orders.domain.repositories import AbstractOrderRepository
from scms.orders.domain.status import OrderStatus, OrderStatusMachine

logger = logging.getLogger(__name__)


class OrderService:
    """Service applicatif pour la gestion des commandes."""

    def __init__(self,
                 order_repo: AbstractOrderRepository,
                 quotation_repo: AbstractQuotationRepository,
                 customer_repo: AbstractCustomerRepository,
                 product_repo: AbstractProductRepository,
                 stock_service: StockService,
                 status_machine: Optional[OrderStatusMachine] = None):
        self.order_repo = order_repo
        self.quotation_repo = quotation_repo
        self.customer_repo = customer_repo
        self.product_repo = product_repo
        self.stock_service = stock_service
        self.status_machine = status_machine or OrderStatusMachine()

    async def _build_materializer(self, product_ids: Iterable[Optional[int]]) -> OrderMaterializer:
        ids = [pid for pid in product_ids if pid is not None]
        catalog = await self.product_repo.get_catalog(ids)
        stock_gate = await self.stock_service.gate_for_products(ids)
        return OrderMaterializer(QuotationAggregator(catalog, stock_gate))

    async def _load_customer(self, customer_id: Optional[int]) -> Optional[Customer]:
        if customer_id is None:
            return None
        customer = await self.customer_repo.get_by_id(customer_id)
        if customer is None:
            logger.warning(f"[OrderService] Client ID {customer_id} introuvable.")
            raise DependencyUnavailableException("Client", customer_id)
        return customer

    @staticmethod
    def _initial_status(header: OrderHeaderCreate) -> OrderStatus:
        return OrderStatus.parse(header.status) if header.status else OrderStatus.PENDING

    async def get_order(self, order_id: int) -> Order:
        logger.debug(f"[OrderService] Récupération commande ID: {order_id}")
        order = await self.order_repo.get_by_id(order_id)
        if not order:
            logger.warning(f"[OrderService] Commande ID {order_id} non trouvée.")
            raise OrderNotFoundException(order_id)
        return order

    async def list_orders(self, customer_id: Optional[int] = None) -> List[Order]:
        logger.debug(f"[OrderService] Listage commandes client={customer_id}")
        return await self.order_repo.list_all(customer_id=customer_id)

    async def create_order(self, data: OrderCreate) -> Order:
        if data.quotation is not None:
            return await self.create_order_from_quotation(data.quotation.quotation_id, data.order)
        return await self.create_standalone_order(data)

    async def create_order_from_quotation(self, quotation_id: int, header: OrderHeaderCreate) -> Order:
        """Convertit un devis approuvé en commande.

        La liste des commandes existantes sert de contrôle préalable ; en cas de
        soumissions concurrentes, la contrainte d'unicité sur orders.quotation_id
        rejette la seconde insertion (AlreadyConvertedException).
        """
        logger.info(f"[OrderService] Tentative création commande depuis devis ID: {quotation_id}")
        quotation = await self.quotation_repo.get_by_id(quotation_id)
        if not quotation:
            logger.warning(f"[OrderService] Devis ID {quotation_id} non trouvé.")
            raise QuotationNotFoundException(quotation_id)

        existing_orders = await self.order_repo.list_all(quotation_id=quotation_id)
        customer_id = header.customer_id if header.customer_id is not None else quotation.customer_id
        customer = await self._load_customer(customer_id)

        materializer = await self._build_materializer(quotation.product_ids())
        order = materializer.create_order_from_quotation(
            quotation,
            existing_orders,
            customer,
            shipping_address=header.shipping_address,
            order_date=header.order_date,
            status=self._initial_status(header),
        )

        created = await self.order_repo.add(order)
        logger.info(f"[OrderService] Commande ID {created.id} créée depuis devis ID {quotation_id}.")
        return created

    async def create_standalone_order(self, data: OrderCreate) -> Order:
        logger.info(f"[OrderService] Tentative création commande directe pour client ID: {data.order.customer_id}")
        customer = await self._load_customer(data.order.customer_id)

        materializer = await self._build_materializer(item.product_id for item in data.items)
        order = materializer.create_standalone_order(
            customer,
            data.order.shipping_address,
            data.items,
            status=self._initial_status(data.order),
            order_date=data.order.order_date,
        )

        created = await self.order_repo.add(order)
        logger.info(f"[OrderService] Commande directe ID {created.id} créée, total {created.total_amount}.")
        return created

    async def update_order_status(self, order_id: int, new_status: str) -> Order:
        logger.info(f"[OrderService] Tentative MAJ statut commande ID: {order_id} à '{new_status}'")
        target = OrderStatus.parse(new_status)
        existing = await self.get_order(order_id)

        changed = self.status_machine.set_status(existing, target)
        if changed is existing:
            return existing

        updated = await self.order_repo.update_status(order_id, changed.status)
        if not updated:
            raise OrderNotFoundException(order_id)
        return updated
