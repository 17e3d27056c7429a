"""
Matérialisation des commandes.

Une commande est un instantané : les lignes (prix unitaire et remise compris) sont
copiées telles quelles depuis le devis approuvé, ou chiffrées depuis le catalogue
pour une commande directe. Les modifications ultérieures du devis ou des prix
n'affectent jamais une commande existante.
"""
import logging
from datetime import datetime
from typing import Any, Iterable, Optional, Union

from scms.config import settings
from scms.core.exceptions import DependencyUnavailableException, ValidationException
from scms.core.utils import utcnow
from scms.customers.domain.entities import Customer
from scms.pricing.validation import validate_line_items
from scms.orders.domain.entities import Order, OrderItem
from scms.orders.domain.exceptions import QuotationNotApprovedException
from scms.orders.domain.status import OrderStatus
from scms.quotations.application.aggregator import QuotationAggregator
from scms.quotations.domain.entities import Quotation
from scms.quotations.domain.exceptions import AlreadyConvertedException
from scms.quotations.domain.status import QuotationStatus

logger = logging.getLogger(__name__)


class OrderMaterializer:

    def __init__(self, aggregator: QuotationAggregator):
        self.aggregator = aggregator

    @property
    def stock_gate(self):
        return self.aggregator.stock_gate

    @staticmethod
    def resolve_shipping_address(customer: Customer, override: Optional[str] = None) -> str:
        """Adresse saisie, sinon l'adresse enregistrée du client ; longueur contrôlée."""
        address = (override or "").strip() or (customer.address or "").strip()
        if not address:
            raise ValidationException("L'adresse de livraison est requise.", field="shipping_address")
        if not settings.SHIPPING_ADDRESS_MIN_LENGTH <= len(address) <= settings.SHIPPING_ADDRESS_MAX_LENGTH:
            raise ValidationException(
                f"L'adresse de livraison doit contenir entre {settings.SHIPPING_ADDRESS_MIN_LENGTH} "
                f"et {settings.SHIPPING_ADDRESS_MAX_LENGTH} caractères.",
                field="shipping_address",
            )
        return address

    def create_order_from_quotation(
        self,
        quotation: Quotation,
        existing_orders: Iterable[Order],
        customer: Optional[Customer],
        shipping_address: Optional[str] = None,
        order_date: Optional[datetime] = None,
        status: Union[str, OrderStatus] = OrderStatus.PENDING,
    ) -> Order:
        """Convertit un devis approuvé en commande.

        `existing_orders` est l'instantané des commandes connues de l'appelant ; ce
        contrôle est indicatif, l'unicité définitive est garantie par la base.
        """
        for existing in existing_orders:
            if quotation.id is not None and existing.quotation_id == quotation.id:
                logger.warning(f"[OrderMaterializer] Devis ID {quotation.id} déjà converti (commande ID {existing.id}).")
                raise AlreadyConvertedException(quotation.id, existing.id)

        if quotation.status != QuotationStatus.APPROVED:
            logger.warning(f"[OrderMaterializer] Devis ID {quotation.id} non approuvé ({quotation.status.value}).")
            raise QuotationNotApprovedException(quotation.id, quotation.status.value)

        if quotation.id is None:
            raise ValidationException("Le devis doit être enregistré avant sa conversion.", field="quotation_id")
        if customer is None:
            raise DependencyUnavailableException("Client", quotation.customer_id)
        if customer.id != quotation.customer_id:
            raise ValidationException(
                f"Le client {customer.id} ne correspond pas au client du devis ({quotation.customer_id}).",
                field="customer_id",
            )

        quotation = self.aggregator.prune_placeholders(quotation)
        if not quotation.items:
            raise ValidationException("Le devis ne comporte aucune ligne.", field="items")
        validate_line_items(quotation.items)
        for item in quotation.items:
            self.stock_gate.ensure_available(item.product_id, item.quantity)

        order = Order(
            customer_id=customer.id,
            quotation_id=quotation.id,
            order_date=order_date or utcnow(),
            shipping_address=self.resolve_shipping_address(customer, shipping_address),
            status=status,
            total_amount=quotation.total_amount,
            items=[
                OrderItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    discount=item.discount,
                )
                for item in quotation.items
            ],
        )
        logger.info(f"[OrderMaterializer] Commande préparée depuis devis ID {quotation.id}, total {order.total_amount}.")
        return order

    def create_standalone_order(
        self,
        customer: Optional[Customer],
        shipping_address: Optional[str],
        lines: Iterable[Any],
        status: Union[str, OrderStatus] = OrderStatus.PENDING,
        order_date: Optional[datetime] = None,
    ) -> Order:
        """Commande directe, sans devis : lignes chiffrées au prix catalogue courant.

        Chaque ligne expose `product_id`, `quantity` et `discount`.
        """
        if customer is None:
            raise ValidationException("Le client est requis.", field="customer_id")

        draft = self.aggregator.new_quotation(customer.id)
        for line in lines:
            if line.product_id is None:
                continue
            draft = self.aggregator.add_item(draft, line.product_id, line.quantity, line.discount)
        if not draft.items:
            raise ValidationException("La commande doit comporter au moins une ligne.", field="items")

        order = Order(
            customer_id=customer.id,
            order_date=order_date or utcnow(),
            shipping_address=self.resolve_shipping_address(customer, shipping_address),
            status=status,
            total_amount=draft.total_amount,
            items=[
                OrderItem(
                    product_id=item.product_id,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    discount=item.discount,
                )
                for item in draft.items
            ],
        )
        logger.info(f"[OrderMaterializer] Commande directe préparée pour client {customer.id}, total {order.total_amount}.")
        return order
