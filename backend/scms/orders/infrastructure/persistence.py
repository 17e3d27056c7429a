import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from scms.core.exceptions import ValidationException
from scms.core.utils import utcnow
from scms.pricing.service import round_currency
from scms.orders.models import OrderDB, OrderItemDB
from scms.orders.domain.entities import FROM_STORAGE, Order
from scms.orders.domain.repositories import AbstractOrderRepository
from scms.orders.domain.status import OrderStatus
from scms.quotations.domain.exceptions import AlreadyConvertedException

logger = logging.getLogger(__name__)


class SQLAlchemyOrderRepository(AbstractOrderRepository):
    """Implémentation SQLAlchemy du repository des commandes."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_db(self, order_id: int) -> Optional[OrderDB]:
        stmt = select(OrderDB).where(OrderDB.id == order_id).options(selectinload(OrderDB.items))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        order_db = await self._get_db(order_id)
        if not order_db:
            logger.debug(f"Commande ID {order_id} non trouvée dans get_by_id().")
            return None
        return Order.model_validate(order_db, context=FROM_STORAGE)

    async def get_by_quotation_id(self, quotation_id: int) -> Optional[Order]:
        stmt = (
            select(OrderDB)
            .where(OrderDB.quotation_id == quotation_id)
            .options(selectinload(OrderDB.items))
        )
        result = await self.session.execute(stmt)
        order_db = result.scalar_one_or_none()
        return Order.model_validate(order_db, context=FROM_STORAGE) if order_db else None

    async def list_all(
        self,
        customer_id: Optional[int] = None,
        quotation_id: Optional[int] = None,
    ) -> List[Order]:
        stmt = select(OrderDB).options(selectinload(OrderDB.items))
        if customer_id is not None:
            stmt = stmt.where(OrderDB.customer_id == customer_id)
        if quotation_id is not None:
            stmt = stmt.where(OrderDB.quotation_id == quotation_id)
        stmt = stmt.order_by(OrderDB.order_date.desc(), OrderDB.id.desc())
        result = await self.session.execute(stmt)
        return [Order.model_validate(o, context=FROM_STORAGE) for o in result.scalars().all()]

    async def add(self, order: Order) -> Order:
        now = utcnow()
        order_db = OrderDB(
            customer_id=order.customer_id,
            quotation_id=order.quotation_id,
            order_date=order.order_date,
            shipping_address=order.shipping_address,
            status=order.status.value,
            total_amount=round_currency(order.total_amount),
            created_at=now,
            updated_at=now,
        )
        order_db.items = [
            OrderItemDB(
                product_id=item.product_id,
                quantity=item.quantity,
                unit_price=round_currency(item.unit_price),
                discount=round_currency(item.discount),
                line_total=round_currency(item.line_total),
            )
            for item in order.items
        ]
        self.session.add(order_db)

        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            if order.quotation_id is not None:
                existing = await self.get_by_quotation_id(order.quotation_id)
                if existing is not None:
                    logger.warning(
                        f"Devis ID {order.quotation_id} déjà converti (commande ID {existing.id}), insertion refusée."
                    )
                    raise AlreadyConvertedException(order.quotation_id, existing.id)
            logger.error(f"Erreur intégrité ajout commande pour client {order.customer_id}: {e}", exc_info=True)
            raise ValidationException(f"Violation de contrainte à l'enregistrement de la commande: {e.orig}")

        logger.info(f"Commande ID {order_db.id} ajoutée pour client {order.customer_id} (devis: {order.quotation_id}).")
        return await self.get_by_id(order_db.id)

    async def update_status(self, order_id: int, status: OrderStatus) -> Optional[Order]:
        order_db = await self._get_db(order_id)
        if not order_db:
            logger.warning(f"Tentative MAJ statut commande ID {order_id} non trouvée.")
            return None

        order_db.status = status.value
        order_db.updated_at = utcnow()
        try:
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Erreur inattendue MAJ statut commande {order_id}: {e}", exc_info=True)
            raise

        logger.info(f"Statut commande ID {order_id} mis à jour à '{status.value}'.")
        return await self.get_by_id(order_id)
