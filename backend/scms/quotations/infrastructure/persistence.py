import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from scms.core.exceptions import ValidationException
from scms.core.utils import utcnow
from scms.pricing.service import round_currency
from scms.quotations.models import QuotationDB, QuotationItemDB
from scms.quotations.domain.entities import Quotation, QuotationItem
from scms.quotations.domain.exceptions import QuotationNotFoundException
from scms.quotations.domain.repositories import AbstractQuotationRepository
from scms.quotations.domain.status import QuotationStatus

logger = logging.getLogger(__name__)


def _item_to_db(item: QuotationItem) -> QuotationItemDB:
    return QuotationItemDB(
        product_id=item.product_id,
        quantity=item.quantity,
        unit_price=round_currency(item.unit_price),
        discount=round_currency(item.discount),
        line_total=round_currency(item.line_total),
    )


class SQLAlchemyQuotationRepository(AbstractQuotationRepository):
    """Implémentation SQLAlchemy du repository des devis."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_db(self, quotation_id: int) -> Optional[QuotationDB]:
        stmt = (
            select(QuotationDB)
            .where(QuotationDB.id == quotation_id)
            .options(selectinload(QuotationDB.items))
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_id(self, quotation_id: int) -> Optional[Quotation]:
        quotation_db = await self._get_db(quotation_id)
        if not quotation_db:
            logger.debug(f"Devis ID {quotation_id} non trouvé dans get_by_id().")
            return None
        return Quotation.model_validate(quotation_db)

    async def list_all(
        self,
        customer_id: Optional[int] = None,
        status: Optional[QuotationStatus] = None,
    ) -> List[Quotation]:
        stmt = select(QuotationDB).options(selectinload(QuotationDB.items))
        if customer_id is not None:
            stmt = stmt.where(QuotationDB.customer_id == customer_id)
        if status is not None:
            stmt = stmt.where(QuotationDB.status == status.value)
        stmt = stmt.order_by(QuotationDB.quote_date.desc(), QuotationDB.id.desc())
        result = await self.session.execute(stmt)
        return [Quotation.model_validate(q) for q in result.scalars().all()]

    async def add(self, quotation: Quotation) -> Quotation:
        now = utcnow()
        quotation_db = QuotationDB(
            customer_id=quotation.customer_id,
            quote_date=quotation.quote_date,
            validity_date=quotation.validity_date,
            status=quotation.status.value,
            total_amount=round_currency(quotation.total_amount),
            created_at=now,
            updated_at=now,
        )
        quotation_db.items = [_item_to_db(item) for item in quotation.items]
        self.session.add(quotation_db)

        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.error(f"Erreur intégrité ajout devis pour client {quotation.customer_id}: {e}", exc_info=True)
            raise ValidationException(f"Violation de contrainte à l'enregistrement du devis: {e.orig}")

        logger.info(f"Devis ID {quotation_db.id} ajouté pour client {quotation.customer_id}.")
        return await self.get_by_id(quotation_db.id)

    async def update(self, quotation: Quotation) -> Quotation:
        quotation_db = await self._get_db(quotation.id)
        if not quotation_db:
            raise QuotationNotFoundException(quotation.id)

        quotation_db.customer_id = quotation.customer_id
        quotation_db.quote_date = quotation.quote_date
        quotation_db.validity_date = quotation.validity_date
        quotation_db.status = quotation.status.value
        quotation_db.total_amount = round_currency(quotation.total_amount)
        quotation_db.updated_at = utcnow()

        try:
            # Supprimer les anciennes lignes avant d'insérer les nouvelles (contrainte produit unique)
            quotation_db.items.clear()
            await self.session.flush()
            quotation_db.items.extend(_item_to_db(item) for item in quotation.items)
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.error(f"Erreur intégrité MAJ devis {quotation.id}: {e}", exc_info=True)
            raise ValidationException(f"Violation de contrainte à la mise à jour du devis: {e.orig}")

        logger.info(f"Devis ID {quotation.id} mis à jour ({len(quotation.items)} ligne(s)).")
        return await self.get_by_id(quotation.id)

    async def update_status(self, quotation_id: int, status: QuotationStatus) -> Optional[Quotation]:
        quotation_db = await self._get_db(quotation_id)
        if not quotation_db:
            logger.warning(f"Tentative MAJ statut devis ID {quotation_id} non trouvé.")
            return None

        if quotation_db.status == status.value:
            logger.info(f"Statut devis {quotation_id} déjà '{status.value}'. Aucune MAJ nécessaire.")
            return Quotation.model_validate(quotation_db)

        quotation_db.status = status.value
        quotation_db.updated_at = utcnow()
        try:
            await self.session.commit()
        except Exception as e:
            await self.session.rollback()
            logger.error(f"Erreur inattendue MAJ statut devis {quotation_id}: {e}", exc_info=True)
            raise

        logger.info(f"Statut devis ID {quotation_id} mis à jour à '{status.value}'.")
        return await self.get_by_id(quotation_id)
