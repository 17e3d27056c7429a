import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from scms.config import settings

logger = logging.getLogger(__name__)

try:
    # Créer le moteur de base de données asynchrone
    engine = create_async_engine(
        settings.database_url,
        echo=settings.DB_ECHO_LOG,
        future=True
    )

    AsyncSessionLocal = sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False # Empêche les objets d'expirer après commit
    )
    logger.info("Moteur et Session Factory SQLAlchemy Async configurés.")

except Exception as e:
    logger.critical(f"Erreur lors de la configuration de SQLAlchemy Async: {e}", exc_info=True)
    engine = None
    AsyncSessionLocal = None


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides an async database session."""
    if AsyncSessionLocal is None:
        logger.error("La factory de session SQLAlchemy n'est pas initialisée.")
        raise RuntimeError("Database session factory is not initialized.")

    async with AsyncSessionLocal() as session:
        try:
            yield session
            # Les repositories valident leurs propres écritures
        except Exception as e:
            logger.error(f"Erreur durant la session DB, rollback: {e}", exc_info=True)
            await session.rollback()
            raise
        finally:
            await session.close()
            logger.debug("Session DB fermée.")


async def create_tables():
    """Crée toutes les tables déclarées dans SQLModel.metadata."""
    # Importer les modèles pour enregistrer les tables dans les métadonnées
    from scms.customers import models as _customers  # noqa: F401
    from scms.products import models as _products  # noqa: F401
    from scms.stock import models as _stock  # noqa: F401
    from scms.quotations import models as _quotations  # noqa: F401
    from scms.orders import models as _orders  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
