"""
Module principal de l'application FastAPI SCMS.

Configure l'instance FastAPI, le middleware CORS et inclut les routeurs des devis,
des commandes et de l'inventaire sous le préfixe API.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from scms.config import settings
from scms.database import create_tables

# --- Importer les routeurs ---
from scms.quotations.interfaces.api import quotation_router
from scms.orders.interfaces.api import order_router
from scms.stock.interfaces.api import stock_router

# Configurer le logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Démarrage de {settings.APP_NAME}.")
    if settings.DB_CREATE_TABLES_ON_STARTUP:
        await create_tables()
        logger.info("Tables de la base de données créées.")
    yield
    logger.info(f"Arrêt de {settings.APP_NAME}.")


app = FastAPI(
    title=settings.APP_NAME,
    description="API de gestion des devis, commandes et stocks (SCMS).",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ======================================================
# Inclure les routeurs
# ======================================================
app.include_router(quotation_router, prefix=settings.API_PREFIX)
app.include_router(order_router, prefix=settings.API_PREFIX)
app.include_router(stock_router, prefix=settings.API_PREFIX)


@app.get("/")
async def read_root():
    return {"message": f"Bienvenue sur {settings.APP_NAME}"}
