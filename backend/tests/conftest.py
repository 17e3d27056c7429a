# Standard Library
from decimal import Decimal
from typing import AsyncGenerator, Dict, List

# Third-Party Libraries
import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, AsyncEngine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

# First-Party Libraries
from scms.main import app
from scms.database import get_db_session
from scms.customers.models import CustomerDB
from scms.products.models import ProductDB
from scms.stock.models import InventoryDB
from scms.quotations import models as _quotation_models  # noqa: F401
from scms.orders import models as _order_models  # noqa: F401
from scms.customers.domain.entities import Customer
from scms.products.domain.entities import Product
from scms.stock.domain.entities import InventoryRecord
from scms.stock.service import StockGate
from scms.quotations.application.aggregator import QuotationAggregator

# URL de base pour la DB en mémoire
TEST_DATABASE_BASE_URL = "sqlite+aiosqlite:///:memory:"

# Catalogue de référence : (id, nom, prix, stock, seuil de réapprovisionnement)
CATALOG_ROWS = [
    (1, "Capteur de température", Decimal("100.00"), 10, 2),
    (2, "Passerelle LoRa", Decimal("50.00"), 10, 2),
    (3, "Module GPS", Decimal("20.00"), 3, 5),
]

CUSTOMER_ADDRESS = "12 rue des Lilas, 69003 Lyon"

# --- Fixtures de Base ---

@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Crée un engine, des tables, et fournit une session DB en mémoire pour chaque test."""
    engine: AsyncEngine = create_async_engine(TEST_DATABASE_BASE_URL, echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with TestingSessionLocal() as session:
        yield session

    await engine.dispose()

@pytest_asyncio.fixture(scope="function")
async def test_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Fournit un AsyncClient httpx qui utilise la session DB de test isolée."""
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    del app.dependency_overrides[get_db_session]

# --- Fixtures de données (base) ---

@pytest_asyncio.fixture(scope="function")
async def seeded_customer(db_session: AsyncSession) -> CustomerDB:
    """Crée un client avec une adresse de livraison enregistrée."""
    customer = CustomerDB(
        company_name="Agritech Rhône",
        industry="Agriculture",
        address=CUSTOMER_ADDRESS,
        email="achats@agritech-rhone.fr",
    )
    db_session.add(customer)
    await db_session.commit()
    await db_session.refresh(customer)
    return customer

@pytest_asyncio.fixture(scope="function")
async def seeded_catalog(db_session: AsyncSession) -> List[ProductDB]:
    """Crée les produits de référence et leur inventaire."""
    products = []
    for product_id, name, price, stock, reorder_level in CATALOG_ROWS:
        product = ProductDB(id=product_id, product_name=name, price=price)
        db_session.add(product)
        db_session.add(InventoryDB(product_id=product_id, current_stock=stock, reorder_level=reorder_level))
        products.append(product)
    await db_session.commit()
    return products

# --- Fixtures du moteur (sans base) ---

@pytest.fixture
def customer() -> Customer:
    return Customer(id=1, company_name="Agritech Rhône", address=CUSTOMER_ADDRESS)

@pytest.fixture
def catalog() -> Dict[int, Product]:
    return {
        product_id: Product(id=product_id, product_name=name, price=price)
        for product_id, name, price, _, _ in CATALOG_ROWS
    }

@pytest.fixture
def stock_gate() -> StockGate:
    return StockGate(
        InventoryRecord(product_id=product_id, current_stock=stock, reorder_level=reorder_level)
        for product_id, _, _, stock, reorder_level in CATALOG_ROWS
    )

@pytest.fixture
def aggregator(catalog: Dict[int, Product], stock_gate: StockGate) -> QuotationAggregator:
    return QuotationAggregator(catalog, stock_gate)
