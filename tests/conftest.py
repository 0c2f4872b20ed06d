# Standard Library
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import AsyncGenerator, Optional

# Third-Party Libraries
import pytest
import pytest_asyncio

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

# First-Party Libraries (Your project)
from designshop.main import app
from designshop.database import DatabaseResource, get_db_session
from designshop.auth.security import get_password_hash, create_access_token
from designshop.core.utils import utc_now
from designshop.orders.models import Order, OrderItem
from designshop.products.models import Product
from designshop.users.constants import ROLE_ADMIN, ROLE_USER
from designshop.users.models import User

# URL de base pour la DB en mémoire
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

API_PREFIX = "/api"

# --- Fixtures de Base ---

@pytest_asyncio.fixture(scope="function")
async def database() -> AsyncGenerator[DatabaseResource, None]:
    """Ressource base de données en mémoire, tables créées, pour chaque test."""
    database = DatabaseResource(TEST_DATABASE_URL)
    await database.create_tables()
    await database.health_check()
    yield database
    await database.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(database: DatabaseResource) -> AsyncGenerator[AsyncSession, None]:
    async with database.session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_client(database: DatabaseResource, db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Fournit un AsyncClient httpx qui utilise la session DB de test isolée."""
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    original_database = app.state.database
    app.state.database = database
    app.dependency_overrides[get_db_session] = override_get_db_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    del app.dependency_overrides[get_db_session]
    app.state.database = original_database

# --- Fixtures Utilisateur et Authentification ---

async def _create_user(db_session: AsyncSession, email: str, password: str, name: str, role: str) -> User:
    user = User(
        email=email,
        password_hash=get_password_hash(password),
        name=name,
        phone="9876543210",
        role=role,
    )
    db_session.add(user)
    await db_session.commit()  # Commit pour obtenir l'ID
    await db_session.refresh(user)
    return user


def _auth_headers(user: User) -> dict[str, str]:
    if user.id is None:
        pytest.fail("L'ID utilisateur est None après commit/refresh.")
    access_token = create_access_token(data={"sub": str(user.id)})
    return {"Authorization": f"Bearer {access_token}"}


@pytest_asyncio.fixture(scope="function")
async def test_user(db_session: AsyncSession) -> User:
    """Crée un utilisateur standard."""
    return await _create_user(db_session, "testuser@example.com", "testpassword", "Test User", ROLE_USER)


@pytest_asyncio.fixture(scope="function")
async def admin_user(db_session: AsyncSession) -> User:
    """Crée un utilisateur admin."""
    return await _create_user(db_session, "admin@example.com", "adminpassword", "Admin User", ROLE_ADMIN)


@pytest_asyncio.fixture(scope="function")
async def test_user_2(db_session: AsyncSession) -> User:
    """Crée un deuxième utilisateur standard."""
    return await _create_user(db_session, "testuser2@example.com", "testpassword2", "Test User 2", ROLE_USER)


@pytest_asyncio.fixture(scope="function")
async def auth_headers_user(test_user: User) -> dict[str, str]:
    return _auth_headers(test_user)


@pytest_asyncio.fixture(scope="function")
async def auth_headers_admin(admin_user: User) -> dict[str, str]:
    return _auth_headers(admin_user)


@pytest_asyncio.fixture(scope="function")
async def auth_headers_user_2(test_user_2: User) -> dict[str, str]:
    return _auth_headers(test_user_2)

# --- Fixtures Produits ---

@pytest_asyncio.fixture(scope="function")
async def logo_product(db_session: AsyncSession) -> Product:
    """Produit avec grille tarifaire complète (base 500)."""
    product = Product(
        name="Logo Design",
        description="Création de logo",
        category="logo",
        price={"base": 500, "premium": 900, "enterprise": 1500},
        images=["https://cdn.example.com/logo.png"],
    )
    db_session.add(product)
    await db_session.commit()
    await db_session.refresh(product)
    return product


@pytest_asyncio.fixture(scope="function")
async def embroidery_product(db_session: AsyncSession) -> Product:
    """Produit sans palier 'premium' et avec un palier 'enterprise' à 0."""
    product = Product(
        name="Embroidery Pattern",
        category="embroidery",
        price={"base": 250.5, "enterprise": 0},
        images=[],
    )
    db_session.add(product)
    await db_session.commit()
    await db_session.refresh(product)
    return product

# --- Création directe de commandes ---

@pytest.fixture
def create_order(db_session: AsyncSession):
    """Insère une commande complète sans passer par l'API (listes, stats, export)."""
    counter = {"value": 0}

    async def _create_order(
        customer: User,
        product: Product,
        status: str = "pending",
        quantity: int = 1,
        tier: str = "base",
        created_at: Optional[datetime] = None,
        order_number: Optional[str] = None,
        **overrides,
    ) -> Order:
        counter["value"] += 1
        price = Decimal(str(product.price[tier]))
        subtotal = price * quantity
        tax = (subtotal * Decimal("0.10")).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        timestamp = created_at or utc_now()
        fields = dict(
            order_number=order_number or f"ORD-20240101-T{counter['value']:05d}",
            customer_id=customer.id,
            status=status,
            subtotal=subtotal,
            tax=tax,
            total=subtotal + tax,
            shipping_full_name=customer.name,
            shipping_email=customer.email,
            shipping_phone="9876543210",
            shipping_street="12 MG Road",
            shipping_city="Pune",
            shipping_state="MH",
            shipping_zip_code="411001",
            shipping_country="India",
            created_at=timestamp,
            updated_at=timestamp,
        )
        fields.update(overrides)
        order = Order(
            **fields,
            items=[OrderItem(product_id=product.id, package_type=tier, quantity=quantity, price=price)],
        )
        db_session.add(order)
        await db_session.commit()
        return order

    return _create_order
