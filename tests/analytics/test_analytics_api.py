"""
Tests d'intégration du tableau de bord admin (GET /admin/analytics).
"""
from datetime import datetime

import pytest
from httpx import AsyncClient
from fastapi import status
from sqlalchemy.ext.asyncio import AsyncSession

from designshop.products.models import Product
from designshop.users.models import User

API_PREFIX = "/api"
ANALYTICS_URL = f"{API_PREFIX}/admin/analytics"

pytestmark = pytest.mark.asyncio


async def _product(db_session: AsyncSession, name: str, category: str) -> Product:
    product = Product(name=name, category=category, price={"base": 100}, images=[])
    db_session.add(product)
    await db_session.commit()
    await db_session.refresh(product)
    return product


async def test_analytics_dashboard(
    test_client: AsyncClient,
    db_session: AsyncSession,
    auth_headers_admin: dict[str, str],
    test_user: User,
    logo_product: Product,
    embroidery_product: Product,
    create_order,
):
    await create_order(test_user, logo_product, quantity=2, created_at=datetime(2024, 1, 5, 10, 0))
    await create_order(test_user, logo_product, status="completed", created_at=datetime(2024, 1, 5, 18, 0))
    await create_order(test_user, embroidery_product, quantity=3, created_at=datetime(2024, 2, 1, 9, 0))

    response = await test_client.get(ANALYTICS_URL, headers=auth_headers_admin)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["success"] is True

    charts = data["charts"]
    assert charts["ordersDaily"] == [
        {"day": "2024-01-05", "count": 2},
        {"day": "2024-02-01", "count": 1},
    ]
    assert charts["revenueDaily"] == [
        {"day": "2024-01-05", "revenue": pytest.approx(1650)},
        {"day": "2024-02-01", "revenue": pytest.approx(826.65)},
    ]
    assert charts["revenueMonthly"] == [
        {"month": "2024-01", "revenue": pytest.approx(1650)},
        {"month": "2024-02", "revenue": pytest.approx(826.65)},
    ]
    # test_user et admin_user créés aujourd'hui
    assert sum(entry["count"] for entry in charts["usersDaily"]) == 2

    stats = data["stats"]
    assert stats["totalUsers"] == 2
    assert stats["totalOrders"] == 3
    assert stats["totalRevenue"] == pytest.approx(2476.65)
    assert {(s["status"], s["count"]) for s in stats["orderStatusStats"]} == {("pending", 2), ("completed", 1)}
    assert {(c["category"], c["count"]) for c in stats["productCategories"]} == {("logo", 1), ("embroidery", 1)}

    top = stats["topProducts"]
    assert [(p["productId"], p["sold"]) for p in top] == [(logo_product.id, 3), (embroidery_product.id, 3)]
    assert top[0]["product"]["name"] == "Logo Design"


async def test_top_products_limited_to_five_with_id_tiebreak(
    test_client: AsyncClient,
    db_session: AsyncSession,
    auth_headers_admin: dict[str, str],
    test_user: User,
    create_order,
):
    products = [await _product(db_session, f"Design {i}", "logo") for i in range(7)]
    await create_order(test_user, products[6], quantity=5)
    for product in products[:6]:
        await create_order(test_user, product, quantity=1)

    response = await test_client.get(ANALYTICS_URL, headers=auth_headers_admin)

    top = response.json()["stats"]["topProducts"]
    assert len(top) == 5
    assert [p["productId"] for p in top] == [products[6].id] + [p.id for p in products[:4]]


async def test_analytics_empty_database(test_client: AsyncClient, auth_headers_admin: dict[str, str]):
    response = await test_client.get(ANALYTICS_URL, headers=auth_headers_admin)

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["charts"]["ordersDaily"] == []
    assert data["charts"]["revenueMonthly"] == []
    assert data["stats"]["totalOrders"] == 0
    assert data["stats"]["totalRevenue"] == 0
    assert data["stats"]["topProducts"] == []


async def test_analytics_admin_only(test_client: AsyncClient, auth_headers_user: dict[str, str]):
    response = await test_client.get(ANALYTICS_URL, headers=auth_headers_user)

    assert response.status_code == status.HTTP_403_FORBIDDEN
    assert response.json()["success"] is False
