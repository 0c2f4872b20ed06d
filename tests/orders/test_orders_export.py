"""
Tests de l'export CSV et des statistiques de commandes (endpoints admin).
"""
import csv
import io
from datetime import datetime, timedelta

import pytest
from httpx import AsyncClient
from fastapi import status

from designshop.core.utils import utc_now
from designshop.orders.config import CSV_EXPORT_HEADERS
from designshop.products.models import Product
from designshop.users.models import User

API_PREFIX = "/api"
ORDERS_URL = f"{API_PREFIX}/orders"

pytestmark = pytest.mark.asyncio

# --- Export CSV ---

async def test_export_csv_one_row_per_order(
    test_client: AsyncClient,
    auth_headers_admin: dict[str, str],
    test_user: User,
    test_user_2: User,
    logo_product: Product,
    create_order,
):
    old = await create_order(test_user, logo_product, quantity=2, created_at=datetime(2024, 1, 5, 9, 30))
    new = await create_order(test_user_2, logo_product, tier="premium", created_at=datetime(2024, 2, 7, 18, 0))

    response = await test_client.get(f"{ORDERS_URL}/export/csv", headers=auth_headers_admin)

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["content-type"].startswith("text/csv")
    today = utc_now().strftime("%Y-%m-%d")
    assert response.headers["content-disposition"] == f'attachment; filename="orders_export_{today}.csv"'

    body = response.text
    assert not body.endswith("\n")
    lines = body.split("\n")
    assert lines[0] == ",".join(f'"{header}"' for header in CSV_EXPORT_HEADERS)

    rows = list(csv.reader(io.StringIO(body)))[1:]
    assert [row[0] for row in rows] == [new.order_number, old.order_number]

    old_row = rows[1]
    assert old_row[1] == "Test User"
    assert old_row[2] == "testuser@example.com"
    assert old_row[3] == "pending"
    assert old_row[4] == "1100.00"
    assert old_row[5] == "1"
    assert old_row[6] == "Logo Design (base, Qty: 2)"
    assert old_row[7] == "2024-01-05"
    assert old_row[9] == "12 MG Road, Pune, MH, 411001, India"
    assert old_row[10] == "9876543210"


async def test_export_csv_doubles_quotes(
    test_client: AsyncClient,
    db_session,
    auth_headers_admin: dict[str, str],
    test_user: User,
    logo_product: Product,
    create_order,
):
    test_user.name = 'Rahul "Rocky" Sharma'
    db_session.add(test_user)
    await db_session.commit()
    await create_order(test_user, logo_product, shipping_street='Flat 4, "Green" Tower')

    response = await test_client.get(f"{ORDERS_URL}/export/csv", headers=auth_headers_admin)

    data_line = response.text.split("\n")[1]
    assert '"Rahul ""Rocky"" Sharma"' in data_line
    assert '"Flat 4, ""Green"" Tower, Pune, MH, 411001, India"' in data_line


async def test_export_csv_empty(test_client: AsyncClient, auth_headers_admin: dict[str, str]):
    response = await test_client.get(f"{ORDERS_URL}/export/csv", headers=auth_headers_admin)

    assert response.status_code == status.HTTP_200_OK
    assert response.text.split("\n") == [",".join(f'"{header}"' for header in CSV_EXPORT_HEADERS)]


async def test_export_csv_admin_only(test_client: AsyncClient, auth_headers_user: dict[str, str]):
    response = await test_client.get(f"{ORDERS_URL}/export/csv", headers=auth_headers_user)
    assert response.status_code == status.HTTP_403_FORBIDDEN

# --- Statistiques (GET /orders/admin/stats) ---

async def test_order_stats(
    test_client: AsyncClient,
    auth_headers_admin: dict[str, str],
    test_user: User,
    logo_product: Product,
    create_order,
):
    now = utc_now()
    await create_order(test_user, logo_product, status="completed", quantity=2, created_at=now)
    await create_order(test_user, logo_product, status="completed", created_at=now)
    await create_order(test_user, logo_product, status="pending", created_at=now)
    await create_order(test_user, logo_product, status="cancelled", created_at=now)
    # Hors fenêtre de tendance (plus d'un an)
    await create_order(test_user, logo_product, status="completed", created_at=now - timedelta(days=400))

    response = await test_client.get(f"{ORDERS_URL}/admin/stats", headers=auth_headers_admin)

    assert response.status_code == status.HTTP_200_OK
    stats = response.json()["stats"]
    assert stats["totalOrders"] == 5
    assert stats["pendingOrders"] == 1
    assert stats["completedOrders"] == 3
    assert stats["cancelledOrders"] == 1
    # Chiffre d'affaires : commandes terminées uniquement (1100 + 550 + 550)
    assert stats["totalRevenue"] == pytest.approx(2200)
    assert stats["ordersByStatus"][0] == {"status": "completed", "count": 3}
    assert {entry["status"] for entry in stats["ordersByStatus"]} == {"completed", "pending", "cancelled"}

    assert stats["orderTrend"] == [
        {"year": now.year, "month": now.month, "count": 4, "revenue": pytest.approx(2750)}
    ]


async def test_order_stats_admin_only(test_client: AsyncClient, auth_headers_user: dict[str, str]):
    response = await test_client.get(f"{ORDERS_URL}/admin/stats", headers=auth_headers_user)
    assert response.status_code == status.HTTP_403_FORBIDDEN
