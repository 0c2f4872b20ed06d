# designshop/analytics/repositories.py
import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from designshop.core.aggregation import day_bucket, dialect_name, month_bucket
from designshop.orders.models import Order, OrderItem
from designshop.products.models import Product
from designshop.users.models import User

logger = logging.getLogger(__name__)

TOP_PRODUCTS_LIMIT = 5


def _to_decimal(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


class SQLAlchemyAnalyticsRepository:
    """Requêtes d'agrégation en lecture seule pour le tableau de bord admin."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    @property
    def dialect(self) -> str:
        return dialect_name(self.db)

    # --- Séries temporelles ---

    async def count_per_day(self, model) -> List[Tuple[str, int]]:
        """``(YYYY-MM-DD, count)`` sur ``model.created_at``, jours croissants."""
        day = day_bucket(model.created_at, self.dialect).label("day")
        stmt = select(day, func.count(model.id).label("count")).group_by(day).order_by(day)
        result = await self.db.execute(stmt)
        return [(row.day, row.count) for row in result.all()]

    async def revenue_per_day(self) -> List[Tuple[str, Decimal]]:
        day = day_bucket(Order.created_at, self.dialect).label("day")
        stmt = select(day, func.sum(Order.total).label("revenue")).group_by(day).order_by(day)
        result = await self.db.execute(stmt)
        return [(row.day, _to_decimal(row.revenue)) for row in result.all()]

    async def revenue_per_month(self) -> List[Tuple[str, Decimal]]:
        month = month_bucket(Order.created_at, self.dialect).label("month")
        stmt = select(month, func.sum(Order.total).label("revenue")).group_by(month).order_by(month)
        result = await self.db.execute(stmt)
        return [(row.month, _to_decimal(row.revenue)) for row in result.all()]

    # --- Répartitions ---

    async def count_orders_by_status(self) -> List[Tuple[str, int]]:
        stmt = select(Order.status, func.count(Order.id).label("count")).group_by(Order.status).order_by(Order.status)
        result = await self.db.execute(stmt)
        return [(row.status, row.count) for row in result.all()]

    async def count_products_by_category(self) -> List[Tuple[Optional[str], int]]:
        stmt = (
            select(Product.category, func.count(Product.id).label("count"))
            .group_by(Product.category)
            .order_by(Product.category)
        )
        result = await self.db.execute(stmt)
        return [(row.category, row.count) for row in result.all()]

    async def top_selling_products(self, limit: int = TOP_PRODUCTS_LIMIT) -> List[Tuple[Product, int]]:
        """Quantités vendues par produit, décroissantes ; égalités départagées par ID produit croissant."""
        sold = func.sum(OrderItem.quantity).label("sold")
        stmt = (
            select(Product, sold)
            .join(OrderItem, OrderItem.product_id == Product.id)
            .group_by(Product.id)
            .order_by(desc(sold), Product.id)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [(row[0], int(row.sold)) for row in result.all()]

    # --- Totaux ---

    async def count_users(self) -> int:
        return await self.db.scalar(select(func.count(User.id))) or 0

    async def count_orders(self) -> int:
        return await self.db.scalar(select(func.count(Order.id))) or 0

    async def total_revenue(self) -> Decimal:
        return _to_decimal(await self.db.scalar(select(func.coalesce(func.sum(Order.total), 0))))
