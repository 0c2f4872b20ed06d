# designshop/orders/repositories.py
import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

from fastcrud import FastCRUD
from sqlalchemy import desc, extract, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from designshop.orders.config import MAX_ORDER_ID
from designshop.orders.exceptions import OrderNotFoundException
from designshop.orders.interfaces.repositories import AbstractOrderRepository, OrderFilters
from designshop.orders.models import Order, OrderCommunication, OrderItem

logger = logging.getLogger(__name__)


def _order_detail_options():
    # Toutes les relations sérialisées doivent être chargées : pas de lazy-load en async
    return (
        selectinload(Order.customer),
        selectinload(Order.items).selectinload(OrderItem.product),
        selectinload(Order.communication).selectinload(OrderCommunication.sender),
    )


class SQLAlchemyOrderRepository(AbstractOrderRepository):
    """Implémentation SQLAlchemy du repository des commandes (FastCRUD pour les comptages)."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.crud_order = FastCRUD(Order)

    async def _get_one(self, *conditions) -> Optional[Order]:
        stmt = (
            select(Order)
            .where(*conditions)
            .options(*_order_detail_options())
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_by_id(self, order_id: int) -> Optional[Order]:
        logger.debug(f"[OrderRepository] Getting order by ID: {order_id}")
        return await self._get_one(Order.id == order_id)

    async def get_by_order_number(self, order_number: str) -> Optional[Order]:
        logger.debug(f"[OrderRepository] Getting order by number: {order_number}")
        return await self._get_one(Order.order_number == order_number)

    async def get_by_reference(self, order_ref: str) -> Optional[Order]:
        order = None
        if order_ref.isdigit() and int(order_ref) <= MAX_ORDER_ID:
            order = await self.get_by_id(int(order_ref))
        if order is None:
            order = await self.get_by_order_number(order_ref)
        if order is None:
            logger.warning(f"[OrderRepository] Order not found by ID or number: {order_ref}")
        return order

    @staticmethod
    def _filter_conditions(filters: OrderFilters) -> list:
        conditions = []
        if filters.customer_id is not None:
            conditions.append(Order.customer_id == filters.customer_id)
        if filters.status:
            conditions.append(Order.status == filters.status)
        if filters.start_date:
            conditions.append(Order.created_at >= filters.start_date)
        if filters.end_date:
            conditions.append(Order.created_at <= filters.end_date)
        if filters.search:
            conditions.append(Order.order_number.icontains(filters.search, autoescape=True))
        return conditions

    async def list_orders(self, filters: OrderFilters, limit: int, offset: int) -> Tuple[List[Order], int]:
        logger.debug(f"[OrderRepository] Listing orders {filters}, limit={limit}, offset={offset}")
        conditions = self._filter_conditions(filters)

        total = await self.db.scalar(select(func.count()).select_from(Order).where(*conditions))
        stmt = (
            select(Order)
            .where(*conditions)
            .options(*_order_detail_options())
            .order_by(desc(Order.created_at), desc(Order.id))
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all()), total or 0

    async def list_all(self) -> List[Order]:
        stmt = (
            select(Order)
            .options(*_order_detail_options())
            .order_by(desc(Order.created_at), desc(Order.id))
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def add(self, order: Order) -> Order:
        logger.debug(f"[OrderRepository] Creating order {order.order_number} for customer {order.customer_id}")
        try:
            self.db.add(order)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"[OrderRepository] Error creating order: {e}", exc_info=True)
            raise

        logger.info(f"[OrderRepository] Order ID {order.id} created with {len(order.items)} items.")
        return await self._reload(order.id)

    async def save(self, order: Order) -> Order:
        logger.debug(f"[OrderRepository] Saving order ID: {order.id}")
        try:
            self.db.add(order)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"[OrderRepository] Error saving order {order.id}: {e}", exc_info=True)
            raise
        return await self._reload(order.id)

    async def _reload(self, order_id: int) -> Order:
        # Re-fetch pour charger relations et colonnes mises à jour
        order = await self.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundException(str(order_id))
        return order

    # --- Statistiques ---

    async def count(self, status: Optional[str] = None) -> int:
        if status is None:
            return await self.crud_order.count(db=self.db)
        return await self.crud_order.count(db=self.db, status=status)

    async def sum_revenue(self, status: Optional[str] = None) -> Decimal:
        stmt = select(func.coalesce(func.sum(Order.total), 0))
        if status is not None:
            stmt = stmt.where(Order.status == status)
        return Decimal(str(await self.db.scalar(stmt)))

    async def count_by_status(self) -> List[Tuple[str, int]]:
        count_col = func.count(Order.id).label("count")
        stmt = (
            select(Order.status, count_col)
            .group_by(Order.status)
            .order_by(desc(count_col), Order.status)
        )
        result = await self.db.execute(stmt)
        return [(row.status, row.count) for row in result.all()]

    async def monthly_trend(self, since: datetime) -> List[Tuple[int, int, int, Decimal]]:
        year_col = extract("year", Order.created_at).label("year")
        month_col = extract("month", Order.created_at).label("month")
        stmt = (
            select(
                year_col,
                month_col,
                func.count(Order.id).label("count"),
                func.coalesce(func.sum(Order.total), 0).label("revenue"),
            )
            .where(Order.created_at >= since)
            .group_by(year_col, month_col)
            .order_by(year_col, month_col)
        )
        result = await self.db.execute(stmt)
        return [
            (int(row.year), int(row.month), row.count, Decimal(str(row.revenue)))
            for row in result.all()
        ]
