import logging

from designshop.analytics.repositories import SQLAlchemyAnalyticsRepository
from designshop.analytics.schemas import (
    AnalyticsCharts,
    AnalyticsResponse,
    AnalyticsStats,
    DailyCount,
    DailyRevenue,
    MonthlyRevenue,
    OrderStatusStat,
    ProductCategoryStat,
    TopProduct,
)
from designshop.orders.models import Order
from designshop.products.models import ProductSummary
from designshop.users.models import User

logger = logging.getLogger(__name__)


class AnalyticsService:
    """
    Tableau de bord admin, recalculé à chaque appel (aucun cache).

    Le chiffre d'affaires est toujours lu depuis la colonne ``orders.total``
    figée à la création de la commande.
    """

    def __init__(self, repository: SQLAlchemyAnalyticsRepository):
        self.repository = repository

    async def get_charts(self) -> AnalyticsCharts:
        orders_daily = await self.repository.count_per_day(Order)
        revenue_daily = await self.repository.revenue_per_day()
        users_daily = await self.repository.count_per_day(User)
        revenue_monthly = await self.repository.revenue_per_month()

        return AnalyticsCharts(
            orders_daily=[DailyCount(day=day, count=count) for day, count in orders_daily],
            revenue_daily=[DailyRevenue(day=day, revenue=revenue) for day, revenue in revenue_daily],
            users_daily=[DailyCount(day=day, count=count) for day, count in users_daily],
            revenue_monthly=[MonthlyRevenue(month=month, revenue=revenue) for month, revenue in revenue_monthly],
        )

    async def get_stats(self) -> AnalyticsStats:
        top_products = await self.repository.top_selling_products()

        return AnalyticsStats(
            total_users=await self.repository.count_users(),
            total_orders=await self.repository.count_orders(),
            total_revenue=await self.repository.total_revenue(),
            order_status_stats=[
                OrderStatusStat(status=status, count=count)
                for status, count in await self.repository.count_orders_by_status()
            ],
            product_categories=[
                ProductCategoryStat(category=category, count=count)
                for category, count in await self.repository.count_products_by_category()
            ],
            top_products=[
                TopProduct(product_id=product.id, sold=sold, product=ProductSummary.model_validate(product))
                for product, sold in top_products
            ],
        )

    async def get_dashboard(self) -> AnalyticsResponse:
        logger.info("[AnalyticsService] Calcul du tableau de bord admin.")
        charts = await self.get_charts()
        stats = await self.get_stats()
        logger.debug(
            f"[AnalyticsService] {stats.total_orders} commandes, {stats.total_users} utilisateurs, "
            f"CA {stats.total_revenue}."
        )
        return AnalyticsResponse(charts=charts, stats=stats)
