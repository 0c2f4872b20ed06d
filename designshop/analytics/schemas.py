from typing import List, Optional

from designshop.core.schemas import OrmBaseModel, SuccessResponse
from designshop.products.models import ProductSummary

# --- Graphiques ---

class DailyCount(OrmBaseModel):
    day: str
    count: int


class DailyRevenue(OrmBaseModel):
    day: str
    revenue: float


class MonthlyRevenue(OrmBaseModel):
    month: str
    revenue: float


class AnalyticsCharts(OrmBaseModel):
    orders_daily: List[DailyCount]
    revenue_daily: List[DailyRevenue]
    users_daily: List[DailyCount]
    revenue_monthly: List[MonthlyRevenue]


# --- Statistiques ---

class OrderStatusStat(OrmBaseModel):
    status: str
    count: int


class ProductCategoryStat(OrmBaseModel):
    category: Optional[str] = None
    count: int


class TopProduct(OrmBaseModel):
    product_id: int
    sold: int
    product: ProductSummary


class AnalyticsStats(OrmBaseModel):
    total_users: int
    total_orders: int
    total_revenue: float
    order_status_stats: List[OrderStatusStat]
    product_categories: List[ProductCategoryStat]
    top_products: List[TopProduct]


class AnalyticsResponse(SuccessResponse):
    charts: AnalyticsCharts
    stats: AnalyticsStats
