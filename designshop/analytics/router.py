import logging

from fastapi import APIRouter

from designshop.analytics.dependencies import AnalyticsServiceDep
from designshop.analytics.schemas import AnalyticsResponse
from designshop.auth.dependencies import CurrentAdmin

logger = logging.getLogger(__name__)

analytics_router = APIRouter()


@analytics_router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics_endpoint(service: AnalyticsServiceDep, current_admin: CurrentAdmin):
    """Données consolidées du tableau de bord admin (graphiques et statistiques)."""
    logger.debug(f"Tableau de bord demandé par admin {current_admin.id}.")
    return await service.get_dashboard()
