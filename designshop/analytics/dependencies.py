from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from designshop.analytics.repositories import SQLAlchemyAnalyticsRepository
from designshop.analytics.service import AnalyticsService
from designshop.database import get_db_session


def get_analytics_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)]
) -> SQLAlchemyAnalyticsRepository:
    return SQLAlchemyAnalyticsRepository(db_session=session)


def get_analytics_service(
    repository: Annotated[SQLAlchemyAnalyticsRepository, Depends(get_analytics_repository)]
) -> AnalyticsService:
    return AnalyticsService(repository=repository)


AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
