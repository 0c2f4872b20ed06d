"""
Module principal de l'application FastAPI Design Shop.

Ce module configure le logging, l'instance FastAPI, le middleware CORS, la
ressource base de données (``app.state.database``), les handlers d'exceptions
et les routeurs de l'API (authentification, commandes, analytics).
"""
import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from designshop.config import settings
from designshop.core.errors import register_exception_handlers
from designshop.database import DatabaseResource, get_database

# --- Importer les routeurs ---
from designshop.analytics.router import analytics_router
from designshop.auth.router import auth_router
from designshop.orders.router import order_router

# Configurer le logging
logging.basicConfig(level=settings.LOG_LEVEL.upper())
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database: DatabaseResource = app.state.database
    database.initialize()
    # Un échec ici n'empêche pas le démarrage : la connexion est retentée à la requête suivante
    if not await database.health_check():
        logger.error("Base de données injoignable au démarrage.")
    yield
    await database.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="API de gestion des commandes de design personnalisé et du tableau de bord admin.",
    version="1.0.0",
    lifespan=lifespan,
)

app.state.database = DatabaseResource(
    url=settings.database_url,
    echo=settings.DB_ECHO_LOG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)

register_exception_handlers(app)

# ======================================================
# Inclure les routeurs
# ======================================================
app.include_router(auth_router, prefix=f"{settings.API_PREFIX}/auth", tags=["Authentification"])
app.include_router(order_router, prefix=f"{settings.API_PREFIX}/orders", tags=["Orders"])
app.include_router(analytics_router, prefix=f"{settings.API_PREFIX}/admin", tags=["Analytics"])


@app.get(f"{settings.API_PREFIX}/health", tags=["Health"])
async def health_endpoint(database: Annotated[DatabaseResource, Depends(get_database)]):
    """Liveness et état de la connexion à la base de données."""
    db_ok = await database.health_check()
    return {
        "success": True,
        "status": "ok" if db_ok else "degraded",
        "database": "connected" if db_ok else "disconnected",
        "environment": settings.ENVIRONMENT,
    }
