"""
Ressource base de données partagée par le processus.

La ressource a un cycle de vie explicite :
- ``initialize()`` crée le moteur et la session factory une seule fois,
- ``health_check()`` vérifie la connexion et met à jour l'état,
- ``mark_invalid()`` est appelé quand une erreur de connexion remonte d'une requête.

Elle est attachée à ``app.state.database`` et injectée dans les handlers via
``get_database`` / ``get_db_session``.
"""
import logging
from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, Request
from sqlalchemy import text
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

from designshop.core.exceptions import DatabaseUnavailableException, DomainException

logger = logging.getLogger(__name__)


class DatabaseResource:
    """Moteur SQLAlchemy async et état de connexion du processus."""

    def __init__(
        self,
        url: str,
        echo: bool = False,
        pool_size: Optional[int] = None,
        max_overflow: Optional[int] = None,
    ):
        self.url = url
        self.echo = echo
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None
        self.is_connected = False

    @property
    def is_initialized(self) -> bool:
        return self.engine is not None

    def initialize(self) -> None:
        """Crée le moteur et la session factory. Sans effet si déjà fait."""
        if self.is_initialized:
            return

        engine_kwargs = {"echo": self.echo}
        # Les pools SQLite (mémoire) n'acceptent pas pool_size / max_overflow
        if not self.url.startswith("sqlite"):
            engine_kwargs["pool_pre_ping"] = True
            if self.pool_size is not None:
                engine_kwargs["pool_size"] = self.pool_size
            if self.max_overflow is not None:
                engine_kwargs["max_overflow"] = self.max_overflow

        self.engine = create_async_engine(self.url, **engine_kwargs)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("Moteur et session factory SQLAlchemy async configurés.")

    async def health_check(self) -> bool:
        """Exécute ``SELECT 1``. Met à jour ``is_connected`` et retourne le résultat."""
        self.initialize()
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            self.mark_invalid(str(e))
            return False
        if not self.is_connected:
            logger.info("Connexion à la base de données établie.")
        self.is_connected = True
        return True

    async def ensure_connected(self) -> None:
        """Relance un health check seulement si la connexion a été marquée invalide."""
        if self.is_connected:
            return
        if not await self.health_check():
            raise DatabaseUnavailableException()

    def mark_invalid(self, reason: Optional[str] = None) -> None:
        if self.is_connected:
            logger.warning(f"Connexion base de données marquée invalide: {reason}")
        else:
            logger.error(f"Base de données indisponible: {reason}")
        self.is_connected = False

    async def create_tables(self) -> None:
        """Crée toutes les tables SQLModel (utilisé au démarrage en dev et dans les tests)."""
        self.initialize()
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def dispose(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            logger.info("Moteur SQLAlchemy fermé.")
        self.engine = None
        self.session_factory = None
        self.is_connected = False


def get_database(request: Request) -> DatabaseResource:
    """Dépendance FastAPI : la ressource base de données de l'application."""
    return request.app.state.database


async def get_db_session(
    database: DatabaseResource = Depends(get_database),
) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that provides an async database session."""
    await database.ensure_connected()

    async with database.session_factory() as session:
        try:
            yield session
            # Les commits sont gérés par les repositories / services
        except (OperationalError, InterfaceError) as e:
            database.mark_invalid(str(e))
            await session.rollback()
            raise
        except (DomainException, HTTPException):
            await session.rollback()
            raise
        except Exception as e:
            logger.error(f"Erreur durant la session DB, rollback: {e}", exc_info=True)
            await session.rollback()
            raise
