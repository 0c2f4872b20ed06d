import logging
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

# Charger les variables d'environnement AVANT de définir la classe Settings
load_dotenv()

DEFAULT_JWT_SECRET = "remplacer_par_une_vraie_cle_secrete_forte"


class Settings(BaseSettings):
    # --- Application ---
    PROJECT_NAME: str = "Design Shop API"
    ENVIRONMENT: str = "development"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:5174",
        "http://localhost:3000",
    ]

    # --- Pagination ---
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # --- Base de Données ---
    # DATABASE_URL prend le pas sur les variables POSTGRES_* si défini
    DATABASE_URL: Optional[str] = None
    POSTGRES_DB: str = "designshop"
    POSTGRES_USER: str = "designshop"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    DB_ECHO_LOG: bool = False
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10

    # --- JWT ---
    JWT_SECRET_KEY: str = DEFAULT_JWT_SECRET
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # --- Commandes ---
    ORDER_TAX_RATE: float = 0.10
    ORDER_ENFORCE_TRANSITIONS: bool = True

    # --- Messages Génériques ---
    SERVER_ERROR_MSG: str = "Internal server error"

    class Config:
        env_file = ".env"
        env_file_encoding = 'utf-8'
        extra = 'ignore'

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


settings = Settings()

if settings.JWT_SECRET_KEY == DEFAULT_JWT_SECRET:
    logger.warning("La variable JWT_SECRET_KEY utilise la valeur par défaut. Veuillez définir une clé secrète forte.")

logger.info(f"Configuration chargée: env={settings.ENVIRONMENT}, API prefix={settings.API_PREFIX}")
