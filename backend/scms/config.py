import logging
from typing import List, Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Charger les variables d'environnement AVANT de définir la classe Settings
load_dotenv()


class Settings(BaseSettings):
    # --- Application ---
    APP_NAME: str = "SCMS API"
    API_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:8080",
    ]

    # --- Base de Données ---
    POSTGRES_DB: str = "scms"
    POSTGRES_USER: str = "scms"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    DATABASE_URL: Optional[str] = None
    DB_ECHO_LOG: bool = False
    # Crée les tables au démarrage (développement uniquement)
    DB_CREATE_TABLES_ON_STARTUP: bool = False

    # --- Devis ---
    QUOTATION_VALIDITY_DAYS: int = 30
    # Si True, le statut d'un devis déjà converti en commande est figé
    FREEZE_QUOTATION_STATUS_AFTER_ORDER: bool = False

    # --- Commandes ---
    SHIPPING_ADDRESS_MIN_LENGTH: int = 5
    SHIPPING_ADDRESS_MAX_LENGTH: int = 255

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )


settings = Settings()

if not settings.DATABASE_URL and not settings.POSTGRES_PASSWORD:
    logger.warning("POSTGRES_PASSWORD n'est pas définie, la connexion PostgreSQL risque d'échouer.")

logger.info(f"Configuration chargée: DB={settings.POSTGRES_DB}@{settings.POSTGRES_HOST}, validité devis={settings.QUOTATION_VALIDITY_DAYS}j")
