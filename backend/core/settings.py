"""Paramètres du service de suppression de profils.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings: magasin Firestore, noms de
  collections, taille de lot, authentification de l'appelant, journal d'audit.
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Limite d'écritures d'un WriteBatch Firestore
MAX_BATCH_SIZE = 500


def _resolve_env_file(cwd: Path) -> Path | str:
    explicit = os.getenv("ENV_FILE")
    if explicit:
        return explicit
    specific = cwd / f".env.{os.getenv('APP_ENV', 'dev')}"
    return specific if specific.exists() else cwd / ".env"


class Settings(BaseSettings):
    """Configuration chargée depuis l'environnement puis le fichier .env résolu."""

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file(Path.cwd()),
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )
    APP_NAME: str = "profile-purge"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = False
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000

    # Magasin de documents: "firestore" | "memory"
    STORE_BACKEND: str = "firestore"
    FIRESTORE_PROJECT_ID: str | None = None
    GOOGLE_APPLICATION_CREDENTIALS: str | None = None
    SERVICE_ACCOUNT_KEY_PATH: str | None = None

    # Modèle de données
    PROFILES_COLLECTION: str = "profiles"
    PRESENCES_COLLECTION: str = "streetpass_presences"
    NOTIFICATIONS_COLLECTION: str = "notifications"
    PURGE_BATCH_SIZE: int = Field(MAX_BATCH_SIZE, gt=0, le=MAX_BATCH_SIZE)

    # Authentification de l'appelant: "jwt" | "firebase"
    AUTH_BACKEND: str = "jwt"
    JWT_SECRET: str = "dev-secret-change-me"
    JWT_ALG: str = "HS256"
    JWT_EXPIRES_MIN: int = 60

    # Journal d'audit des suppressions (NDJSON)
    AUDIT_ENABLED: bool = True
    AUDIT_DIR: str = "artifacts/audit"


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
