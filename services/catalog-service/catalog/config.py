# services/catalog-service/catalog/config.py
from __future__ import annotations

import os

from pydantic_settings import BaseSettings, SettingsConfigDict


def _as_bool(v: str | None, default: bool = False) -> bool:
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "yes", "on"}


class Settings(BaseSettings):
    # Service
    service_name: str = os.getenv("SERVICE_NAME", "catalog-service")
    app_port: int = int(os.getenv("APP_PORT", "9030"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Mongo
    mongo_uri: str = os.getenv("MONGODB_URI") or os.getenv("MONGO_URI") or "mongodb://localhost:27017"
    mongo_db: str = os.getenv("MONGO_DB", "library")
    mongo_connect_timeout_ms: int = int(os.getenv("MONGO_CONNECT_TIMEOUT_MS", "10000"))
    mongo_server_selection_timeout_ms: int = int(os.getenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "10000"))
    mongo_socket_timeout_ms: int = int(os.getenv("MONGO_SOCKET_TIMEOUT_MS", "45000"))

    # Seeding
    seed_on_start: bool = _as_bool(os.getenv("SEED_ON_START"), default=False)

    # Presentation clients talk to the API over HTTP
    catalog_api_url: str = os.getenv("CATALOG_API_URL", "http://localhost:9030")
    http_client_timeout_seconds: float = float(os.getenv("HTTP_CLIENT_TIMEOUT_SECONDS", "30"))

    model_config = SettingsConfigDict(env_file=None, extra="ignore")


settings = Settings()
