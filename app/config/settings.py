"""Application settings using Pydantic Settings."""

import logging
import os
from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from .collections import DATING_COLLECTION_CANDIDATES

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables.

    Frozen: the PII flag and connection target are fixed for the lifetime
    of the process.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", f".env.{os.getenv('APP_ENV', 'development')}"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    # Environment
    app_env: str = "development"  # development, staging, production

    # Application
    app_name: str = "NL Mongo Search"
    debug: bool = False

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    db_name: str = "mydb"
    mongo_timeout_ms: int = 5000

    # OpenAI (query translation)
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_timeout: float = 30.0
    openai_max_tokens: int = 1500

    # Privacy
    allow_pii: bool = False
    sensitive_fields: List[str] = ["Salary", "email"]

    # Search limits
    default_search_limit: int = 10
    max_search_limit: int = 100
    max_combined_limit: int = 30

    # Name matching on participants / partners
    name_match_enabled: bool = True
    name_match_limit: int = 100

    # Physical names tried in order for the dating collection
    dating_collection_names: List[str] = list(DATING_COLLECTION_CANDIDATES)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()

    # Log all settings on first load
    logger.info("=" * 50)
    logger.info("CONFIGURATION LOADED")
    logger.info("=" * 50)
    logger.info(f"APP_ENV: {settings.app_env}")
    logger.info(f"APP_NAME: {settings.app_name}")
    logger.info(f"DEBUG: {settings.debug}")
    logger.info(f"MONGO_URI: {settings.mongo_uri}")
    logger.info(f"DB_NAME: {settings.db_name}")
    logger.info(f"OPENAI_API_KEY: {'***' + settings.openai_api_key[-4:] if settings.openai_api_key else 'NOT SET'}")
    logger.info(f"OPENAI_MODEL: {settings.openai_model}")
    logger.info(f"ALLOW_PII: {settings.allow_pii}")
    logger.info(f"DEFAULT_SEARCH_LIMIT: {settings.default_search_limit}")
    logger.info(f"MAX_SEARCH_LIMIT: {settings.max_search_limit}")
    logger.info(f"MAX_COMBINED_LIMIT: {settings.max_combined_limit}")
    logger.info(f"NAME_MATCH_ENABLED: {settings.name_match_enabled}")
    logger.info(f"DATING_COLLECTION_NAMES: {settings.dating_collection_names}")
    logger.info("=" * 50)

    return settings
