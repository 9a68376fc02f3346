"""
Configuration Settings

Centralized configuration management using Pydantic and environment variables.
"""
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


def _default_partitions() -> List[str]:
    """Spanish province codes 01..52."""
    return [str(code).zfill(2) for code in range(1, 53)]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Values can be overridden in a .env file at the project root.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # BOE auction portal
    boe_base_url: str = "https://subastas.boe.es"
    boe_search_url: str = "https://subastas.boe.es/subastas_ava.php"
    boe_page_hits: int = 500
    boe_partitions: List[str] = _default_partitions()
    boe_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    detail_user_agent: str = "Mozilla/5.0"
    http_timeout_seconds: int = 30

    # Geocoding (Nominatim)
    nominatim_url: str = "https://nominatim.openstreetmap.org/search"
    geocoder_user_agent: str = "SubastasEspanaPiAgent/1.0"
    geocode_country_codes: str = "es"
    geocode_country_name: str = "Spain"
    geocode_min_query_length: int = 10
    geocode_retry_skipped: bool = True

    # Pacing (seconds)
    discovery_delay_seconds: float = 0.5
    enrichment_delay_seconds: float = 1.0
    geocode_delay_seconds: float = 1.1
    geocode_error_cooldown_seconds: float = 2.0

    # Batch sizes
    enrichment_batch_size: int = 100
    export_limit: int = 1000

    # Snapshot artifact consumed by the viewer
    export_path: str = "docs/api/auctions.json"

    # Database settings
    database_url: str = "sqlite:///database.sqlite"
    database_pool_size: int = 5
    database_max_overflow: int = 10
    database_pool_timeout: int = 30
    database_pool_recycle: int = 3600
    database_echo: bool = False  # Set to True for SQL query logging

    # Logging settings
    log_level: str = "INFO"
    log_format: str = "json"

    # Application settings
    environment: str = "development"
    debug: bool = False


# Singleton instance
settings = Settings()
