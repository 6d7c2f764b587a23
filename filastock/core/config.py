import logging
import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    database_url: str = os.getenv(
        "DATABASE_URL",
        "sqlite+aiosqlite:///./filastock.db"
    )
    database_echo: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"

    # Inventory settings
    low_stock_threshold: float = float(os.getenv("LOW_STOCK_THRESHOLD", "0.2"))
    default_color_code: str = os.getenv("DEFAULT_COLOR_CODE", "#CCCCCC")
    bulk_create_max: int = int(os.getenv("BULK_CREATE_MAX", "100"))
    catalog_cache_ttl: float = float(os.getenv("CATALOG_CACHE_TTL", "300"))

    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()


def configure_logging(level: str = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
