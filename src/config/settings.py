# src/config/settings.py

"""Central configuration for the beauty_shop catalog."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the beauty_shop catalog."""

    # --- Catalog API ---
    CATALOG_BASE_URL: str = os.getenv(
        "BEAUTY_SHOP_CATALOG_URL",
        "https://makeup-api.herokuapp.com/",
    )
    PRODUCTS_ENDPOINT: str = "api/v1/products.json"
    REQUEST_TIMEOUT: int = 30           # Catalog payload is a few MB

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
    }

    # --- Catalog presentation ---
    FEATURED_PRODUCT_TYPES: tuple[str, ...] = (
        "foundation",
        "blush",
        "lipstick",
    )
    FALLBACK_SHADE_RGB: tuple[int, int, int] = (204, 204, 204)

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = Path(
        os.getenv("BEAUTY_SHOP_DATA_DIR", str(BASE_DIR / "data"))
    )
    LIKES_DB_PATH: Path = DATA_DIR / "likes.db"
    LOGS_DIR: Path = BASE_DIR / "logs"
