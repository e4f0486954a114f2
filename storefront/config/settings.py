# storefront/config/settings.py

"""Central configuration for the storefront cart engine."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the storefront cart engine."""

    # --- Persistence ---
    CART_STORAGE_KEY: str = "cedar_phoenix_cart"
    WISHLIST_STORAGE_KEY: str = "cedar_phoenix_wishlist"

    # --- Catalog API ---
    API_BASE_URL: str = os.getenv(
        "STOREFRONT_API_URL", "http://localhost:3000/api"
    )
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    REQUEST_DELAY: float = 1.0          # Base backoff between retries
    MAX_RETRIES: int = 3                # Retry count on transient failures
    CATALOG_PAGE_SIZE: int = 100        # Products per page when listing

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
        "Content-Type": "application/json",
    }

    # --- Display ---
    CURRENCY: str = "USD"

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    STORAGE_DIR: Path = Path(
        os.getenv("STOREFRONT_STORAGE_DIR", str(BASE_DIR / "data"))
    )
    LOGS_DIR: Path = BASE_DIR / "logs"
