# storefront/utils/settings.py
import os
from decimal import Decimal
from dotenv import load_dotenv

load_dotenv()


def _optional_float(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    return float(raw)


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./storefront.db")
STORE_URL = os.getenv("STORE_URL", "http://localhost:8000")
# brak timeoutu domyslnie, zawieszone zapytanie wisi razem z akcja
STORE_TIMEOUT_SECONDS = _optional_float("STORE_TIMEOUT_SECONDS")
CATALOG_TIMEOUT_SECONDS = float(os.getenv("CATALOG_TIMEOUT_SECONDS", 5))
FEATURED_PRODUCTS_LIMIT = int(os.getenv("FEATURED_PRODUCTS_LIMIT", 4))
FREE_SHIPPING_THRESHOLD = Decimal(os.getenv("FREE_SHIPPING_THRESHOLD", "150"))
SHIPPING_FEE = Decimal(os.getenv("SHIPPING_FEE", "15.00"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
