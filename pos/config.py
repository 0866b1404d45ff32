"""Runtime configuration defaults for storage, realtime sync and logging."""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()

DB_PATH = os.getenv("POS_DB_PATH", "data/pos.db")

LOG_PATH = os.getenv("POS_LOG_PATH", "/tmp/pos-debug.log")
LOG_LEVEL = os.getenv("POS_LOG_LEVEL", "INFO")

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")

# Values shipped in the sample .env; treated as "not configured".
SUPABASE_URL_PLACEHOLDER = "YOUR_SUPABASE_URL"
SUPABASE_ANON_KEY_PLACEHOLDER = "YOUR_SUPABASE_ANON_KEY"

MENU_TABLE = "menu_items"
ORDERS_TABLE = "orders"

MENU_STORAGE_KEY = "pos_menu"
ORDERS_STORAGE_KEY = "pos_orders"

CURRENCY_PREFIX = "Rp"


def is_remote_configured(url: str | None = None, key: str | None = None) -> bool:
    """Return True when both Supabase credentials are set to real values."""
    url = SUPABASE_URL if url is None else url
    key = SUPABASE_ANON_KEY if key is None else key
    if not url or not key:
        return False
    return url != SUPABASE_URL_PLACEHOLDER and key != SUPABASE_ANON_KEY_PLACEHOLDER
