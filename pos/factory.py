"""Storage backend selection at startup."""

from __future__ import annotations

import logging
from pathlib import Path

from pos.config import DB_PATH, SUPABASE_ANON_KEY, SUPABASE_URL, is_remote_configured
from pos.persistence import LocalBackend
from pos.remote import RemoteBackend
from pos.storage import StorageBackend

logger = logging.getLogger(__name__)


async def open_backend(
    url: str | None = None,
    key: str | None = None,
    db_path: str | Path = DB_PATH,
) -> StorageBackend:
    """Pick the storage backend once, at startup: realtime when configured, else local."""
    url = SUPABASE_URL if url is None else url
    key = SUPABASE_ANON_KEY if key is None else key
    if is_remote_configured(url, key):
        return await RemoteBackend.connect(url, key)
    logger.info("backend_selected kind=local db_path=%s", db_path)
    return LocalBackend(db_path)
