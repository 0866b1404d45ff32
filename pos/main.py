"""Entry point for the outlet POS Textual app."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from pos.config import DB_PATH, LOG_LEVEL, LOG_PATH, SUPABASE_ANON_KEY, SUPABASE_URL
from pos.factory import open_backend
from pos.pos_app import PosApp
from pos.store import Store

logger = logging.getLogger("pos")


def configure_logging(path: str | Path = LOG_PATH, level: str = LOG_LEVEL) -> None:
    """Send the ``pos`` loggers to a file; the terminal belongs to the UI."""
    logger.setLevel(level.upper())
    logger.propagate = False
    if logger.handlers:
        return
    try:
        log_file = Path(path)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        # Logging must never interfere with app flow.
        handler = logging.NullHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)


async def run(url: str = SUPABASE_URL, key: str = SUPABASE_ANON_KEY, db_path: str | Path = DB_PATH) -> int | None:
    backend = await open_backend(url, key, db_path)
    store = Store(backend)
    logger.info("app_start realtime=%s", store.is_realtime)
    app = PosApp(store)
    await app.run_async()
    return app.return_code


def main() -> None:
    configure_logging()
    code = asyncio.run(run())
    raise SystemExit(code or 0)


if __name__ == "__main__":
    main()
