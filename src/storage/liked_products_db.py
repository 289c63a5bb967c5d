# src/storage/liked_products_db.py

"""SQLite-backed Preference Store for liked product ids."""

import asyncio
import logging
import sqlite3
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

logger = logging.getLogger("beauty_shop.likes")

_SCHEMA = """\
CREATE TABLE IF NOT EXISTS liked_products (
    id       INTEGER PRIMARY KEY,
    liked_at TEXT    NOT NULL
);
"""


class PreferenceStore(ABC):
    """Persistent set of liked product ids with a change stream."""

    @abstractmethod
    async def like_product(self, product_id: int) -> None: ...

    @abstractmethod
    async def unlike_product(self, product_id: int) -> None: ...

    @abstractmethod
    def watch_liked_ids(self) -> AsyncIterator[frozenset[int]]:
        """Yield the full liked set now, then again after every change."""
        ...


class LikedProductsDB(PreferenceStore):
    """Liked ids stored in SQLite, surviving process restarts.

    Writes run in a worker thread.  Once a write has changed a row the
    new full set is pushed to every active watcher from the event loop.
    """

    def __init__(
        self, db_path: Path | None = None,
    ) -> None:
        path = db_path or Settings.LIKES_DB_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(
            str(path), check_same_thread=False,
        )
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.executescript(_SCHEMA)
        self._watchers: list[asyncio.Queue[frozenset[int]]] = []
        logger.debug("LikedProductsDB opened at %s", path)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    # ── Reading ──────────────────────────────────────────

    def get_liked_ids(self) -> frozenset[int]:
        """Return the current set of liked product ids."""
        rows = self._conn.execute(
            "SELECT id FROM liked_products",
        ).fetchall()
        return frozenset(r[0] for r in rows)

    async def watch_liked_ids(self) -> AsyncIterator[frozenset[int]]:
        queue: asyncio.Queue[frozenset[int]] = asyncio.Queue()
        self._watchers.append(queue)
        try:
            yield self.get_liked_ids()
            while True:
                yield await queue.get()
        finally:
            self._watchers.remove(queue)

    # ── Writing ──────────────────────────────────────────

    async def like_product(self, product_id: int) -> None:
        changed = await asyncio.to_thread(self._insert, product_id)
        if changed:
            logger.info("Liked product %d", product_id)
            self._publish()

    async def unlike_product(self, product_id: int) -> None:
        changed = await asyncio.to_thread(self._delete, product_id)
        if changed:
            logger.info("Unliked product %d", product_id)
            self._publish()

    def _insert(self, product_id: int) -> bool:
        cur = self._conn.execute(
            "INSERT OR IGNORE INTO liked_products (id, liked_at) "
            "VALUES (?, ?)",
            (product_id, datetime.now().isoformat()),
        )
        self._conn.commit()
        return cur.rowcount > 0

    def _delete(self, product_id: int) -> bool:
        cur = self._conn.execute(
            "DELETE FROM liked_products WHERE id = ?",
            (product_id,),
        )
        self._conn.commit()
        return cur.rowcount > 0

    def _publish(self) -> None:
        snapshot = self.get_liked_ids()
        for queue in self._watchers:
            queue.put_nowait(snapshot)
        logger.debug(
            "Published %d liked ids to %d watchers",
            len(snapshot),
            len(self._watchers),
        )
