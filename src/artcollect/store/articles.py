"""SQLite persistence for bookmarked articles."""

from __future__ import annotations

import sqlite3
import threading
import uuid
from pathlib import Path
from typing import Iterable, List, Optional

from artcollect.articles.types import Article
from artcollect.kernel.types import now_ms


class ArticleStore:
    """Persists articles keyed by their UUID, oldest first."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = db_path
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._init_db()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _init_db(self) -> None:
        with self._lock:
            self._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS articles (
                    uuid TEXT PRIMARY KEY,
                    title TEXT NOT NULL,
                    url TEXT NOT NULL,
                    created_at_ms INTEGER NOT NULL
                )
                """
            )
            self._conn.commit()

    def all(self) -> List[Article]:
        with self._lock:
            rows = self._conn.execute(
                "SELECT uuid, title, url FROM articles ORDER BY created_at_ms ASC, rowid ASC"
            ).fetchall()
        return [self._row_to_article(row) for row in rows]

    def one(self, article_id: uuid.UUID) -> Optional[Article]:
        with self._lock:
            row = self._conn.execute(
                "SELECT uuid, title, url FROM articles WHERE uuid = ?",
                (str(article_id),),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_article(row)

    def insert_many(self, articles: Iterable[Article]) -> int:
        ts = now_ms()
        rows = [(str(item.uuid), item.title, item.url, ts) for item in articles]
        if not rows:
            return 0
        with self._lock:
            self._conn.executemany(
                "INSERT INTO articles (uuid, title, url, created_at_ms) VALUES (?, ?, ?, ?)",
                rows,
            )
            self._conn.commit()
        return len(rows)

    def delete(self, article_id: uuid.UUID) -> bool:
        with self._lock:
            cursor = self._conn.execute(
                "DELETE FROM articles WHERE uuid = ?",
                (str(article_id),),
            )
            self._conn.commit()
        return cursor.rowcount > 0

    def count(self) -> int:
        with self._lock:
            row = self._conn.execute("SELECT COUNT(*) AS total FROM articles").fetchone()
        return int(row["total"] or 0)

    def close(self) -> None:
        self._conn.close()

    @staticmethod
    def _row_to_article(row: sqlite3.Row) -> Article:
        return Article(
            uuid=uuid.UUID(str(row["uuid"])),
            title=str(row["title"]),
            url=str(row["url"]),
        )
