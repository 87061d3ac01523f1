"""Asynchronous data source used by views to load and mutate articles."""

from __future__ import annotations

import asyncio
import sqlite3
import uuid
from typing import Callable, List, Optional, Protocol, TypeVar

from artcollect.articles.types import Article, title_from_url
from artcollect.store.articles import ArticleStore

T = TypeVar("T")


class ArticlesClientError(RuntimeError):
    """Raised when the article data source cannot complete a request."""


class ArticlesClient(Protocol):
    async def fetch_all(self) -> List[Article]:
        ...

    async def fetch_one(self, article_id: uuid.UUID) -> Optional[Article]:
        ...

    async def delete(self, article_id: uuid.UUID) -> bool:
        ...

    async def add_from_text(self, file_contents: str) -> List[Article]:
        ...


def parse_article_lines(file_contents: str) -> List[Article]:
    """One URL per line; blank lines are skipped."""

    articles: List[Article] = []
    for line in str(file_contents or "").splitlines():
        url = line.strip()
        if not url:
            continue
        articles.append(Article.from_parts(title_from_url(url), url))
    return articles


class LocalArticlesClient:
    """Runs :class:`ArticleStore` calls off the event loop thread."""

    def __init__(self, store: ArticleStore) -> None:
        self._store = store

    async def fetch_all(self) -> List[Article]:
        return await self._call("fetch_all", self._store.all)

    async def fetch_one(self, article_id: uuid.UUID) -> Optional[Article]:
        return await self._call("fetch_one", lambda: self._store.one(article_id))

    async def delete(self, article_id: uuid.UUID) -> bool:
        # Deleting an id that is already gone is not an error.
        return await self._call("delete", lambda: self._store.delete(article_id))

    async def add_from_text(self, file_contents: str) -> List[Article]:
        articles = parse_article_lines(file_contents)
        if not articles:
            return []
        await self._call("add", lambda: self._store.insert_many(articles))
        return articles

    async def _call(self, operation: str, fn: Callable[[], T]) -> T:
        try:
            return await asyncio.to_thread(fn)
        except sqlite3.Error as exc:
            raise ArticlesClientError("{0} failed: {1}".format(operation, exc)) from exc
