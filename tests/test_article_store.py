from __future__ import annotations

import asyncio
import uuid

import pytest

from artcollect.articles import Article
from artcollect.client import ArticlesClientError, LocalArticlesClient, parse_article_lines
from artcollect.store import ArticleStore


def test_store_keeps_insertion_order_and_deletes(tmp_path):
    store = ArticleStore(tmp_path / "data" / "articles.db")
    first = Article.from_parts("first", "https://example.com/1")
    second = Article.from_parts("second", "https://example.com/2")

    assert store.insert_many([first, second]) == 2
    assert store.all() == [first, second]
    assert store.one(second.uuid) == second
    assert store.count() == 2

    assert store.delete(first.uuid) is True
    assert store.delete(first.uuid) is False
    assert store.one(first.uuid) is None
    assert store.all() == [second]
    store.close()


def test_store_persists_between_connections(tmp_path):
    db_path = tmp_path / "articles.db"
    article = Article.from_parts("kept", "https://example.com/kept")

    store = ArticleStore(db_path)
    store.insert_many([article])
    store.close()

    reopened = ArticleStore(db_path)
    assert reopened.all() == [article]
    reopened.close()


def test_insert_many_with_nothing_is_a_noop(tmp_path):
    store = ArticleStore(tmp_path / "articles.db")
    assert store.insert_many([]) == 0
    assert store.count() == 0
    store.close()


def test_parse_article_lines_skips_blank_lines():
    articles = parse_article_lines("https://github.com/mrkline/modern-latex\n\n   \nhttp://example.com/a\n")

    assert [item.title for item in articles] == ["github.com - modern-latex", "example.com - a"]
    assert len({item.uuid for item in articles}) == 2


def test_local_client_round_trip(tmp_path):
    async def _run() -> None:
        client = LocalArticlesClient(ArticleStore(tmp_path / "articles.db"))

        added = await client.add_from_text("https://example.com/one\nhttps://example.com/two")
        assert len(added) == 2
        assert await client.fetch_all() == added
        assert await client.fetch_one(added[0].uuid) == added[0]

        assert await client.delete(added[0].uuid) is True
        # Deleting an id that is already gone still succeeds.
        assert await client.delete(added[0].uuid) is False
        assert await client.fetch_all() == [added[1]]
        assert await client.add_from_text("\n\n") == []

    asyncio.run(_run())


def test_local_client_wraps_sqlite_errors(tmp_path):
    async def _run() -> None:
        store = ArticleStore(tmp_path / "articles.db")
        client = LocalArticlesClient(store)
        store.close()

        with pytest.raises(ArticlesClientError) as exc_info:
            await client.delete(uuid.uuid4())
        assert "delete failed" in str(exc_info.value)

    asyncio.run(_run())
