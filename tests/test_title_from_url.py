from __future__ import annotations

import uuid

import pytest

from artcollect.articles import Article, parse_article_id, title_from_url


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        (
            "https://www.nasa.gov/centers-and-facilities/stennis/stennis-first-open-source-software/",
            "www.nasa.gov - stennis-first-open-source-software",
        ),
        ("https://github.com/mrkline/modern-latex", "github.com - modern-latex"),
        ("http://github.com/mrkline/modern-latex", "github.com - modern-latex"),
        ("https://example.com", "example.com"),
        ("https://example.com/", "example.com"),
        ("example.com/example.com", "example.com"),
    ],
)
def test_title_from_url(url, expected):
    assert title_from_url(url) == expected


def test_article_path_uses_uuid():
    article = Article.from_parts("title", "https://example.com")
    assert article.path == "/articles/{0}".format(article.uuid)
    assert article.as_dict()["uuid"] == str(article.uuid)


def test_parse_article_id():
    value = uuid.uuid4()
    assert parse_article_id(str(value)) == value
    assert parse_article_id(value) is value

    with pytest.raises(ValueError):
        parse_article_id("not-a-uuid")
    with pytest.raises(ValueError):
        parse_article_id("")
