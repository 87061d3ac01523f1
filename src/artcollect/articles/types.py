"""Article entry model and URL title derivation."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Dict, Union


def new_article_id() -> uuid.UUID:
    return uuid.uuid4()


def parse_article_id(value: Union[str, uuid.UUID]) -> uuid.UUID:
    """Parse a user supplied identifier, raising ``ValueError`` when malformed."""

    if isinstance(value, uuid.UUID):
        return value
    text = str(value or "").strip()
    if not text:
        raise ValueError("article id is required")
    return uuid.UUID(text)


@dataclass(frozen=True)
class Article:
    """One bookmarked article."""

    uuid: uuid.UUID
    title: str
    url: str

    @classmethod
    def from_parts(cls, title: str, url: str) -> "Article":
        return cls(uuid=new_article_id(), title=str(title), url=str(url))

    @property
    def path(self) -> str:
        return "/articles/{0}".format(self.uuid)

    def as_dict(self) -> Dict[str, Any]:
        return {"uuid": str(self.uuid), "title": self.title, "url": self.url}


def title_from_url(url: str) -> str:
    """Build ``"<host> - <last path segment>"`` from a URL, or just the host."""

    text = str(url or "")
    if text.startswith("https://"):
        text = text[len("https://") :]
    elif text.startswith("http://"):
        text = text[len("http://") :]

    parts = text.split("/")
    first = parts[0]
    last = ""
    for part in reversed(parts[1:]):
        if part and part != first:
            last = part
            break

    if last:
        return "{0} - {1}".format(first, last)
    return first
