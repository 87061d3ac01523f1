"""Persistence layer for articles."""

from .articles import ArticleStore

__all__ = ["ArticleStore"]
