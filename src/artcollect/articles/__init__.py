"""Article model, list synchronization, and confirmed delete flows."""

from .types import Article, new_article_id, parse_article_id, title_from_url
from .synchronizer import ListSynchronizer
from .delete import (
    ConfirmedMutationFlow,
    FlowSnapshot,
    FlowState,
    list_delete_flow,
    single_delete_flow,
)

__all__ = [
    "Article",
    "ConfirmedMutationFlow",
    "FlowSnapshot",
    "FlowState",
    "ListSynchronizer",
    "list_delete_flow",
    "new_article_id",
    "parse_article_id",
    "single_delete_flow",
    "title_from_url",
]
