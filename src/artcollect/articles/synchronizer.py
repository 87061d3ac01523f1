"""Ordered, identifier-keyed article collection kept in sync with mutations."""

from __future__ import annotations

import uuid
from collections import OrderedDict
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional

from artcollect.actions.pending import ActionResult, PendingAction
from artcollect.articles.types import Article
from artcollect.kernel.types import EventSink, Listener


class ListSynchronizer:
    """In-memory list view of articles.

    Insertion order is display order. After a delete resolves successfully for
    ``k`` exactly the entry keyed ``k`` is dropped; failed resolutions leave the
    sequence untouched. Mutation happens only through the methods below.
    """

    def __init__(
        self,
        articles: Optional[Iterable[Article]] = None,
        *,
        event_sink: Optional[EventSink] = None,
    ) -> None:
        self._items = self._build(articles or [])
        self._listeners: List[Listener] = []
        self._event_sink = event_sink

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[Article]:
        return iter(list(self._items.values()))

    def items(self) -> List[Article]:
        return list(self._items.values())

    def ids(self) -> List[uuid.UUID]:
        return list(self._items.keys())

    def get(self, key: uuid.UUID) -> Optional[Article]:
        return self._items.get(key)

    def replace_all(self, articles: Iterable[Article]) -> None:
        self._items = self._build(articles)
        self._emit("list.replaced", {"count": len(self._items)})
        self._notify()

    def append(self, article: Article) -> None:
        if article.uuid in self._items:
            raise ValueError("duplicate article id: {0}".format(article.uuid))
        self._items[article.uuid] = article
        self._emit("list.appended", {"uuid": str(article.uuid)})
        self._notify()

    def remove(self, key: uuid.UUID) -> bool:
        """Drop the entry keyed ``key``; an absent key is a no-op."""

        if key not in self._items:
            return False
        del self._items[key]
        self._emit("list.removed", {"uuid": str(key), "remaining": len(self._items)})
        self._notify()
        return True

    def apply_result(self, key: uuid.UUID, result: ActionResult[Any]) -> bool:
        if not result.ok:
            return False
        return self.remove(key)

    def bind(self, action: PendingAction[uuid.UUID, Any]) -> None:
        """Remove entries whenever ``action`` resolves successfully for them."""

        action.add_listener(self.apply_result)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    @staticmethod
    def _build(articles: Iterable[Article]) -> "OrderedDict[uuid.UUID, Article]":
        items: "OrderedDict[uuid.UUID, Article]" = OrderedDict()
        for article in articles:
            if article.uuid in items:
                raise ValueError("duplicate article id: {0}".format(article.uuid))
            items[article.uuid] = article
        return items

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _emit(self, event_type: str, payload: Dict[str, Any]) -> None:
        if self._event_sink is None:
            return
        try:
            self._event_sink(event_type, dict(payload))
        except Exception:
            return
