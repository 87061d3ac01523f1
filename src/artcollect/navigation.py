"""Path-based navigation shared by the TUI screens."""

from __future__ import annotations

import re
import uuid
from collections import deque
from dataclasses import dataclass
from typing import Callable, List, Optional

from artcollect.kernel.types import EventSink

LIST_PATH = "/"
ARTICLES_PATH = "/articles"
ADD_PATH = "/articles/add"
HISTORY_LIMIT = 50

_ARTICLE_PATH_RE = re.compile(r"^/articles/([0-9a-fA-F-]{32,36})/?$")

NavigationListener = Callable[[str], None]


@dataclass(frozen=True)
class Route:
    """Resolved screen for a path."""

    name: str
    article_id: Optional[uuid.UUID] = None


def resolve_route(path: str) -> Route:
    normalized = str(path or LIST_PATH).strip() or LIST_PATH
    if normalized in {LIST_PATH, ARTICLES_PATH, ARTICLES_PATH + "/"}:
        return Route(name="list")
    if normalized.rstrip("/") == ADD_PATH:
        return Route(name="add")
    match = _ARTICLE_PATH_RE.match(normalized)
    if match is not None:
        try:
            return Route(name="article", article_id=uuid.UUID(match.group(1)))
        except ValueError:
            return Route(name="not_found")
    return Route(name="not_found")


class Navigator:
    """Records recent paths (oldest dropped first) and tells listeners about changes."""

    def __init__(
        self,
        initial: str = LIST_PATH,
        event_sink: Optional[EventSink] = None,
        history_limit: int = HISTORY_LIMIT,
    ) -> None:
        self._history: "deque[str]" = deque([initial], maxlen=max(1, int(history_limit)))
        self._listeners: List[NavigationListener] = []
        self._event_sink = event_sink

    @property
    def current(self) -> str:
        return self._history[-1]

    @property
    def history(self) -> List[str]:
        return list(self._history)

    def navigate_to(self, path: str) -> None:
        target = str(path or LIST_PATH)
        self._history.append(target)
        if self._event_sink is not None:
            try:
                self._event_sink("navigation.changed", {"path": target})
            except Exception:
                pass
        for listener in list(self._listeners):
            listener(target)

    def subscribe(self, listener: NavigationListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe
