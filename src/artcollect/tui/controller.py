"""Controller layer for the artcollect Textual UI."""

from __future__ import annotations

import uuid
from pathlib import Path
from typing import List, Optional

from artcollect.actions.busy import busy_snapshot
from artcollect.articles.delete import ConfirmedMutationFlow
from artcollect.articles.synchronizer import ListSynchronizer
from artcollect.articles.types import Article
from artcollect.client import ArticlesClientError
from artcollect.config import load_settings
from artcollect.dialog.controller import DialogController
from artcollect.kernel.runtime import Runtime
from artcollect.navigation import Navigator
from artcollect.tui.types import ListStatus
from artcollect.ui.render import render_notice

READY_PHASE = "Ready"
LOADING_PHASE = "Loading..."


class ArticlesController:
    """Owns runtime and list state for one TUI process."""

    def __init__(
        self,
        workspace_dir: Optional[Path] = None,
        runtime: Optional[Runtime] = None,
    ) -> None:
        self._runtime = runtime or Runtime(load_settings(workspace_dir=workspace_dir))
        self._articles = ListSynchronizer(event_sink=self._runtime.event_sink("list"))
        self._list_delete = self._runtime.new_list_delete_flow(self._articles)
        self._phase = READY_PHASE
        self._load_error = ""

    @property
    def runtime(self) -> Runtime:
        return self._runtime

    @property
    def articles(self) -> ListSynchronizer:
        return self._articles

    @property
    def dialog(self) -> DialogController:
        return self._runtime.dialog

    @property
    def navigator(self) -> Navigator:
        return self._runtime.navigator

    @property
    def list_delete(self) -> ConfirmedMutationFlow:
        return self._list_delete

    def status(self) -> ListStatus:
        busy = busy_snapshot(self._list_delete)
        return ListStatus(
            article_count=len(self._articles),
            phase=self._phase,
            busy_text=busy.text,
            last_error=self._list_delete.last_error or self._load_error,
        )

    async def load_articles(self) -> List[Article]:
        self._phase = LOADING_PHASE
        try:
            articles = await self._runtime.client.fetch_all()
        except ArticlesClientError as exc:
            self._load_error = str(exc)
            self._runtime.log_diagnostic(
                level="error",
                component="tui",
                kind="load",
                message="failed to load articles",
                data={"error": str(exc)},
            )
            raise
        finally:
            self._phase = READY_PHASE
        self._load_error = ""
        self._articles.replace_all(articles)
        return articles

    async def load_article(self, article_id: uuid.UUID) -> Optional[Article]:
        cached = self._articles.get(article_id)
        if cached is not None:
            return cached
        return await self._runtime.client.fetch_one(article_id)

    async def add_articles(self, file_contents: str) -> str:
        if not str(file_contents or "").strip():
            return render_notice("warn", "nothing to add")
        try:
            added = await self._runtime.client.add_from_text(file_contents)
        except ArticlesClientError as exc:
            return render_notice("error", str(exc))
        for article in added:
            self._articles.append(article)
        self._runtime.log_diagnostic(
            level="info",
            component="tui",
            kind="add",
            message="articles added",
            data={"count": len(added)},
        )
        return render_notice("success", "added {0} article(s)".format(len(added)))

    def request_delete(self, article_id: uuid.UUID) -> None:
        self._list_delete.request_confirmation(article_id)

    def new_detail_delete_flow(self) -> ConfirmedMutationFlow:
        return self._runtime.new_single_delete_flow()

    def open_article(self, article_id: uuid.UUID) -> None:
        self.navigator.navigate_to("/articles/{0}".format(article_id))

    def close(self) -> None:
        self._list_delete.close()
        self._runtime.close()
