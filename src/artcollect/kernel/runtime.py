"""Runtime container wiring the store, dialog slot, navigation, and logging."""

from __future__ import annotations

from typing import Any, Dict, Optional

from artcollect.articles.delete import ConfirmedMutationFlow, list_delete_flow, single_delete_flow
from artcollect.articles.synchronizer import ListSynchronizer
from artcollect.client import LocalArticlesClient
from artcollect.config import Settings
from artcollect.dialog.controller import DialogController
from artcollect.kernel.debug_log import DebugLogStatus, DebugLogWriter
from artcollect.kernel.types import EventSink
from artcollect.navigation import Navigator
from artcollect.store.articles import ArticleStore


class Runtime:
    """Application root: owns exactly one dialog controller and one store."""

    core_version = "0.1.0"

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.debug_log = DebugLogWriter(
            logs_dir=settings.logs_dir,
            enabled=settings.logs_enabled,
            max_file_bytes=settings.logs_max_file_bytes,
            max_files=settings.logs_max_files,
            redaction=settings.logs_redaction,
        )
        self.store = ArticleStore(settings.db_path)
        self.client = LocalArticlesClient(self.store)
        self.dialog = DialogController(event_sink=self.event_sink("dialog"))
        self.navigator = Navigator(event_sink=self.event_sink("navigation"))

        self.log_diagnostic(
            level="info",
            component="runtime",
            kind="startup",
            message="runtime started",
            data={
                "core_version": self.core_version,
                "db_path": str(settings.db_path),
                "article_count": self.store.count(),
            },
        )

    def event_sink(self, component: str) -> EventSink:
        def _sink(event_type: str, payload: Dict[str, Any]) -> None:
            self.debug_log.write_event(component, event_type, payload)

        return _sink

    def log_diagnostic(
        self,
        *,
        level: str,
        component: str,
        kind: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.debug_log.write_diagnostic(level=level, component=component, kind=kind, message=message, data=data)

    def new_list_delete_flow(self, articles: ListSynchronizer) -> ConfirmedMutationFlow:
        return list_delete_flow(
            self.dialog,
            articles,
            self.client,
            event_sink=self.event_sink("flow"),
            **self._dialog_texts(),
        )

    def new_single_delete_flow(self, navigate_to: Optional[str] = None) -> ConfirmedMutationFlow:
        return single_delete_flow(
            self.dialog,
            self.client,
            self.navigator,
            navigate_to=navigate_to or self.settings.after_delete_path,
            event_sink=self.event_sink("flow"),
            **self._dialog_texts(),
        )

    def logs_status(self) -> DebugLogStatus:
        return self.debug_log.status()

    def close(self) -> None:
        self.log_diagnostic(level="info", component="runtime", kind="shutdown", message="runtime closed")
        self.store.close()

    def _dialog_texts(self) -> Dict[str, str]:
        return {
            "title": self.settings.delete_title,
            "body": self.settings.delete_body,
            "confirm_label": self.settings.confirm_label,
            "decline_label": self.settings.decline_label,
        }
