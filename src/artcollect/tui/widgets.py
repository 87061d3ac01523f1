"""Textual widgets for the artcollect UI."""

from __future__ import annotations

from typing import Callable, Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, ListItem, Static

from artcollect.actions.busy import BusyAction, busy_snapshot
from artcollect.articles.types import Article
from artcollect.dialog.controller import DialogController
from artcollect.tui.types import ListStatus
from artcollect.ui.render import format_article_url


class StatusBar(Static):
    """Top status bar: article count | phase | busy text."""

    def set_status(self, status: ListStatus) -> None:
        parts = ["[b]Articles Collect[/b]", "{0} article(s)".format(status.article_count), status.phase]
        if status.busy_text:
            parts.append("[yellow]{0}[/yellow]".format(status.busy_text))
        self.update("  [dim]|[/dim]  ".join(parts))


class ErrorLine(Static):
    """Shows the last failed mutation; hidden when there is none."""

    def set_error(self, text: str) -> None:
        self.display = bool(text)
        self.update("[red]{0}[/red]".format(text) if text else "")


class BusyOverlay(Static):
    """Overlay text bound to any busy action, or to nothing."""

    def __init__(self, action: Optional[BusyAction] = None, **kwargs) -> None:
        super().__init__("", **kwargs)
        self._action = action

    def refresh_busy(self) -> None:
        snapshot = busy_snapshot(self._action)
        self.display = snapshot.busy
        self.update(snapshot.text)


class ArticleListItem(ListItem):
    """One row of the article list."""

    def __init__(self, article: Article) -> None:
        super().__init__(
            Vertical(
                Label("[b]{0}[/b]".format(article.title)),
                Label("[blue]{0}[/blue]".format(format_article_url(article.url))),
            )
        )
        self.article = article


class ConfirmDialogScreen(ModalScreen[None]):
    """Global confirmation dialog rendered from the shared controller slot."""

    BINDINGS = [("escape", "close_dialog", "Close")]

    def __init__(self, dialog: DialogController) -> None:
        super().__init__()
        self._dialog = dialog
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._dismissed = False

    def compose(self) -> ComposeResult:
        yield Vertical(
            Horizontal(
                Static(self._dialog.title_text(), id="dialog-title"),
                Button("x", id="dialog-close"),
                id="dialog-header",
            ),
            Static(self._dialog.body_text(), id="dialog-body"),
            Horizontal(
                Button(self._dialog.decline_label(), variant="default", id="dialog-decline"),
                Button(self._dialog.confirm_label(), variant="error", id="dialog-confirm"),
                id="dialog-buttons",
            ),
            id="dialog-box",
        )

    def on_mount(self) -> None:
        self._unsubscribe = self._dialog.subscribe(self._on_dialog_changed)

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def action_close_dialog(self) -> None:
        self._dialog.close()
        self._on_dialog_changed()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id == "dialog-confirm":
            self._dialog.confirm()
        elif button_id == "dialog-decline":
            self._dialog.decline()
        else:
            self._dialog.close()
        self._on_dialog_changed()

    def _on_dialog_changed(self) -> None:
        if self._dismissed:
            return
        if self._dialog.is_closed():
            self._finish()
            return
        # A newer request replaced the one on screen.
        self.query_one("#dialog-title", Static).update(self._dialog.title_text())
        self.query_one("#dialog-body", Static).update(self._dialog.body_text())
        self.query_one("#dialog-decline", Button).label = self._dialog.decline_label()
        self.query_one("#dialog-confirm", Button).label = self._dialog.confirm_label()

    def _finish(self) -> None:
        if self._dismissed:
            return
        self._dismissed = True
        self.dismiss(None)
