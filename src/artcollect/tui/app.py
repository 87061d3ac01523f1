"""Textual application for browsing and deleting bookmarked articles."""

from __future__ import annotations

import uuid
import webbrowser
from pathlib import Path
from typing import Callable, List, Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import Screen
from textual.widgets import Button, Footer, ListView, Static, TextArea

from artcollect.articles.delete import ConfirmedMutationFlow
from artcollect.articles.types import Article
from artcollect.client import ArticlesClientError
from artcollect.navigation import ADD_PATH, LIST_PATH, resolve_route
from artcollect.tui.controller import ArticlesController
from artcollect.tui.widgets import (
    ArticleListItem,
    BusyOverlay,
    ConfirmDialogScreen,
    ErrorLine,
    StatusBar,
)
from artcollect.ui.render import format_article_url, render_not_found


class ArticleListScreen(Screen[None]):
    """All articles; delete goes through the shared confirmation dialog."""

    BINDINGS = [
        Binding("d", "delete_article", "Delete"),
        Binding("o", "open_in_browser", "Open URL"),
        Binding("a", "add_articles", "Add"),
        Binding("r", "reload", "Reload"),
    ]

    def __init__(self, controller: ArticlesController) -> None:
        super().__init__()
        self._controller = controller
        self._unsubscribers: List[Callable[[], None]] = []

    def compose(self) -> ComposeResult:
        yield Vertical(
            StatusBar(id="status"),
            ErrorLine(id="error-line"),
            ListView(id="article-list"),
            Footer(),
        )

    async def on_mount(self) -> None:
        self._unsubscribers.append(self._controller.articles.subscribe(self._schedule_refresh))
        self._unsubscribers.append(self._controller.list_delete.subscribe(self._refresh_status))
        await self.reload()

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    async def reload(self) -> None:
        try:
            await self._controller.load_articles()
        except ArticlesClientError as exc:
            self.notify(str(exc), severity="error")
        await self._refresh_list()

    async def action_reload(self) -> None:
        await self.reload()

    def action_delete_article(self) -> None:
        article = self._highlighted_article()
        if article is None:
            return
        self._controller.request_delete(article.uuid)

    def action_open_in_browser(self) -> None:
        article = self._highlighted_article()
        if article is None:
            return
        webbrowser.open(article.url)

    def action_add_articles(self) -> None:
        self._controller.navigator.navigate_to(ADD_PATH)

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        item = event.item
        if isinstance(item, ArticleListItem):
            self._controller.open_article(item.article.uuid)

    def _highlighted_article(self) -> Optional[Article]:
        item = self.query_one("#article-list", ListView).highlighted_child
        if isinstance(item, ArticleListItem):
            return item.article
        return None

    def _schedule_refresh(self) -> None:
        self.call_later(self._refresh_list)

    async def _refresh_list(self) -> None:
        list_view = self.query_one("#article-list", ListView)
        index = list_view.index
        await list_view.clear()
        await list_view.extend([ArticleListItem(article) for article in self._controller.articles])
        if index is not None and len(list_view.children):
            list_view.index = min(index, len(list_view.children) - 1)
        self._refresh_status()

    def _refresh_status(self) -> None:
        status = self._controller.status()
        self.query_one("#status", StatusBar).set_status(status)
        self.query_one("#error-line", ErrorLine).set_error(status.last_error)


class ArticleDetailScreen(Screen[None]):
    """Single article view; a confirmed delete navigates back to the list."""

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("d", "delete_article", "Delete"),
        Binding("o", "open_in_browser", "Open URL"),
    ]

    def __init__(self, controller: ArticlesController, article_id: uuid.UUID) -> None:
        super().__init__()
        self._controller = controller
        self._article_id = article_id
        self._article: Optional[Article] = None
        self._flow: ConfirmedMutationFlow = controller.new_detail_delete_flow()
        self._unsubscribe: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        yield Vertical(
            Horizontal(Button("<-", id="back"), id="detail-nav"),
            BusyOverlay(self._flow, id="busy"),
            Static("Loading.....", id="detail-title"),
            Static("", id="detail-url"),
            ErrorLine(id="error-line"),
            Horizontal(
                Button("open", id="open"),
                Button("delete", variant="error", id="delete"),
                id="detail-actions",
            ),
            Footer(),
        )

    async def on_mount(self) -> None:
        self._unsubscribe = self._flow.subscribe(self._refresh_flow)
        self._refresh_flow()
        try:
            self._article = await self._controller.load_article(self._article_id)
        except ArticlesClientError as exc:
            self.notify(str(exc), severity="error")
        if self._article is None:
            self.query_one("#detail-title", Static).update("Not Found ;(")
            self.query_one("#detail-url", Static).update(render_not_found(self._article_id))
            self.query_one("#detail-actions", Horizontal).display = False
            return
        self.query_one("#detail-title", Static).update("[b]{0}[/b]".format(self._article.title))
        self.query_one("#detail-url", Static).update(
            "[blue]{0}[/blue]".format(format_article_url(self._article.url))
        )

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._flow.close()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id or ""
        if button_id == "back":
            self.action_back()
        elif button_id == "open":
            self.action_open_in_browser()
        elif button_id == "delete":
            self.action_delete_article()

    def action_back(self) -> None:
        self._controller.navigator.navigate_to(LIST_PATH)

    def action_delete_article(self) -> None:
        if self._article is None:
            return
        self._flow.request_confirmation(self._article.uuid)

    def action_open_in_browser(self) -> None:
        if self._article is None:
            return
        webbrowser.open(self._article.url)

    def _refresh_flow(self) -> None:
        self.query_one("#busy", BusyOverlay).refresh_busy()
        self.query_one("#error-line", ErrorLine).set_error(self._flow.last_error)


class AddArticlesScreen(Screen[None]):
    """Paste a list of URLs, one per line."""

    BINDINGS = [Binding("escape", "back", "Back")]

    def __init__(self, controller: ArticlesController) -> None:
        super().__init__()
        self._controller = controller

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Upload List of Articles", id="add-title"),
            TextArea(id="add-input"),
            Horizontal(
                Button("<-", id="back"),
                Button("Send", variant="success", id="send"),
                id="add-actions",
            ),
            Footer(),
        )

    def on_mount(self) -> None:
        self.query_one("#add-input", TextArea).focus()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "back":
            self.action_back()
            return
        if event.button.id != "send":
            return
        text_area = self.query_one("#add-input", TextArea)
        message = await self._controller.add_articles(text_area.text)
        self.notify(message)
        text_area.load_text("")
        self._controller.navigator.navigate_to(LIST_PATH)

    def action_back(self) -> None:
        self._controller.navigator.navigate_to(LIST_PATH)


class ArticlesApp(App[None]):
    """Article list, detail, and add screens plus one global confirm dialog."""

    CSS = """
    Screen {
        layout: vertical;
    }

    #status {
        height: 1;
        padding: 0 1;
        background: $panel;
    }

    #error-line {
        height: auto;
        padding: 0 1;
    }

    #article-list {
        height: 1fr;
    }

    #busy {
        height: auto;
        padding: 1 2;
        background: $boost;
        color: $text-muted;
        text-style: bold;
    }

    #detail-title {
        padding: 1 2 0 2;
    }

    #detail-url {
        padding: 0 2 1 2;
    }

    #detail-actions, #add-actions, #detail-nav {
        height: auto;
        align-horizontal: right;
    }

    ConfirmDialogScreen {
        align: center middle;
    }

    #dialog-box {
        width: 60;
        max-width: 90%;
        height: auto;
        border: round $primary;
        background: $surface;
        padding: 1 2;
    }

    #dialog-header, #dialog-buttons {
        height: auto;
    }

    #dialog-title {
        width: 1fr;
        text-style: bold;
    }

    #dialog-body {
        padding: 1 0;
    }
    """

    BINDINGS = [Binding("q", "quit", "Quit")]

    def __init__(self, controller: ArticlesController) -> None:
        super().__init__()
        self._controller = controller
        self._dialog_visible = False
        self._list_after_dialog = False
        self._unsubscribers: List[Callable[[], None]] = []

    def on_mount(self) -> None:
        self.title = "Articles Collect"
        self._unsubscribers.append(self._controller.dialog.subscribe(self._on_dialog_changed))
        self._unsubscribers.append(self._controller.navigator.subscribe(self._on_navigate))
        self.push_screen(ArticleListScreen(self._controller))

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    def _on_dialog_changed(self) -> None:
        if self._dialog_visible or self._controller.dialog.is_closed():
            return
        self._dialog_visible = True
        self.push_screen(ConfirmDialogScreen(self._controller.dialog), self._on_dialog_dismissed)

    def _on_dialog_dismissed(self, _result: None) -> None:
        self._dialog_visible = False
        if self._list_after_dialog:
            self._list_after_dialog = False
            self.call_later(self._show_list)
            return
        # A request opened while the previous screen was closing still needs a screen.
        self._on_dialog_changed()

    def _on_navigate(self, path: str) -> None:
        route = resolve_route(path)
        if route.name == "list":
            self.call_later(self._show_list)
            return
        if route.name == "article" and route.article_id is not None:
            self.push_screen(ArticleDetailScreen(self._controller, route.article_id))
            return
        if route.name == "add":
            self.push_screen(AddArticlesScreen(self._controller))
            return
        self.notify("Not Found ;( {0}".format(path), severity="warning")

    async def _show_list(self) -> None:
        if self._dialog_visible:
            # Leaving the page declines the open question; continue once its screen is gone.
            self._list_after_dialog = True
            self._controller.dialog.close()
            return
        while len(self.screen_stack) > 1 and not isinstance(self.screen, ArticleListScreen):
            await self.pop_screen()
        if isinstance(self.screen, ArticleListScreen):
            await self.screen.reload()


def start_tui(workspace_dir: Optional[Path] = None) -> int:
    controller = ArticlesController(workspace_dir=workspace_dir)
    try:
        ArticlesApp(controller).run()
    finally:
        controller.close()
    return 0
