from __future__ import annotations

import asyncio

from artcollect.dialog import DialogState
from artcollect.tui.app import ArticleDetailScreen, ArticleListScreen, ArticlesApp
from artcollect.tui.controller import ArticlesController
from artcollect.tui.widgets import ConfirmDialogScreen


def _seeded_controller(isolated_env, text: str) -> ArticlesController:
    controller = ArticlesController(workspace_dir=isolated_env["workspace"])
    asyncio.run(controller.runtime.client.add_from_text(text))
    return controller


def test_confirming_dialog_removes_list_row(isolated_env):
    controller = _seeded_controller(isolated_env, "https://example.com/a\nhttps://example.com/b")

    async def _run() -> None:
        app = ArticlesApp(controller=controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            assert isinstance(app.screen, ArticleListScreen)
            first, second = controller.articles.items()

            controller.request_delete(first.uuid)
            await pilot.pause()
            assert isinstance(app.screen, ConfirmDialogScreen)

            await pilot.click("#dialog-confirm")
            await controller.list_delete.settle()
            await pilot.pause()

            assert controller.articles.items() == [second]
            assert isinstance(app.screen, ArticleListScreen)

    try:
        asyncio.run(_run())
    finally:
        controller.close()


def test_escape_declines_and_keeps_row(isolated_env):
    controller = _seeded_controller(isolated_env, "https://example.com/a")

    async def _run() -> None:
        app = ArticlesApp(controller=controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            (article,) = controller.articles.items()

            controller.request_delete(article.uuid)
            await pilot.pause()
            await pilot.press("escape")
            await pilot.pause()

            assert controller.dialog.is_closed() is True
            assert controller.articles.items() == [article]
            assert isinstance(app.screen, ArticleListScreen)

    try:
        asyncio.run(_run())
    finally:
        controller.close()


def test_navigation_opens_detail_and_returns(isolated_env):
    controller = _seeded_controller(isolated_env, "https://example.com/a")

    async def _run() -> None:
        app = ArticlesApp(controller=controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            (article,) = controller.articles.items()

            controller.open_article(article.uuid)
            await pilot.pause()
            assert isinstance(app.screen, ArticleDetailScreen)

            await pilot.press("escape")
            await pilot.pause()
            await pilot.pause()
            assert isinstance(app.screen, ArticleListScreen)
            assert controller.navigator.current == "/"

    try:
        asyncio.run(_run())
    finally:
        controller.close()


def test_returning_to_list_declines_open_dialog_and_allows_next_one(isolated_env):
    controller = _seeded_controller(isolated_env, "https://example.com/a")

    async def _run() -> None:
        app = ArticlesApp(controller=controller)
        async with app.run_test() as pilot:
            await pilot.pause()
            (article,) = controller.articles.items()
            declined = []

            controller.open_article(article.uuid)
            await pilot.pause()
            controller.dialog.open(DialogState.yes_no(lambda: None, lambda: declined.append(True), "t", "b"))
            await pilot.pause()
            assert isinstance(app.screen, ConfirmDialogScreen)

            controller.navigator.navigate_to("/")
            for _ in range(5):
                await pilot.pause()

            assert declined == [True]
            assert controller.dialog.is_closed() is True
            assert isinstance(app.screen, ArticleListScreen)

            controller.request_delete(article.uuid)
            await pilot.pause()
            assert isinstance(app.screen, ConfirmDialogScreen)

    try:
        asyncio.run(_run())
    finally:
        controller.close()
