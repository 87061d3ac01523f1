"""Typer CLI entrypoints for artcollect."""

from __future__ import annotations

import asyncio
import sys
import uuid
from pathlib import Path
from typing import List, Optional

import typer

from artcollect.articles.delete import FlowState
from artcollect.articles.synchronizer import ListSynchronizer
from artcollect.articles.types import parse_article_id
from artcollect.client import ArticlesClientError
from artcollect.config import (
    ProjectConfigError,
    initialize_project_config,
    load_settings,
    project_config_exists,
    resolve_project_config_root,
)
from artcollect.kernel.runtime import Runtime
from artcollect.ui.render import (
    render_article_detail,
    render_articles,
    render_logs_text,
    render_not_found,
    render_notice,
)

app = typer.Typer(
    invoke_without_command=True,
    no_args_is_help=False,
    help="Collect and manage article bookmarks",
)


def _missing_config_message() -> str:
    return render_notice(
        "error",
        "missing project config directory: {0}".format(resolve_project_config_root()),
        "run `artcollect init` first",
    )


def _require_project_config() -> None:
    if project_config_exists():
        return
    typer.echo(_missing_config_message(), err=True)
    raise typer.Exit(code=2)


def _open_runtime() -> Runtime:
    _require_project_config()
    try:
        return Runtime(load_settings())
    except ProjectConfigError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        raise typer.Exit(code=2)


def _parse_id_or_exit(raw: str) -> uuid.UUID:
    try:
        return parse_article_id(raw)
    except ValueError:
        typer.echo(render_notice("error", "not a valid uuid: {0}".format(raw)), err=True)
        raise typer.Exit(code=1)


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is not None:
        return
    raise typer.Exit(code=_execute_tui())


@app.command("init")
def init_cmd(
    force: bool = typer.Option(False, "--force", help="Recreate the config directory"),
) -> None:
    try:
        config_root = initialize_project_config(force=force)
    except ProjectConfigError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        raise typer.Exit(code=2)
    typer.echo(render_notice("success", "initialized project config: {0}".format(config_root)))


@app.command("add")
def add_cmd(
    urls: Optional[List[str]] = typer.Argument(None, help="URLs to bookmark"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="File with one URL per line"),
) -> None:
    lines: List[str] = list(urls or [])
    if file is not None:
        try:
            lines.extend(file.read_text(encoding="utf-8").splitlines())
        except OSError as exc:
            typer.echo(render_notice("error", "cannot read {0}: {1}".format(file, exc)), err=True)
            raise typer.Exit(code=1)
    if not lines:
        typer.echo(render_notice("warn", "nothing to add"))
        return

    runtime = _open_runtime()
    try:
        added = asyncio.run(runtime.client.add_from_text("\n".join(lines)))
    except ArticlesClientError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        raise typer.Exit(code=1)
    finally:
        runtime.close()

    for article in added:
        typer.echo("{0}\t{1}".format(article.uuid, article.title))
    typer.echo(render_notice("success", "added {0} article(s)".format(len(added))))


@app.command("list")
def list_cmd() -> None:
    runtime = _open_runtime()
    try:
        articles = asyncio.run(runtime.client.fetch_all())
    except ArticlesClientError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        raise typer.Exit(code=1)
    finally:
        runtime.close()
    render_articles(articles, stream=sys.stdout)


@app.command("show")
def show_cmd(article_id: str = typer.Argument(..., help="Article uuid")) -> None:
    key = _parse_id_or_exit(article_id)
    runtime = _open_runtime()
    try:
        article = asyncio.run(runtime.client.fetch_one(key))
    except ArticlesClientError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        raise typer.Exit(code=1)
    finally:
        runtime.close()
    if article is None:
        typer.echo(render_notice("warn", render_not_found(key)), err=True)
        raise typer.Exit(code=1)
    render_article_detail(article, stream=sys.stdout)


@app.command("delete")
def delete_cmd(
    article_id: str = typer.Argument(..., help="Article uuid"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Confirm without prompting"),
) -> None:
    key = _parse_id_or_exit(article_id)
    runtime = _open_runtime()
    try:
        code = asyncio.run(_delete_with_confirmation(runtime, key, assume_yes=yes))
    except ArticlesClientError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        raise typer.Exit(code=1)
    finally:
        runtime.close()
    raise typer.Exit(code=code)


async def _delete_with_confirmation(runtime: Runtime, key: uuid.UUID, *, assume_yes: bool) -> int:
    articles = ListSynchronizer(await runtime.client.fetch_all(), event_sink=runtime.event_sink("list"))
    if key not in articles:
        typer.echo(render_notice("warn", render_not_found(key)), err=True)
        return 1

    flow = runtime.new_list_delete_flow(articles)
    dialog = runtime.dialog
    try:
        flow.request_confirmation(key)
        article = articles.get(key)
        typer.echo("{0}: {1}".format(dialog.title_text(), article.title if article else key))
        typer.echo(dialog.body_text())

        if assume_yes or (
            sys.stdin.isatty()
            and typer.confirm(
                "{0}/{1}".format(dialog.confirm_label(), dialog.decline_label()),
                default=False,
            )
        ):
            dialog.confirm()
        else:
            dialog.decline()

        await flow.settle()
    finally:
        flow.close()

    if flow.last_error:
        typer.echo(render_notice("error", "delete failed: {0}".format(flow.last_error)), err=True)
        return 1
    if key in articles:
        typer.echo(render_notice("info", "kept {0}".format(key)))
        return 0
    typer.echo(render_notice("success", "deleted {0}".format(key)))
    return 0 if flow.state == FlowState.IDLE else 1


@app.command("logs")
def logs_cmd() -> None:
    runtime = _open_runtime()
    try:
        typer.echo(render_logs_text(runtime.logs_status()))
    finally:
        runtime.close()


@app.command("tui")
def tui_cmd() -> None:
    raise typer.Exit(code=_execute_tui())


def _execute_tui() -> int:
    _require_project_config()
    from artcollect.tui.app import start_tui

    try:
        return start_tui()
    except ProjectConfigError as exc:
        typer.echo(render_notice("error", str(exc)), err=True)
        return 2


def run() -> None:
    app()


if __name__ == "__main__":
    run()
