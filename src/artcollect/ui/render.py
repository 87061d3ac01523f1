"""Presentation helpers for artcollect CLI output."""

from __future__ import annotations

from typing import Iterable, List, Optional, TextIO

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from artcollect.articles.types import Article
from artcollect.kernel.debug_log import DebugLogStatus


def render_notice(level: str, text: str, detail: Optional[str] = None) -> str:
    prefix_map = {
        "info": "Info",
        "warn": "Warning",
        "error": "Error",
        "success": "Success",
    }
    prefix = prefix_map.get(level, "Info")
    if detail:
        return "{0}: {1} ({2})".format(prefix, text, detail)
    return "{0}: {1}".format(prefix, text)


def _is_tty(stream: TextIO, forced: Optional[bool]) -> bool:
    if forced is not None:
        return forced
    isatty = getattr(stream, "isatty", None)
    if callable(isatty):
        try:
            return bool(isatty())
        except Exception:
            return False
    return False


def format_article_url(url: str) -> str:
    return "[{0}]".format(url)


def render_articles(
    articles: Iterable[Article],
    stream: TextIO,
    is_tty: Optional[bool] = None,
) -> None:
    items = list(articles)
    tty = _is_tty(stream, is_tty)

    if tty:
        console = Console(file=stream, highlight=False, soft_wrap=True)
        if not items:
            console.print(render_notice("info", "no articles yet", "use `artcollect add`"))
            return
        table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
        table.add_column("uuid", style="dim", no_wrap=True)
        table.add_column("title")
        table.add_column("url", style="blue")
        for article in items:
            table.add_row(str(article.uuid), article.title, article.url)
        console.print(table)
        return

    if not items:
        stream.write(render_notice("info", "no articles yet", "use `artcollect add`") + "\n")
        stream.flush()
        return
    for article in items:
        stream.write("{0}\t{1}\t{2}\n".format(article.uuid, article.title, article.url))
    stream.flush()


def render_article_detail(
    article: Article,
    stream: TextIO,
    is_tty: Optional[bool] = None,
) -> None:
    tty = _is_tty(stream, is_tty)
    body = "{0}\n{1}".format(format_article_url(article.url), article.uuid)

    if tty:
        console = Console(file=stream, highlight=False, soft_wrap=True)
        console.print(Panel(body, title=article.title, border_style="cyan", box=box.ROUNDED))
        return

    stream.write(article.title + "\n")
    stream.write(body + "\n")
    stream.flush()


def render_not_found(article_id: object) -> str:
    return "Article with the uuid: {0} could not be found...".format(article_id)


def render_logs_text(status: DebugLogStatus) -> str:
    lines: List[str] = [
        "Debug Logs",
        "logs_enabled={0}".format(status.enabled),
        "logs_active_size_bytes={0} logs_total_size_bytes={1}".format(
            status.active_size_bytes,
            status.total_size_bytes,
        ),
        "logs_max_file_bytes={0} logs_max_files={1}".format(status.max_file_bytes, status.max_files),
        "logs_write_errors={0}".format(status.write_errors),
        "logs_dir={0}".format(status.logs_dir),
        "logs_active_file={0}".format(status.active_file),
        "logs_rotated_files={0}".format(len(status.rotated_files)),
    ]
    return "\n".join(lines)
