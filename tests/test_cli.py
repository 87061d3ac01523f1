from __future__ import annotations

import uuid
from pathlib import Path

from typer.testing import CliRunner

import artcollect.cli
from artcollect.client import ArticlesClientError, LocalArticlesClient
from artcollect.config import load_settings
from artcollect.store import ArticleStore


def _combined_output(result) -> str:
    try:
        return result.stdout + result.stderr
    except Exception:
        return result.stdout


def _stored_ids():
    store = ArticleStore(load_settings().db_path)
    try:
        return [article.uuid for article in store.all()]
    finally:
        store.close()


def test_commands_require_project_config(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    result = runner.invoke(artcollect.cli.app, ["list"])

    assert result.exit_code == 2
    assert "artcollect init" in _combined_output(result)


def test_help_and_init_work_without_config(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    help_result = runner.invoke(artcollect.cli.app, ["--help"])
    assert help_result.exit_code == 0

    init_result = runner.invoke(artcollect.cli.app, ["init"])
    assert init_result.exit_code == 0

    config_root = tmp_path / ".artcollect_config"
    assert (config_root / "config.toml").is_file()
    assert (config_root / "data").is_dir()
    assert (config_root / "logs").is_dir()


def test_init_fails_when_config_exists_without_force(monkeypatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()

    assert runner.invoke(artcollect.cli.app, ["init"]).exit_code == 0

    second = runner.invoke(artcollect.cli.app, ["init"])
    assert second.exit_code == 2
    assert "already exists" in _combined_output(second)

    marker = tmp_path / ".artcollect_config" / "data" / "marker.txt"
    marker.write_text("old", encoding="utf-8")
    rebuilt = runner.invoke(artcollect.cli.app, ["init", "--force"])
    assert rebuilt.exit_code == 0
    assert not marker.exists()


def test_add_list_and_show(isolated_env):
    runner = CliRunner()
    url_file = isolated_env["workspace"] / "urls.txt"
    url_file.write_text("https://example.com/from-file\n\n", encoding="utf-8")

    added = runner.invoke(
        artcollect.cli.app,
        ["add", "https://github.com/mrkline/modern-latex", "--file", str(url_file)],
    )
    assert added.exit_code == 0
    assert "added 2 article(s)" in added.stdout

    listed = runner.invoke(artcollect.cli.app, ["list"])
    assert listed.exit_code == 0
    lines = [line for line in listed.stdout.splitlines() if line.strip()]
    assert len(lines) == 2
    assert lines[0].split("\t")[1:] == ["github.com - modern-latex", "https://github.com/mrkline/modern-latex"]

    first_id = lines[0].split("\t")[0]
    shown = runner.invoke(artcollect.cli.app, ["show", first_id])
    assert shown.exit_code == 0
    assert "github.com - modern-latex" in shown.stdout
    assert "[https://github.com/mrkline/modern-latex]" in shown.stdout


def test_list_empty_shows_notice(isolated_env):
    runner = CliRunner()
    result = runner.invoke(artcollect.cli.app, ["list"])

    assert result.exit_code == 0
    assert "no articles yet" in result.stdout


def test_show_unknown_and_malformed_ids(isolated_env):
    runner = CliRunner()
    missing = uuid.uuid4()

    unknown = runner.invoke(artcollect.cli.app, ["show", str(missing)])
    assert unknown.exit_code == 1
    assert "could not be found" in _combined_output(unknown)

    malformed = runner.invoke(artcollect.cli.app, ["show", "abc"])
    assert malformed.exit_code == 1
    assert "not a valid uuid" in _combined_output(malformed)


def test_delete_with_yes_removes_article(isolated_env):
    runner = CliRunner()
    runner.invoke(artcollect.cli.app, ["add", "https://example.com/a", "https://example.com/b"])
    first, second = _stored_ids()

    result = runner.invoke(artcollect.cli.app, ["delete", str(first), "--yes"])

    assert result.exit_code == 0
    output = _combined_output(result)
    assert "Delete Item?" in output
    assert "deleted {0}".format(first) in output
    assert _stored_ids() == [second]


def test_delete_without_confirmation_keeps_article(isolated_env):
    runner = CliRunner()
    runner.invoke(artcollect.cli.app, ["add", "https://example.com/a"])
    (only,) = _stored_ids()

    # CliRunner input is not a tty, so the prompt is treated as declined.
    result = runner.invoke(artcollect.cli.app, ["delete", str(only)])

    assert result.exit_code == 0
    assert "kept {0}".format(only) in _combined_output(result)
    assert _stored_ids() == [only]


def test_delete_unknown_article(isolated_env):
    runner = CliRunner()
    result = runner.invoke(artcollect.cli.app, ["delete", str(uuid.uuid4()), "--yes"])

    assert result.exit_code == 1
    assert "could not be found" in _combined_output(result)


def test_logs_command_reports_status(isolated_env):
    runner = CliRunner()
    result = runner.invoke(artcollect.cli.app, ["logs"])

    assert result.exit_code == 0
    assert "logs_enabled=True" in result.stdout
    assert "logs_dir=" in result.stdout


def test_no_subcommand_starts_tui(monkeypatch, isolated_env):
    calls = []
    monkeypatch.setattr(artcollect.cli, "_execute_tui", lambda: calls.append("tui") or 0)
    runner = CliRunner()

    assert runner.invoke(artcollect.cli.app, []).exit_code == 0
    assert runner.invoke(artcollect.cli.app, ["tui"]).exit_code == 0
    assert calls == ["tui", "tui"]


def test_delete_reports_data_source_failure(monkeypatch, isolated_env):
    async def _unavailable(self):
        raise ArticlesClientError("fetch_all failed: disk I/O error")

    monkeypatch.setattr(LocalArticlesClient, "fetch_all", _unavailable)
    runner = CliRunner()

    result = runner.invoke(artcollect.cli.app, ["delete", str(uuid.uuid4()), "--yes"])

    assert result.exit_code == 1
    assert result.exception is None or isinstance(result.exception, SystemExit)
    assert "Error: fetch_all failed: disk I/O error" in _combined_output(result)
