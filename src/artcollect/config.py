"""Configuration loading and directory resolution for artcollect."""

from __future__ import annotations

import shutil
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from artcollect.articles.delete import DEFAULT_DELETE_BODY, DEFAULT_DELETE_TITLE
from artcollect.dialog.state import DEFAULT_CONFIRM_LABEL, DEFAULT_DECLINE_LABEL
from artcollect.navigation import LIST_PATH

CONFIG_DIR_NAME = ".artcollect_config"
CONFIG_FILE_NAME = "config.toml"
DATA_DIR_NAME = "data"
LOGS_DIR_NAME = "logs"

DEFAULT_DB_FILE = "articles.db"
DEFAULT_AFTER_DELETE_PATH = LIST_PATH
DEFAULT_LOGS_ENABLED = True
DEFAULT_LOGS_MAX_FILE_BYTES = 10 * 1024 * 1024
DEFAULT_LOGS_MAX_FILES = 5
DEFAULT_LOGS_REDACTION = "default"
ALLOWED_LOG_REDACTION = ("default", "none", "strict")


class ProjectConfigError(RuntimeError):
    """Raised when project configuration is missing or invalid."""


@dataclass
class ProjectConfig:
    db_file: str = DEFAULT_DB_FILE
    confirm_label: str = DEFAULT_CONFIRM_LABEL
    decline_label: str = DEFAULT_DECLINE_LABEL
    delete_title: str = DEFAULT_DELETE_TITLE
    delete_body: str = DEFAULT_DELETE_BODY
    after_delete_path: str = DEFAULT_AFTER_DELETE_PATH
    logs_enabled: bool = DEFAULT_LOGS_ENABLED
    logs_max_file_bytes: int = DEFAULT_LOGS_MAX_FILE_BYTES
    logs_max_files: int = DEFAULT_LOGS_MAX_FILES
    logs_redaction: str = DEFAULT_LOGS_REDACTION


@dataclass
class Settings:
    """Resolved runtime settings for one CLI invocation."""

    project_root: Path
    config_root: Path
    db_file: str = DEFAULT_DB_FILE
    confirm_label: str = DEFAULT_CONFIRM_LABEL
    decline_label: str = DEFAULT_DECLINE_LABEL
    delete_title: str = DEFAULT_DELETE_TITLE
    delete_body: str = DEFAULT_DELETE_BODY
    after_delete_path: str = DEFAULT_AFTER_DELETE_PATH
    logs_enabled: bool = DEFAULT_LOGS_ENABLED
    logs_max_file_bytes: int = DEFAULT_LOGS_MAX_FILE_BYTES
    logs_max_files: int = DEFAULT_LOGS_MAX_FILES
    logs_redaction: str = DEFAULT_LOGS_REDACTION

    @property
    def data_dir(self) -> Path:
        return self.config_root / DATA_DIR_NAME

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_file

    @property
    def logs_dir(self) -> Path:
        return self.config_root / LOGS_DIR_NAME


def resolve_project_root(workspace_dir: Optional[Path] = None) -> Path:
    return (workspace_dir or Path.cwd()).resolve()


def resolve_project_config_root(workspace_dir: Optional[Path] = None) -> Path:
    return resolve_project_root(workspace_dir) / CONFIG_DIR_NAME


def project_config_exists(workspace_dir: Optional[Path] = None) -> bool:
    config_root = resolve_project_config_root(workspace_dir)
    return config_root.is_dir() and (config_root / CONFIG_FILE_NAME).is_file()


def _safe_positive_int_or_default(value: object, default: int) -> int:
    try:
        converted = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    if converted <= 0:
        return default
    return converted


def _safe_bool(value: object, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return default


def _safe_text(value: object, default: str) -> str:
    text = str(value or "").strip()
    if not text:
        return default
    return text


def _safe_db_file(value: object, default: str) -> str:
    text = _safe_text(value, default)
    # Database lives inside the data directory; reject path traversal.
    if "/" in text or "\\" in text or text in {".", ".."}:
        return default
    return text


def _safe_path(value: object, default: str) -> str:
    text = _safe_text(value, default)
    if not text.startswith("/"):
        return default
    return text


def _safe_redaction(value: object, default: str) -> str:
    normalized = str(value or default).strip().lower()
    if normalized not in ALLOWED_LOG_REDACTION:
        return default
    return normalized


def _parse_project_config_data(data: dict) -> ProjectConfig:
    storage = data.get("storage") if isinstance(data.get("storage"), dict) else {}
    dialog = data.get("dialog") if isinstance(data.get("dialog"), dict) else {}
    navigation = data.get("navigation") if isinstance(data.get("navigation"), dict) else {}
    runtime = data.get("runtime") if isinstance(data.get("runtime"), dict) else {}
    logs = runtime.get("logs") if isinstance(runtime.get("logs"), dict) else {}

    return ProjectConfig(
        db_file=_safe_db_file(storage.get("db_file"), DEFAULT_DB_FILE),
        confirm_label=_safe_text(dialog.get("confirm_label"), DEFAULT_CONFIRM_LABEL),
        decline_label=_safe_text(dialog.get("decline_label"), DEFAULT_DECLINE_LABEL),
        delete_title=_safe_text(dialog.get("delete_title"), DEFAULT_DELETE_TITLE),
        delete_body=_safe_text(dialog.get("delete_body"), DEFAULT_DELETE_BODY),
        after_delete_path=_safe_path(navigation.get("after_delete"), DEFAULT_AFTER_DELETE_PATH),
        logs_enabled=_safe_bool(logs.get("enabled"), DEFAULT_LOGS_ENABLED),
        logs_max_file_bytes=_safe_positive_int_or_default(
            logs.get("max_file_bytes"),
            DEFAULT_LOGS_MAX_FILE_BYTES,
        ),
        logs_max_files=_safe_positive_int_or_default(logs.get("max_files"), DEFAULT_LOGS_MAX_FILES),
        logs_redaction=_safe_redaction(logs.get("redaction"), DEFAULT_LOGS_REDACTION),
    )


def _toml_string(value: str) -> str:
    return '"{0}"'.format(str(value or "").replace("\\", "\\\\").replace('"', '\\"'))


def _render_project_config(config: ProjectConfig) -> str:
    lines: List[str] = [
        "[storage]",
        "db_file = {0}".format(_toml_string(_safe_db_file(config.db_file, DEFAULT_DB_FILE))),
        "",
        "[dialog]",
        "confirm_label = {0}".format(_toml_string(config.confirm_label)),
        "decline_label = {0}".format(_toml_string(config.decline_label)),
        "delete_title = {0}".format(_toml_string(config.delete_title)),
        "delete_body = {0}".format(_toml_string(config.delete_body)),
        "",
        "[navigation]",
        "after_delete = {0}".format(
            _toml_string(_safe_path(config.after_delete_path, DEFAULT_AFTER_DELETE_PATH))
        ),
        "",
        "[runtime.logs]",
        "enabled = {0}".format(str(bool(config.logs_enabled)).lower()),
        "max_file_bytes = {0}".format(
            _safe_positive_int_or_default(config.logs_max_file_bytes, DEFAULT_LOGS_MAX_FILE_BYTES)
        ),
        "max_files = {0}".format(_safe_positive_int_or_default(config.logs_max_files, DEFAULT_LOGS_MAX_FILES)),
        'redaction = "{0}"'.format(_safe_redaction(config.logs_redaction, DEFAULT_LOGS_REDACTION)),
        "",
    ]
    return "\n".join(lines)


def initialize_project_config(workspace_dir: Optional[Path] = None, force: bool = False) -> Path:
    project_root = resolve_project_root(workspace_dir)
    config_root = resolve_project_config_root(project_root)
    config_file = config_root / CONFIG_FILE_NAME

    if config_root.exists():
        if not force:
            raise ProjectConfigError(
                "configuration directory already exists: {0}".format(config_root)
            )
        shutil.rmtree(config_root)

    (config_root / DATA_DIR_NAME).mkdir(parents=True, exist_ok=True)
    (config_root / LOGS_DIR_NAME).mkdir(parents=True, exist_ok=True)
    config_file.write_text(_render_project_config(ProjectConfig()), encoding="utf-8")
    return config_root


def load_project_config(config_root: Optional[Path] = None, workspace_dir: Optional[Path] = None) -> ProjectConfig:
    resolved_root = (config_root or resolve_project_config_root(workspace_dir)).resolve()
    config_file = resolved_root / CONFIG_FILE_NAME
    if not resolved_root.is_dir() or not config_file.is_file():
        raise ProjectConfigError(
            "missing project config directory: {0}, run `artcollect init` first".format(resolved_root)
        )

    try:
        parsed = tomllib.loads(config_file.read_text(encoding="utf-8"))
    except Exception as exc:
        raise ProjectConfigError("invalid config file: {0}".format(config_file)) from exc

    if not isinstance(parsed, dict):
        raise ProjectConfigError("invalid config file: {0}".format(config_file))

    return _parse_project_config_data(parsed)


def load_settings(workspace_dir: Optional[Path] = None) -> Settings:
    """Resolve settings from the project config directory."""

    project_root = resolve_project_root(workspace_dir)
    config_root = resolve_project_config_root(project_root)
    project_config = load_project_config(config_root=config_root)

    settings = Settings(
        project_root=project_root,
        config_root=config_root,
        db_file=project_config.db_file,
        confirm_label=project_config.confirm_label,
        decline_label=project_config.decline_label,
        delete_title=project_config.delete_title,
        delete_body=project_config.delete_body,
        after_delete_path=project_config.after_delete_path,
        logs_enabled=project_config.logs_enabled,
        logs_max_file_bytes=project_config.logs_max_file_bytes,
        logs_max_files=project_config.logs_max_files,
        logs_redaction=project_config.logs_redaction,
    )

    # Data and log directories are created lazily for configs copied by hand.
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.logs_dir.mkdir(parents=True, exist_ok=True)
    return settings
