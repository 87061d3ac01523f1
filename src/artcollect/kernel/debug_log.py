"""JSONL debug log for dialog, action, flow, list, and navigation events.

Every component gets an event sink from :class:`~artcollect.kernel.runtime.Runtime`;
each sink call becomes one line::

    {"ts_ms": ..., "level": "error", "component": "flow",
     "event": "flow.mutation_failed", "message": "delete.list <uuid> error=timeout",
     "data": {...}}

The level and message are derived from the payload, so a grep over the file
reads like a timeline of confirmation requests and deletes. Writing never
raises; failures only bump :attr:`DebugLogStatus.write_errors`.
"""

from __future__ import annotations

import json
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from artcollect.kernel.types import now_ms

LOG_FILE_NAME = "debug.log.jsonl"
REDACTION_MODES = ("none", "default", "strict")

_REDACTED = "***REDACTED***"
_SENSITIVE_KEY_RE = re.compile(r"(password|secret|token|authorization|cookie|api[_-]?key)", re.IGNORECASE)
_BEARER_RE = re.compile(r"(?i)\bbearer\s+[^\s,;]+")
# Bookmarked URLs frequently carry credentials in their query string.
_URL_SECRET_RE = re.compile(
    r"(?i)([?&](?:access_token|token|api_key|key|secret|sig|signature|auth)=)([^&#\s]+)"
)
# Values that identify protocol state rather than user data survive strict mode.
_STRUCTURAL_KEYS = frozenset(
    {"action", "flow", "state", "reason", "event", "ok", "latest", "current", "version", "count", "remaining"}
)


@dataclass(frozen=True)
class DebugLogStatus:
    enabled: bool
    logs_dir: Path
    active_file: Path
    max_file_bytes: int
    max_files: int
    active_size_bytes: int = 0
    total_size_bytes: int = 0
    rotated_files: Tuple[Path, ...] = ()
    write_errors: int = 0


def event_level(event_type: str, payload: Dict[str, Any]) -> str:
    if event_type.endswith("_failed") or payload.get("ok") is False:
        return "error"
    if event_type == "dialog.replaced" or payload.get("reason") == "abandoned":
        return "warn"
    return "info"


def describe_event(payload: Dict[str, Any]) -> str:
    """One-line summary: owner, new state, subject, error."""

    parts: List[str] = []
    owner = payload.get("flow") or payload.get("action")
    if owner:
        parts.append(str(owner))
    if payload.get("state"):
        parts.append("-> {0}".format(payload["state"]))
    subject = payload.get("target") or payload.get("uuid") or payload.get("input") or payload.get("path")
    if subject:
        parts.append(str(subject))
    if payload.get("title"):
        parts.append(repr(payload["title"]))
    if payload.get("error"):
        parts.append("error={0}".format(payload["error"]))
    return " ".join(parts)


class _Redactor:
    def __init__(self, mode: str) -> None:
        normalized = str(mode or "default").strip().lower()
        self.mode = normalized if normalized in REDACTION_MODES else "default"

    def text(self, text: str) -> str:
        if self.mode == "none" or not text:
            return text
        masked = _BEARER_RE.sub("Bearer {0}".format(_REDACTED), text)
        return _URL_SECRET_RE.sub(lambda m: m.group(1) + _REDACTED, masked)

    def value(self, key: str, value: Any) -> Any:
        if self.mode == "none":
            return value
        if _SENSITIVE_KEY_RE.search(key):
            return _REDACTED
        if isinstance(value, dict):
            return {k: self.value(str(k), v) for k, v in value.items()}
        if isinstance(value, list):
            return [self.value(key, item) for item in value]
        if not isinstance(value, str):
            return value
        if self.mode == "strict" and key not in _STRUCTURAL_KEYS:
            return _REDACTED
        return self.text(value)


class DebugLogWriter:
    """Append-only JSONL writer with size-based rotation (``debug.log.jsonl.N``)."""

    def __init__(
        self,
        *,
        logs_dir: Path,
        enabled: bool = True,
        max_file_bytes: int = 10 * 1024 * 1024,
        max_files: int = 5,
        redaction: str = "default",
    ) -> None:
        self._logs_dir = Path(logs_dir)
        self._enabled = bool(enabled)
        self._max_file_bytes = max(1, int(max_file_bytes or 0))
        self._max_files = max(1, int(max_files or 0))
        self._redactor = _Redactor(redaction)
        self._write_errors = 0
        self._lock = threading.Lock()

    @property
    def active_log_file(self) -> Path:
        return self._logs_dir / LOG_FILE_NAME

    def write_event(self, component: str, event_type: str, payload: Dict[str, Any]) -> None:
        data = dict(payload or {})
        self._write(
            level=event_level(event_type, data),
            component=component,
            event=event_type,
            message=describe_event(data),
            data=data,
        )

    def write_diagnostic(
        self,
        *,
        level: str,
        component: str,
        kind: str,
        message: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._write(
            level=level,
            component=component,
            event="{0}.{1}".format(component, kind),
            message=message,
            data=dict(data or {}),
        )

    def status(self) -> DebugLogStatus:
        with self._lock:
            rotated = tuple(path for path in self._rotated_files() if path.is_file())
            active_size = self._size(self.active_log_file)
            return DebugLogStatus(
                enabled=self._enabled,
                logs_dir=self._logs_dir,
                active_file=self.active_log_file,
                max_file_bytes=self._max_file_bytes,
                max_files=self._max_files,
                active_size_bytes=active_size,
                total_size_bytes=active_size + sum(self._size(path) for path in rotated),
                rotated_files=rotated,
                write_errors=self._write_errors,
            )

    def _write(self, *, level: str, component: str, event: str, message: str, data: Dict[str, Any]) -> None:
        if not self._enabled:
            return
        record = {
            "ts_ms": now_ms(),
            "level": level,
            "component": component,
            "event": event,
            "message": self._redactor.text(message),
            "data": self._redactor.value("data", data),
        }
        line = (json.dumps(record, ensure_ascii=True, separators=(",", ":"), default=str) + "\n").encode("utf-8")
        with self._lock:
            try:
                self._logs_dir.mkdir(parents=True, exist_ok=True)
                if self._size(self.active_log_file) + len(line) > self._max_file_bytes:
                    self._rotate()
                with self.active_log_file.open("ab") as fp:
                    fp.write(line)
            except OSError:
                self._write_errors += 1

    def _rotated_files(self) -> List[Path]:
        return [Path("{0}.{1}".format(self.active_log_file, index)) for index in range(1, self._max_files + 1)]

    def _rotate(self) -> None:
        # debug.log.jsonl -> .1 -> .2 ... and the oldest falls off the end.
        files = [self.active_log_file] + self._rotated_files()
        files[-1].unlink(missing_ok=True)
        for newer, older in reversed(list(zip(files, files[1:]))):
            if newer.exists():
                newer.replace(older)

    @staticmethod
    def _size(path: Path) -> int:
        return path.stat().st_size if path.is_file() else 0
