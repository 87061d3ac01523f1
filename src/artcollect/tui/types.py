"""Typed models for the artcollect Textual UI."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ListStatus:
    article_count: int
    phase: str = "Ready"
    busy_text: str = ""
    last_error: str = ""
