"""Immutable confirmation request carried by the dialog controller."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable

from artcollect.kernel.types import noop

DialogCallback = Callable[[], None]

DEFAULT_CONFIRM_LABEL = "yes"
DEFAULT_DECLINE_LABEL = "no"


@dataclass(frozen=True)
class DialogState:
    """One pending confirmation request.

    The state is created by whoever asks for confirmation and handed to the
    :class:`~artcollect.dialog.controller.DialogController`, which owns it until
    one of the callbacks fires or the slot is overwritten.
    """

    title: str
    body: str
    confirm: DialogCallback = field(compare=False)
    decline: DialogCallback = field(default=noop, compare=False)
    confirm_label: str = DEFAULT_CONFIRM_LABEL
    decline_label: str = DEFAULT_DECLINE_LABEL

    @classmethod
    def yes(cls, confirm: DialogCallback, title: str, body: str) -> "DialogState":
        return cls(title=str(title), body=str(body), confirm=confirm)

    @classmethod
    def yes_no(
        cls,
        confirm: DialogCallback,
        decline: DialogCallback,
        title: str,
        body: str,
    ) -> "DialogState":
        return cls(title=str(title), body=str(body), confirm=confirm, decline=decline)

    @classmethod
    def debug(cls) -> "DialogState":
        return cls(title="title", body="text", confirm=noop)

    def with_labels(self, confirm_label: str, decline_label: str) -> "DialogState":
        return DialogState(
            title=self.title,
            body=self.body,
            confirm=self.confirm,
            decline=self.decline,
            confirm_label=str(confirm_label or DEFAULT_CONFIRM_LABEL),
            decline_label=str(decline_label or DEFAULT_DECLINE_LABEL),
        )
