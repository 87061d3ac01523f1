"""Confirmation dialog primitives."""

from .state import DEFAULT_CONFIRM_LABEL, DEFAULT_DECLINE_LABEL, DialogState
from .controller import DialogController, DialogSnapshot

__all__ = [
    "DEFAULT_CONFIRM_LABEL",
    "DEFAULT_DECLINE_LABEL",
    "DialogController",
    "DialogSnapshot",
    "DialogState",
]
