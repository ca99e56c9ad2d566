"""Terminal session tracking."""

from .models import DEFAULT_TERMINAL_NAME, SessionHandle
from .registry import TerminalEvent, TerminalRegistry

__all__ = [
    "DEFAULT_TERMINAL_NAME",
    "SessionHandle",
    "TerminalEvent",
    "TerminalRegistry",
]
