"""Host platform contracts and the local asyncio host."""

from .local import (
    CallbackSubscription,
    LocalCommandRegistry,
    LocalTerminalHost,
    LocalTerminalSession,
    LocalWorkspace,
)
from .protocols import (
    CommandRegistry,
    EditorSnapshot,
    Subscription,
    TerminalHost,
    TerminalSession,
    WorkspaceHost,
)

__all__ = [
    "CallbackSubscription",
    "CommandRegistry",
    "EditorSnapshot",
    "LocalCommandRegistry",
    "LocalTerminalHost",
    "LocalTerminalSession",
    "LocalWorkspace",
    "Subscription",
    "TerminalHost",
    "TerminalSession",
    "WorkspaceHost",
]
