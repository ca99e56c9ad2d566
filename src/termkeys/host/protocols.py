"""Host platform collaborator contracts.

The core never talks to a concrete terminal widget, editor, or workspace.
Everything it needs from the host is declared here so that tests can pass
spies and the command line can pass the local asyncio host.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Protocol


class Subscription(Protocol):
    def dispose(self) -> None: ...


class TerminalSession(Protocol):
    """One interactive terminal owned by the host."""

    @property
    def name(self) -> str: ...

    def show(self, preserve_focus: bool = True) -> None: ...

    def send_text(self, text: str, add_new_line: bool = True) -> None: ...

    def dispose(self) -> None: ...


CloseListener = Callable[[TerminalSession], None]


class TerminalHost(Protocol):
    def create_terminal(self, name: str) -> TerminalSession: ...

    def scroll_to_bottom(self) -> None: ...

    def focus_terminal(self) -> None: ...

    def on_did_close_terminal(self, listener: CloseListener) -> Subscription: ...


@dataclass(frozen=True)
class EditorSnapshot:
    file_name: str
    # Caret line as the editor reports it: 0-based.
    line: int = 0


class WorkspaceHost(Protocol):
    def active_editor(self) -> EditorSnapshot | None: ...

    def workspace_folders(self) -> list[str]: ...

    def save_all(self) -> Awaitable[bool]: ...

    def show_warning_message(self, message: str) -> None: ...


CommandHandler = Callable[[Any], Awaitable[Any]]


class CommandRegistry(Protocol):
    def register_command(self, command_id: str, handler: CommandHandler) -> Subscription: ...
