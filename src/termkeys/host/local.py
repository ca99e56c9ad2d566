"""Local asyncio host: shell subprocesses standing in for editor terminals."""

from __future__ import annotations

import asyncio
import logging as py_logging
import subprocess
import sys
from collections.abc import Callable, Sequence
from contextlib import suppress
from typing import Any, TextIO

from termkeys.errors import ExitCode, TermKeysError
from termkeys.host.protocols import CloseListener, CommandHandler, EditorSnapshot

logger = py_logging.getLogger(__name__)

ShellSpawn = Callable[[list[str], str | None], subprocess.Popen]


def _spawn_shell(command: list[str], cwd: str | None) -> subprocess.Popen:
    return subprocess.Popen(
        command,
        stdin=subprocess.PIPE,
        cwd=cwd,
        text=True,
    )


class CallbackSubscription:
    def __init__(self, callback: Callable[[], None]) -> None:
        self._callback: Callable[[], None] | None = callback

    def dispose(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


class LocalTerminalSession:
    def __init__(self, host: LocalTerminalHost, name: str, process: subprocess.Popen) -> None:
        self._host = host
        self._name = name
        self.process = process
        self.disposed = False

    @property
    def name(self) -> str:
        return self._name

    def show(self, preserve_focus: bool = True) -> None:
        logger.debug("Showing terminal %s (preserve_focus=%s)", self._name, preserve_focus)

    def send_text(self, text: str, add_new_line: bool = True) -> None:
        stdin = self.process.stdin
        if self.disposed or stdin is None or stdin.closed:
            raise TermKeysError(
                f"Terminal is not accepting input: {self._name}",
                code=ExitCode.RUNTIME_ERROR,
                hint="Run the command again to open a fresh terminal.",
            )
        payload = text + "\n" if add_new_line else text
        try:
            stdin.write(payload)
            stdin.flush()
        except OSError as exc:
            raise TermKeysError(
                f"Failed to write to terminal {self._name}.",
                code=ExitCode.RUNTIME_ERROR,
                hint=str(exc) or "Verify the shell process is still running.",
            ) from exc

    def close_input(self) -> None:
        """Let the shell finish what it was sent and exit on end of input."""
        stdin = self.process.stdin
        if stdin is not None and not stdin.closed:
            with suppress(OSError):
                stdin.close()

    def dispose(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        self.close_input()
        if self.process.poll() is None:
            with suppress(OSError):
                self.process.terminate()


class LocalTerminalHost:
    def __init__(
        self,
        *,
        shell: str = "/bin/sh",
        cwd: str | None = None,
        spawn: ShellSpawn | None = None,
    ) -> None:
        self.shell = shell
        self.cwd = cwd
        self._spawn = spawn or _spawn_shell
        self._listeners: list[CloseListener] = []
        self._sessions: list[LocalTerminalSession] = []
        self._watchers: list[asyncio.Future[Any]] = []

    def create_terminal(self, name: str) -> LocalTerminalSession:
        loop = asyncio.get_running_loop()
        try:
            process = self._spawn([self.shell], self.cwd)
        except OSError as exc:
            raise TermKeysError(
                f"Failed to start shell {self.shell}.",
                code=ExitCode.RUNTIME_ERROR,
                hint=str(exc) or "Check the configured shell path.",
            ) from exc
        session = LocalTerminalSession(self, name, process)
        self._sessions.append(session)
        self._watchers.append(loop.create_task(self._watch(session)))
        logger.debug("Started shell pid=%s for terminal %s", process.pid, name)
        return session

    def scroll_to_bottom(self) -> None:
        logger.debug("Scrolling active terminal to bottom")

    def focus_terminal(self) -> None:
        logger.debug("Focusing active terminal")

    def on_did_close_terminal(self, listener: CloseListener) -> CallbackSubscription:
        self._listeners.append(listener)
        return CallbackSubscription(lambda: self._listeners.remove(listener))

    def close_all_input(self) -> None:
        for session in self._sessions:
            session.close_input()

    async def wait_closed(self) -> None:
        while self._watchers:
            watchers, self._watchers = self._watchers, []
            await asyncio.gather(*watchers)

    async def _watch(self, session: LocalTerminalSession) -> None:
        returncode = await asyncio.to_thread(session.process.wait)
        logger.debug("Terminal %s exited with code %s", session.name, returncode)
        self._sessions.remove(session)
        for listener in list(self._listeners):
            listener(session)


class LocalWorkspace:
    """Editor state handed in from the command line.

    Files passed on the command line already live on disk, so saving is a
    completed no-op.
    """

    def __init__(
        self,
        editor: EditorSnapshot | None,
        folders: Sequence[str] = (),
        *,
        stream: TextIO | None = None,
    ) -> None:
        self._editor = editor
        self._folders = list(folders)
        self._stream = stream
        self.warnings: list[str] = []

    def active_editor(self) -> EditorSnapshot | None:
        return self._editor

    def workspace_folders(self) -> list[str]:
        return list(self._folders)

    async def save_all(self) -> bool:
        return True

    def show_warning_message(self, message: str) -> None:
        self.warnings.append(message)
        print(message, file=self._stream or sys.stderr)


class LocalCommandRegistry:
    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}

    def register_command(self, command_id: str, handler: CommandHandler) -> CallbackSubscription:
        if command_id in self._handlers:
            raise TermKeysError(
                f"Command already registered: {command_id}",
                code=ExitCode.VALIDATION_ERROR,
                hint="Dispose the previous registration first.",
            )
        self._handlers[command_id] = handler
        return CallbackSubscription(lambda: self._handlers.pop(command_id, None))

    def commands(self) -> list[str]:
        return sorted(self._handlers)

    async def execute_command(self, command_id: str, payload: object = None) -> Any:
        handler = self._handlers.get(command_id)
        if handler is None:
            raise TermKeysError(
                f"Command not found: {command_id}",
                code=ExitCode.VALIDATION_ERROR,
                hint="Activate the extension before executing commands.",
            )
        return await handler(payload)
