"""Named terminal session registry."""

from __future__ import annotations

import logging as py_logging
from dataclasses import dataclass

from termkeys.host.protocols import TerminalHost, TerminalSession
from termkeys.terminal.models import SessionHandle

logger = py_logging.getLogger(__name__)


@dataclass(frozen=True)
class TerminalEvent:
    name: str
    step: str
    message: str


class TerminalRegistry:
    """Keeps at most one live session per logical name.

    All mutation happens synchronously inside a single event-loop turn, so
    no locking is involved. Owner-initiated disposal and host-initiated close
    are told apart by ``SessionHandle.disposed_by_owner``.
    """

    def __init__(self, host: TerminalHost) -> None:
        self._host = host
        self._handles: dict[str, SessionHandle] = {}
        self._events: list[TerminalEvent] = []

    def __len__(self) -> int:
        return len(self._handles)

    def __contains__(self, name: object) -> bool:
        return name in self._handles

    def get(self, name: str) -> SessionHandle | None:
        return self._handles.get(name)

    def names(self) -> list[str]:
        return sorted(self._handles)

    def list_events(self) -> list[TerminalEvent]:
        return list(self._events)

    def clear_events(self) -> None:
        self._events.clear()
        logger.info("terminal-event name=* step=clear-events message=Terminal events cleared.")

    def get_or_create(self, name: str, force_new: bool = False) -> SessionHandle:
        if force_new and name in self._handles:
            self.dispose(name)

        handle = self._handles.get(name)
        if handle is None:
            session = self._host.create_terminal(name)
            handle = SessionHandle(name=name, session=session)
            self._handles[name] = handle
            self._record(name, "create", "Created terminal session.")
        return handle

    def dispose(self, name: str) -> None:
        handle = self._handles.get(name)
        if handle is None:
            return
        # Must be set before the host disposes: some hosts fire the close
        # notification synchronously from inside dispose().
        handle.disposed_by_owner = True
        try:
            handle.session.dispose()
        finally:
            if self._handles.get(name) is handle:
                del self._handles[name]
            self._record(name, "dispose", "Disposed terminal session.")

    def dispose_all(self) -> None:
        for name in list(self._handles):
            self.dispose(name)

    def handle_close(self, session: TerminalSession) -> None:
        """Close-notification listener for every host terminal, ours or not."""
        name = session.name
        handle = self._handles.get(name)
        if handle is None:
            logger.debug("Ignoring close of untracked terminal %s", name)
            return
        if handle.session is not session:
            logger.debug("Ignoring close of stale terminal %s", name)
            return
        if handle.disposed_by_owner:
            return
        del self._handles[name]
        self._record(name, "closed", "Terminal closed by user.")

    def _record(self, name: str, step: str, message: str) -> None:
        self._events.append(TerminalEvent(name=name, step=step, message=message))
        logger.info("terminal-event name=%s step=%s message=%s", name, step, message)
