"""Terminal session domain models."""

from __future__ import annotations

from dataclasses import dataclass

from termkeys.host.protocols import TerminalSession

DEFAULT_TERMINAL_NAME = "terminal-command-keys"


@dataclass(eq=False)
class SessionHandle:
    """A live terminal session tracked under a logical name.

    ``disposed_by_owner`` is raised by the registry before it asks the host to
    dispose the session. Hosts may echo a close notification for that same
    session, sometimes synchronously from inside ``dispose()``; the flag marks
    such an echo as already handled.
    """

    name: str
    session: TerminalSession
    disposed_by_owner: bool = False
