from __future__ import annotations

from pathlib import Path

import pytest

from termkeys.host.local import CallbackSubscription
from termkeys.host.protocols import EditorSnapshot


@pytest.hookimpl(trylast=True)
def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    del config
    for item in items:
        path = Path(str(getattr(item, "path", item.fspath)))
        if "integration" in path.parts:
            item.add_marker(pytest.mark.integration)
            item.add_marker(pytest.mark.slow)


class SpySession:
    def __init__(self, host: SpyHost, name: str, serial: int) -> None:
        self.host = host
        self.name = name
        self.serial = serial
        self.shown: list[bool] = []
        self.sent: list[tuple[str, bool]] = []
        self.dispose_calls = 0
        # Registry flag as observed from inside dispose(), when the handle is known.
        self.flag_seen_during_dispose: bool | None = None

    def show(self, preserve_focus: bool = True) -> None:
        self.shown.append(preserve_focus)
        self.host.log.append(f"show:{self.name}#{self.serial}")

    def send_text(self, text: str, add_new_line: bool = True) -> None:
        self.sent.append((text, add_new_line))
        self.host.log.append(f"send:{self.name}#{self.serial}")

    def dispose(self) -> None:
        self.dispose_calls += 1
        self.host.log.append(f"dispose:{self.name}#{self.serial}")
        if self.host.flag_probe is not None:
            self.flag_seen_during_dispose = self.host.flag_probe(self)
        if self.host.sync_close:
            self.host.fire_close(self)


class SpyHost:
    """Terminal host double that records calls and fires close events on demand."""

    def __init__(self, *, sync_close: bool = False) -> None:
        self.sync_close = sync_close
        self.created: list[SpySession] = []
        self.listeners: list = []
        self.log: list[str] = []
        self.scroll_calls = 0
        self.focus_calls = 0
        self.flag_probe = None

    def create_terminal(self, name: str) -> SpySession:
        session = SpySession(self, name, len(self.created) + 1)
        self.created.append(session)
        self.log.append(f"create:{name}#{session.serial}")
        return session

    def scroll_to_bottom(self) -> None:
        self.scroll_calls += 1

    def focus_terminal(self) -> None:
        self.focus_calls += 1

    def on_did_close_terminal(self, listener) -> CallbackSubscription:
        self.listeners.append(listener)
        return CallbackSubscription(lambda: self.listeners.remove(listener))

    def fire_close(self, session: SpySession) -> None:
        for listener in list(self.listeners):
            listener(session)


class SpyWorkspace:
    def __init__(
        self,
        editor: EditorSnapshot | None = None,
        folders: list[str] | None = None,
    ) -> None:
        self.editor = editor
        self.folders = folders or []
        self.warnings: list[str] = []
        self.save_calls = 0
        self.during_save = None

    def active_editor(self) -> EditorSnapshot | None:
        return self.editor

    def workspace_folders(self) -> list[str]:
        return list(self.folders)

    async def save_all(self) -> bool:
        self.save_calls += 1
        if self.during_save is not None:
            self.during_save()
        return True

    def show_warning_message(self, message: str) -> None:
        self.warnings.append(message)


class SpyCommands:
    def __init__(self) -> None:
        self.handlers: dict = {}

    def register_command(self, command_id: str, handler) -> CallbackSubscription:
        self.handlers[command_id] = handler
        return CallbackSubscription(lambda: self.handlers.pop(command_id, None))


@pytest.fixture
def host() -> SpyHost:
    return SpyHost()


@pytest.fixture
def workspace() -> SpyWorkspace:
    return SpyWorkspace(
        editor=EditorSnapshot(file_name="/work/proj/src/app.py", line=9),
        folders=["/work/proj", "/work/other"],
    )


@pytest.fixture
def commands() -> SpyCommands:
    return SpyCommands()
