"""Resolve command templates and deliver them to named terminals."""

from __future__ import annotations

import logging as py_logging
from collections.abc import Mapping

from termkeys.errors import TermKeysError
from termkeys.host.protocols import EditorSnapshot, TerminalHost, WorkspaceHost
from termkeys.invoker.args import InvocationArgs
from termkeys.invoker.template import ResolutionContext, resolve_template
from termkeys.terminal.models import DEFAULT_TERMINAL_NAME, SessionHandle
from termkeys.terminal.registry import TerminalRegistry

logger = py_logging.getLogger(__name__)

COMMAND_ID = "terminalCommandKeys.run"


class CommandInvoker:
    def __init__(
        self,
        registry: TerminalRegistry,
        host: TerminalHost,
        workspace: WorkspaceHost,
        *,
        default_terminal_name: str = DEFAULT_TERMINAL_NAME,
    ) -> None:
        self.registry = registry
        self.default_terminal_name = default_terminal_name
        self._host = host
        self._workspace = workspace

    async def run(self, payload: Mapping[str, object] | None = None) -> SessionHandle | None:
        """Registered command handler.

        Usage errors are reported as warnings and abort the invocation before
        any session is touched. Host failures propagate.
        """
        editor = self._workspace.active_editor()
        if editor is None:
            self._warn("There must be an active editor.")
            return None

        try:
            args = InvocationArgs.from_payload(payload, default_terminal_name=self.default_terminal_name)
        except TermKeysError as exc:
            self._warn(str(exc))
            return None

        return await self.handle_invocation(editor, args)

    async def handle_invocation(self, editor: EditorSnapshot, args: InvocationArgs) -> SessionHandle:
        if args.save_all_files:
            saved = await self._workspace.save_all()
            logger.debug("Saved open documents before running (result=%s)", saved)

        context = ResolutionContext.from_editor(editor, self._workspace.workspace_folders())
        command = resolve_template(args.cmd, context)
        return self.dispatch(command, args)

    def dispatch(self, command: str, args: InvocationArgs) -> SessionHandle:
        handle = self.registry.get_or_create(args.terminal_name, args.new_terminal)
        if args.show_terminal:
            handle.session.show(preserve_focus=True)
            self._host.scroll_to_bottom()
        if args.focus:
            self._host.focus_terminal()
        logger.debug("Sending command to terminal %s: %s", handle.name, command)
        handle.session.send_text(command, add_new_line=True)
        return handle

    def _warn(self, message: str) -> None:
        text = f"{COMMAND_ID}: {message}"
        logger.warning(text)
        self._workspace.show_warning_message(text)
