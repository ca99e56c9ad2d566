"""Public CLI contract and entrypoint."""

from __future__ import annotations

import argparse
import asyncio
import logging as py_logging
import sys
from collections.abc import Sequence
from pathlib import Path

from .config import AppConfig, load_config
from .errors import ExitCode, TermKeysError, user_facing_error
from .extension import activate, deactivate
from .host.local import LocalCommandRegistry, LocalTerminalHost, LocalWorkspace
from .host.protocols import EditorSnapshot
from .invoker.service import COMMAND_ID
from .logging import LOG_LEVELS, configure_logging, default_log_path, normalize_level

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARN", "ERROR")


def _line_type(value: str) -> int:
    try:
        line = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("--line must be an integer") from exc
    if line < 1:
        raise argparse.ArgumentTypeError("--line must be 1 or greater")
    return line


def _log_level_type(value: str) -> str:
    normalized = value.upper()
    if normalized == "WARNING":
        normalized = "WARN"
    if normalized not in _VALID_LOG_LEVELS:
        accepted = ", ".join(_VALID_LOG_LEVELS)
        raise argparse.ArgumentTypeError(f"--log-level must be one of: {accepted}")
    return normalized


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termkeys",
        description="Run a command template in a named terminal session.",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--cmd", default=None, help="Command template, e.g. 'pytest ${relativeFile}'")
    source.add_argument("--binding", default=None, help="Named binding from the config file")
    parser.add_argument("--file", type=Path, default=None, help="File open in the editor")
    parser.add_argument("--line", type=_line_type, default=1, help="1-based caret line")
    parser.add_argument(
        "--workspace",
        type=Path,
        action="append",
        default=[],
        help="Workspace folder; repeat for multi-root workspaces",
    )
    parser.add_argument("--terminal-name", default=None)
    parser.add_argument("--no-show", action="store_true", help="Do not reveal the terminal")
    parser.add_argument("--no-save", action="store_true", help="Skip saving open documents")
    parser.add_argument("--new-terminal", action="store_true", help="Replace any existing terminal")
    parser.add_argument("--focus", action="store_true", help="Move focus to the terminal")
    parser.add_argument("--config", type=Path, default=None)
    parser.add_argument("--log-level", type=_log_level_type, default=None)
    parser.add_argument("--log-file", type=Path, default=None)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = build_parser()
    return parser.parse_args(argv)


def build_payload(namespace: argparse.Namespace, config: AppConfig) -> dict[str, object]:
    payload: dict[str, object] = {}
    if namespace.binding:
        payload.update(config.binding(namespace.binding))
    elif namespace.cmd is not None:
        payload["cmd"] = namespace.cmd

    if namespace.terminal_name:
        payload["terminalName"] = namespace.terminal_name
    if namespace.no_show:
        payload["showTerminal"] = False
    if namespace.no_save:
        payload["saveAllFiles"] = False
    if namespace.new_terminal:
        payload["newTerminal"] = True
    if namespace.focus:
        payload["focus"] = True
    return payload


def _resolve(path: Path) -> str:
    return str(path.expanduser().resolve())


async def run_command(namespace: argparse.Namespace, config: AppConfig) -> int:
    payload = build_payload(namespace, config)
    folders = [_resolve(path) for path in namespace.workspace]
    editor = None
    if namespace.file is not None:
        editor = EditorSnapshot(file_name=_resolve(namespace.file), line=namespace.line - 1)

    host = LocalTerminalHost(shell=config.shell, cwd=folders[0] if folders else None)
    workspace = LocalWorkspace(editor, folders)
    commands = LocalCommandRegistry()
    context = activate(host, workspace, commands, config=config)
    try:
        handle = await commands.execute_command(COMMAND_ID, payload)
        if handle is None:
            return int(ExitCode.INVALID_ARGS)
        host.close_all_input()
        await host.wait_closed()
    finally:
        deactivate(context)
        await host.wait_closed()
    return int(ExitCode.SUCCESS)


def main(argv: Sequence[str] | None = None) -> int:
    log_path = default_log_path()
    logger = configure_logging(log_file=log_path)
    parser = build_parser()
    try:
        namespace = parser.parse_args(argv)
    except SystemExit as exc:
        if exc.code not in (None, 0):
            logger.warning("Argument parsing failed with exit code %s", exc.code)
        return int(exc.code or 0)

    config = load_config(namespace.config)
    if namespace.log_file is not None:
        log_path = namespace.log_file.expanduser()
    level = namespace.log_level or config.log_level
    logger = configure_logging(level=level, log_file=log_path)
    # The logger itself runs at DEBUG whenever a log file is attached.
    verbose = LOG_LEVELS.get(normalize_level(level)) == py_logging.DEBUG

    try:
        logger.debug("Starting run flow")
        return asyncio.run(run_command(namespace, config))
    except TermKeysError as exc:
        logger.error(
            "Handled TermKeysError (code=%s): %s",
            int(exc.code),
            exc.message,
            exc_info=verbose,
        )
        print(user_facing_error(exc.message, hint=exc.hint), file=sys.stderr)
        return int(exc.code)
    except Exception:
        logger.exception("Unhandled exception in CLI entrypoint")
        print(
            user_facing_error("Unexpected runtime failure", hint=f"Inspect logs: {log_path}"),
            file=sys.stderr,
        )
        return int(ExitCode.RUNTIME_ERROR)


def run(argv: Sequence[str] | None = None) -> int:
    return main(argv)
