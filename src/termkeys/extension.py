"""Activation and deactivation entry points."""

from __future__ import annotations

import logging as py_logging
from dataclasses import dataclass, field

from termkeys.config import AppConfig
from termkeys.host.protocols import CommandRegistry, Subscription, TerminalHost, WorkspaceHost
from termkeys.invoker.service import COMMAND_ID, CommandInvoker
from termkeys.terminal.registry import TerminalRegistry

logger = py_logging.getLogger(__name__)


@dataclass
class ExtensionContext:
    registry: TerminalRegistry
    invoker: CommandInvoker
    subscriptions: list[Subscription] = field(default_factory=list)


def activate(
    host: TerminalHost,
    workspace: WorkspaceHost,
    commands: CommandRegistry,
    *,
    config: AppConfig | None = None,
) -> ExtensionContext:
    cfg = config or AppConfig()
    registry = TerminalRegistry(host)
    invoker = CommandInvoker(
        registry,
        host,
        workspace,
        default_terminal_name=cfg.default_terminal_name,
    )
    context = ExtensionContext(registry=registry, invoker=invoker)
    context.subscriptions.append(host.on_did_close_terminal(registry.handle_close))
    context.subscriptions.append(commands.register_command(COMMAND_ID, invoker.run))
    logger.debug("Activated with default terminal %s", cfg.default_terminal_name)
    return context


def deactivate(context: ExtensionContext) -> None:
    logger.debug("Deactivating; disposing terminals: %s", ", ".join(context.registry.names()) or "none")
    context.registry.dispose_all()
    while context.subscriptions:
        context.subscriptions.pop().dispose()
