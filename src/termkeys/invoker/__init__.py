"""Command template resolution and dispatch."""

from .args import InvocationArgs
from .service import COMMAND_ID, CommandInvoker
from .template import UNDEFINED, ResolutionContext, resolve_template

__all__ = [
    "COMMAND_ID",
    "CommandInvoker",
    "InvocationArgs",
    "ResolutionContext",
    "UNDEFINED",
    "resolve_template",
]
