"""Invocation argument model for the run command."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from termkeys.errors import ExitCode, TermKeysError
from termkeys.terminal.models import DEFAULT_TERMINAL_NAME


class InvocationArgs(BaseModel):
    """Arguments accepted by ``terminalCommandKeys.run``.

    Keybinding payloads use camelCase keys; both those and the snake_case
    attribute names are accepted. Unknown keys are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    cmd: str = Field(min_length=1)
    show_terminal: bool = Field(default=True, alias="showTerminal")
    save_all_files: bool = Field(default=True, alias="saveAllFiles")
    new_terminal: bool = Field(default=False, alias="newTerminal")
    focus: bool = False
    terminal_name: str = Field(default=DEFAULT_TERMINAL_NAME, alias="terminalName", min_length=1)

    @model_validator(mode="after")
    def _hidden_terminal_never_focuses(self) -> InvocationArgs:
        if not self.show_terminal:
            self.focus = False
        return self

    @classmethod
    def from_payload(
        cls,
        payload: Mapping[str, object] | None,
        *,
        default_terminal_name: str = DEFAULT_TERMINAL_NAME,
    ) -> InvocationArgs:
        if not isinstance(payload, Mapping) or not payload.get("cmd"):
            raise TermKeysError(
                'Keybinding must include a "args.cmd" key',
                code=ExitCode.INVALID_ARGS,
            )
        merged: dict[str, object] = {"terminalName": default_terminal_name}
        merged.update(payload)
        if "terminal_name" in payload and "terminalName" not in payload:
            merged.pop("terminalName")
        try:
            return cls.model_validate(merged)
        except ValidationError as exc:
            raise TermKeysError(
                "Invalid keybinding args.",
                code=ExitCode.INVALID_ARGS,
                hint=_describe(exc),
            ) from exc


def _describe(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "args"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)
