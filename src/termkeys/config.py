"""XDG config loading/saving."""

from __future__ import annotations

import json
import sys
from contextlib import suppress
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing_extensions import NotRequired, TypedDict

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

from termkeys.errors import ExitCode, TermKeysError
from termkeys.logging import LOG_LEVELS, normalize_level
from termkeys.terminal.models import DEFAULT_TERMINAL_NAME

DEFAULT_CONFIG_PATH = Path("~/.config/termkeys/config.toml").expanduser()
DEFAULT_SHELL = "/bin/sh"
DEFAULT_LOG_LEVEL = "INFO"

_BOOL_BINDING_KEYS = ("showTerminal", "saveAllFiles", "newTerminal", "focus")


class BindingPayload(TypedDict):
    cmd: str
    showTerminal: NotRequired[bool]
    saveAllFiles: NotRequired[bool]
    newTerminal: NotRequired[bool]
    focus: NotRequired[bool]
    terminalName: NotRequired[str]


class AppConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    default_terminal_name: str = Field(default=DEFAULT_TERMINAL_NAME, min_length=1)
    shell: str = Field(default=DEFAULT_SHELL, min_length=1)
    log_level: str = DEFAULT_LOG_LEVEL
    bindings: dict[str, BindingPayload] = Field(default_factory=dict)

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized = normalize_level(value)
        if normalized not in LOG_LEVELS:
            raise ValueError(f"Invalid log level: {value}")
        return normalized

    def binding(self, name: str) -> BindingPayload:
        payload = self.bindings.get(name)
        if payload is None:
            known = ", ".join(sorted(self.bindings)) or "none configured"
            raise TermKeysError(
                f"Unknown binding: {name}",
                code=ExitCode.CONFIG_ERROR,
                hint=f"Known bindings: {known}.",
            )
        return payload


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        return DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _toml_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return f'"{_escape(value)}"'
    raise TypeError(f"Unsupported TOML scalar type: {type(value)!r}")


def _decode_json_container(value: object) -> object | None:
    if isinstance(value, str):
        try:
            loaded: object = json.loads(value)
            return loaded
        except json.JSONDecodeError:
            return None
    return value


def _normalize_binding(payload: object) -> BindingPayload | None:
    if not isinstance(payload, dict):
        return None
    cmd = payload.get("cmd")
    if not isinstance(cmd, str) or not cmd:
        return None
    normalized = BindingPayload(cmd=cmd)
    for key in _BOOL_BINDING_KEYS:
        value = payload.get(key)
        if isinstance(value, bool):
            normalized[key] = value  # type: ignore[literal-required]
    terminal_name = payload.get("terminalName")
    if isinstance(terminal_name, str) and terminal_name.strip():
        normalized["terminalName"] = terminal_name.strip()
    return normalized


def _normalize_bindings(value: object) -> dict[str, BindingPayload]:
    raw_bindings = _decode_json_container(value)
    if not isinstance(raw_bindings, dict):
        return {}

    normalized: dict[str, BindingPayload] = {}
    for name, payload in raw_bindings.items():
        if not isinstance(name, str) or not name.strip():
            continue
        binding = _normalize_binding(payload)
        if binding is not None:
            normalized[name.strip()] = binding
    return normalized


def _sanitize(raw: dict[str, object]) -> AppConfig:
    cfg = AppConfig()

    terminal_name = raw.get("default_terminal_name", cfg.default_terminal_name)
    if isinstance(terminal_name, str) and terminal_name.strip():
        cfg.default_terminal_name = terminal_name.strip()

    shell = raw.get("shell", cfg.shell)
    if isinstance(shell, str) and shell.strip():
        cfg.shell = shell.strip()

    log_level = raw.get("log_level", cfg.log_level)
    if isinstance(log_level, str) and normalize_level(log_level) in LOG_LEVELS:
        cfg.log_level = log_level

    cfg.bindings = _normalize_bindings(raw.get("bindings", {}))
    return cfg


def load_config(path: str | Path | None = None) -> AppConfig:
    resolved = get_config_path(path)
    if not resolved.exists():
        return AppConfig()
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()
    return _sanitize(raw)


def save_config(config: AppConfig, path: str | Path | None = None) -> Path:
    resolved = get_config_path(path)
    resolved.parent.mkdir(parents=True, exist_ok=True)
    bindings = _normalize_bindings(dict(config.bindings))

    lines = [
        f"default_terminal_name = {_toml_scalar(config.default_terminal_name)}",
        f"shell = {_toml_scalar(config.shell)}",
        f"log_level = {_toml_scalar(config.log_level)}",
        f"bindings = {_toml_scalar(json.dumps(bindings, ensure_ascii=True, separators=(',', ':'), sort_keys=True))}",
    ]

    resolved.write_text("\n".join(lines) + "\n", encoding="utf-8")
    with suppress(OSError):
        resolved.chmod(0o600)
    return resolved
