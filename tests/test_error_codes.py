from __future__ import annotations

from termkeys.errors import ExitCode, TermKeysError, user_facing_error


def test_user_facing_error_without_hint() -> None:
    assert user_facing_error("something went wrong") == "Error: something went wrong."


def test_user_facing_error_with_hint() -> None:
    result = user_facing_error("something went wrong", hint="try again")

    assert result == "Error: something went wrong. Next step: try again"


def test_exit_code_values() -> None:
    assert int(ExitCode.SUCCESS) == 0
    assert int(ExitCode.INVALID_ARGS) == 2
    assert int(ExitCode.CONFIG_ERROR) == 3
    assert int(ExitCode.RUNTIME_ERROR) == 4
    assert int(ExitCode.VALIDATION_ERROR) == 7


def test_error_defaults_to_runtime_code() -> None:
    error = TermKeysError("msg")

    assert error.code == ExitCode.RUNTIME_ERROR
    assert str(error) == "msg"


def test_error_str_with_hint() -> None:
    assert str(TermKeysError("msg", hint="hint")) == "msg Hint: hint"
