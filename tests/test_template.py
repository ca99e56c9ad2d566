from __future__ import annotations

import pytest

from termkeys.host.protocols import EditorSnapshot
from termkeys.invoker import UNDEFINED, ResolutionContext, resolve_template


def test_file_and_line_placeholders() -> None:
    ctx = ResolutionContext(file="/a/b/c.txt", line=5)

    assert resolve_template("run ${file} at ${line}", ctx) == "run /a/b/c.txt at 5"


def test_relative_file_strips_workspace_root() -> None:
    ctx = ResolutionContext(file="/a/b/c.txt", line=1, workspace_root="/a/b")

    assert resolve_template("${relativeFile}", ctx) == "./c.txt"


def test_relative_file_without_workspace_keeps_absolute_path() -> None:
    ctx = ResolutionContext(file="/a/b/c.txt", line=1)

    assert resolve_template("${relativeFile}", ctx) == "./a/b/c.txt"


def test_relative_file_outside_workspace_is_not_stripped() -> None:
    ctx = ResolutionContext(file="/elsewhere/c.txt", line=1, workspace_root="/a/b")

    assert resolve_template("${relativeFile}", ctx) == "./elsewhere/c.txt"


def test_workspace_root_placeholder() -> None:
    with_root = ResolutionContext(file="/a/b/c.txt", line=1, workspace_root="/a/b")
    without_root = ResolutionContext(file="/a/b/c.txt", line=1)

    assert resolve_template("cd ${workspaceRoot}", with_root) == "cd /a/b"
    assert resolve_template("cd ${workspaceRoot}", without_root) == f"cd {UNDEFINED}"


def test_every_occurrence_is_replaced() -> None:
    ctx = ResolutionContext(file="/a/b/c.txt", line=3, workspace_root="/a/b")

    result = resolve_template("${line}:${line} ${file} ${relativeFile} ${file}", ctx)

    assert result == "3:3 /a/b/c.txt ./c.txt /a/b/c.txt"


@pytest.mark.parametrize(
    "template",
    ["${column}", "${ file }", "$file", "${FILE}", "{file}", "echo ${env:HOME}"],
)
def test_unknown_placeholders_are_left_verbatim(template: str) -> None:
    ctx = ResolutionContext(file="/a/b/c.txt", line=1)

    assert resolve_template(template, ctx) == template


def test_substituted_values_are_not_rescanned() -> None:
    ctx = ResolutionContext(file="/tmp/${line}.txt", line=7)

    assert resolve_template("${file}", ctx) == "/tmp/${line}.txt"


def test_context_from_editor_uses_first_workspace_folder() -> None:
    editor = EditorSnapshot(file_name="/work/proj/src/app.py", line=0)

    ctx = ResolutionContext.from_editor(editor, ["/work/proj", "/work/other"])

    assert ctx.line == 1
    assert ctx.workspace_root == "/work/proj"
    assert ctx.relative_file == "./src/app.py"


def test_context_from_editor_without_workspace() -> None:
    ctx = ResolutionContext.from_editor(EditorSnapshot(file_name="/tmp/x.py", line=41))

    assert ctx.line == 42
    assert ctx.workspace_root is None
