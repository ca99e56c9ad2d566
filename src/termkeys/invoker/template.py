"""Command template placeholder substitution."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from termkeys.host.protocols import EditorSnapshot

# Rendering of a missing workspace root, kept identical to what keybinding
# authors already see from the editor extension.
UNDEFINED = "undefined"

_PLACEHOLDER = re.compile(r"\$\{(line|relativeFile|file|workspaceRoot)\}")


@dataclass(frozen=True)
class ResolutionContext:
    file: str
    line: int
    workspace_root: str | None = None

    @classmethod
    def from_editor(
        cls,
        editor: EditorSnapshot,
        workspace_folders: Sequence[str] = (),
    ) -> ResolutionContext:
        root = workspace_folders[0] if workspace_folders else None
        return cls(file=editor.file_name, line=editor.line + 1, workspace_root=root)

    @property
    def relative_file(self) -> str:
        if self.workspace_root is None:
            return "." + self.file
        return "." + self.file.replace(self.workspace_root, "", 1)

    def values(self) -> dict[str, str]:
        return {
            "line": str(self.line),
            "relativeFile": self.relative_file,
            "file": self.file,
            "workspaceRoot": self.workspace_root if self.workspace_root is not None else UNDEFINED,
        }


def resolve_template(template: str, context: ResolutionContext) -> str:
    values = context.values()
    return _PLACEHOLDER.sub(lambda match: values[match.group(1)], template)
