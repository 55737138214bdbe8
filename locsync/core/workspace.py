"""locsync – Workspace (filesystem collaborator).

Root-bound file access for every artifact the engine reads or writes.
Each write replaces a whole file; nothing else touches disk.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import structlog

from locsync.core.errors import LocaleFileNotFoundError, WorkspaceViolation

logger = structlog.get_logger()


def dump_json(data: Any) -> str:
    """Serialize a locale tree: 2-space indent, trailing newline."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


class Workspace:
    """File access confined to a project root.

    Enforces:
    - Path validation (no access outside the project root)
    - Whole-file reads and writes (UTF-8)
    - Sorted, hidden-entry-free directory listings
    """

    def __init__(self, root_dir: str | Path) -> None:
        self._root = Path(root_dir).resolve()

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str | Path) -> Path:
        """Resolve a path against the root.

        Raises:
            WorkspaceViolation: If the path escapes the root.
        """
        target = (self._root / path).resolve()
        if target != self._root and self._root not in target.parents:
            raise WorkspaceViolation(f"Path escape attempt: {path}")
        return target

    def relative(self, path: str | Path) -> str:
        """Root-relative POSIX form of a path, for reports."""
        target = self.resolve(path)
        return target.relative_to(self._root).as_posix()

    def exists(self, path: str | Path) -> bool:
        return self.resolve(path).exists()

    def read_text(self, path: str | Path) -> str:
        target = self.resolve(path)
        if not target.is_file():
            raise LocaleFileNotFoundError(self.relative(path))
        return target.read_text(encoding="utf-8")

    def write_text(self, path: str | Path, content: str) -> None:
        target = self.resolve(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        logger.debug("workspace.write", path=self.relative(path))

    def read_json(self, path: str | Path) -> Any:
        return json.loads(self.read_text(path))

    def write_json(self, path: str | Path, data: Any) -> None:
        self.write_text(path, dump_json(data))

    def list_dirs(self, path: str | Path) -> list[str]:
        """Names of non-hidden subdirectories, sorted. Missing dir -> []."""
        target = self.resolve(path)
        if not target.is_dir():
            return []
        return sorted(
            item.name for item in target.iterdir()
            if item.is_dir() and not item.name.startswith(".")
        )

    def list_files(self, path: str | Path, suffix: str = "") -> list[str]:
        """Names of files ending with ``suffix``, sorted. Missing dir -> []."""
        target = self.resolve(path)
        if not target.is_dir():
            return []
        return sorted(
            item.name for item in target.iterdir()
            if item.is_file() and item.name.endswith(suffix)
        )
