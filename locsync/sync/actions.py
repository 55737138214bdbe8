"""locsync – Sync action log.

An explicit accumulator threaded through one sync run and returned to the
caller. Nothing here is module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

ActionType = Literal["add", "remove", "update", "missing"]


@dataclass(frozen=True)
class SyncAction:
    """One reconciliation step, in the order it was decided."""
    type: ActionType
    file: str
    key: str
    value: str | None = None
    detail: str | None = None

    def describe(self) -> str:
        detail = f" ({self.detail})" if self.detail else ""
        if self.type == "add":
            value = f" = {self.value}" if self.value is not None else ""
            return f"+ Add: {self.key}{value}{detail}"
        if self.type == "remove":
            return f"- Remove: {self.key}{detail}"
        if self.type == "missing":
            return f"! Missing: {self.key}{detail}"
        return f"~ Update: {self.key}{detail}"


@dataclass(frozen=True)
class SyncFailure:
    """A domain that could not be processed."""
    domain: str
    file: str | None
    error: str


@dataclass
class SyncReport:
    """Everything a sync run decided, did, or could not do."""
    dry_run: bool = False
    actions: list[SyncAction] = field(default_factory=list)
    failures: list[SyncFailure] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    sorted_files: list[str] = field(default_factory=list)
    merged_files: list[str] = field(default_factory=list)

    def record(self, action: SyncAction) -> None:
        self.actions.append(action)

    def count_for(self, file: str) -> int:
        return sum(1 for a in self.actions if a.file == file)

    def grouped_by_file(self) -> dict[str, list[SyncAction]]:
        """Actions grouped by file, files in first-seen order."""
        grouped: dict[str, list[SyncAction]] = {}
        for action in self.actions:
            grouped.setdefault(action.file, []).append(action)
        return grouped

    @property
    def in_sync(self) -> bool:
        return not self.actions
