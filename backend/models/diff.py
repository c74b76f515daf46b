"""Diff-related data models"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class DiffKind(str, Enum):
    """Tag for a single diff line"""

    SAME = "same"
    ADD = "add"
    REMOVE = "remove"


class DiffLine(BaseModel):
    """A single tagged line of a line diff"""

    model_config = ConfigDict(frozen=True)

    kind: DiffKind
    content: str


class NumberedDiffLine(DiffLine):
    """Diff line with its position in the original and modified text"""

    old_line: int | None = None  # 1-indexed, None for "add"
    new_line: int | None = None  # 1-indexed, None for "remove"


class DiffStats(BaseModel):
    """Line counts per diff kind"""

    added: int = 0
    removed: int = 0
    unchanged: int = 0


class DiffResult(BaseModel):
    """Complete line diff between original and modified code"""

    lines: list[NumberedDiffLine]
    stats: DiffStats
    unified_diff: str  # "+ " / "- " / "  " prefixed text
