"""
Diff Generator Service - Line diffs for before/after code comparison
"""

from __future__ import annotations

import re

from models.diff import DiffKind, DiffLine, DiffResult, DiffStats, NumberedDiffLine

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

_PREFIXES = {
    DiffKind.SAME: "  ",
    DiffKind.ADD: "+ ",
    DiffKind.REMOVE: "- ",
}


def split_lines(text: str) -> list[str]:
    """Split text on line breaks. An empty text is a single empty line."""
    return _LINE_BREAK.split(text)


def diff_lines(original: str, modified: str) -> list[DiffLine]:
    """
    Walk both texts line by line and tag each line as same, remove or add.

    Positional, not a minimal edit script: lines are only matched when they
    sit at the current cursor of both texts, so an insertion near the top
    turns every following line into a remove/add pair.
    """
    old = split_lines(original)
    new = split_lines(modified)
    result: list[DiffLine] = []
    i = j = 0

    while i < len(old) or j < len(new):
        if i < len(old) and j < len(new) and old[i] == new[j]:
            result.append(DiffLine(kind=DiffKind.SAME, content=old[i]))
            i += 1
            j += 1
            continue

        if i < len(old):
            result.append(DiffLine(kind=DiffKind.REMOVE, content=old[i]))
            i += 1
        if j < len(new):
            result.append(DiffLine(kind=DiffKind.ADD, content=new[j]))
            j += 1

    return result


class DiffGenerator:
    """Generate display-ready line diffs for code modifications"""

    def generate_diff(self, original_content: str, new_content: str) -> DiffResult:
        """Generate structured diff from original and new content"""
        lines = diff_lines(original_content, new_content)
        numbered = self._number_lines(lines)

        return DiffResult(
            lines=numbered,
            stats=self._count(lines),
            unified_diff=self.render_unified(lines),
        )

    def _number_lines(self, lines: list[DiffLine]) -> list[NumberedDiffLine]:
        """Attach 1-indexed original/modified line numbers"""
        old_no = new_no = 0
        numbered = []

        for line in lines:
            old_line = new_line = None
            if line.kind != DiffKind.ADD:
                old_no += 1
                old_line = old_no
            if line.kind != DiffKind.REMOVE:
                new_no += 1
                new_line = new_no

            numbered.append(
                NumberedDiffLine(
                    kind=line.kind,
                    content=line.content,
                    old_line=old_line,
                    new_line=new_line,
                )
            )

        return numbered

    def _count(self, lines: list[DiffLine]) -> DiffStats:
        stats = DiffStats()
        for line in lines:
            if line.kind == DiffKind.ADD:
                stats.added += 1
            elif line.kind == DiffKind.REMOVE:
                stats.removed += 1
            else:
                stats.unchanged += 1
        return stats

    def render_unified(self, lines: list[DiffLine]) -> str:
        """Render diff lines as "+ ", "- " and "  " prefixed text"""
        return "\n".join(f"{_PREFIXES[line.kind]}{line.content}" for line in lines)
