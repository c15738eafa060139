from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple


class LineKind(Enum):
    """Tag of one hunk body line, resolved once from its prefix character."""

    CONTEXT = " "
    DELETE = "-"
    INSERT = "+"

    @property
    def prefix(self) -> str:
        return self.value


@dataclass(frozen=True)
class PatchLine:
    kind: LineKind
    content: str  # without prefix or line terminator

    def __str__(self) -> str:
        return self.kind.prefix + self.content


@dataclass(frozen=True)
class Hunk:
    """One `@@ -a,b +c,d @@` block and its tagged body lines."""

    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: Tuple[PatchLine, ...] = ()

    @property
    def consumed_old_line_count(self) -> int:
        return sum(1 for ln in self.lines if ln.kind is not LineKind.INSERT)

    @property
    def produced_new_line_count(self) -> int:
        return sum(1 for ln in self.lines if ln.kind is not LineKind.DELETE)

    @property
    def header(self) -> str:
        return f"@@ -{self.old_start},{self.old_count} +{self.new_start},{self.new_count} @@"


@dataclass(frozen=True)
class FilePatch:
    """All hunks targeting one file, plus the header-derived flags."""

    old_path: str = ""
    new_path: str = ""
    is_new_file: bool = False
    is_delete_file: bool = False
    # "\ No newline at end of file" markers.
    old_no_newline_at_end: bool = False
    new_no_newline_at_end: bool = False
    hunks: Tuple[Hunk, ...] = ()

    @property
    def target_path(self) -> str:
        return self.new_path or self.old_path

    @property
    def has_newline_marker(self) -> bool:
        return self.old_no_newline_at_end or self.new_no_newline_at_end


@dataclass(frozen=True)
class AnchorCheck:
    """A line expected at `old_offset` from a candidate hunk start, weighted for scoring."""

    old_offset: int
    content: str
    weight: int


@dataclass
class HunkOutcome:
    """Result of replaying one hunk: old lines consumed and new lines produced."""

    consumed: int
    produced: List[str] = field(default_factory=list)
