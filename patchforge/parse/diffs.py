# patchforge/parse/diffs.py
"""
Unified-diff tokenizer.

The scan is a small state machine (OUTSIDE -> IN_FILE -> IN_HUNK). Each
transition method consumes one line, mutates the builders for the entry being
assembled, and returns the next state. Builders are frozen into immutable
FilePatch/Hunk objects only after the whole text has been accepted.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple

from .._logging import resolve_logger
from ..errors.parse import DiffParseError, UnsupportedDiffError
from ..models.diff import FilePatch, Hunk, LineKind, PatchLine
from ..utils.text import normalize_to_lf

__all__ = ["DiffParser", "ScanState", "parse_unified_diff", "parse_hunk_header", "parse_range"]

DEV_NULL = "/dev/null"

_UNSUPPORTED_PREFIXES = (
    "rename from ",
    "rename to ",
    "copy from ",
    "copy to ",
    "GIT binary patch",
    "Binary files ",
)

_GIT_HEADER_RE = re.compile(r"^diff --git a/(.+?) b/(.+?)\s*$")

_KIND_BY_PREFIX = {kind.prefix: kind for kind in LineKind}


class ScanState(Enum):
    OUTSIDE = auto()
    IN_FILE = auto()
    IN_HUNK = auto()


@dataclass
class _HunkBuilder:
    old_start: int
    old_count: int
    new_start: int
    new_count: int
    lines: List[PatchLine] = field(default_factory=list)

    def build(self) -> Hunk:
        return Hunk(self.old_start, self.old_count, self.new_start, self.new_count, tuple(self.lines))


@dataclass
class _FileBuilder:
    old_path: str = ""
    new_path: str = ""
    is_new_file: bool = False
    is_delete_file: bool = False
    old_no_newline_at_end: bool = False
    new_no_newline_at_end: bool = False
    seen_old_header: bool = False
    seen_new_header: bool = False
    git_old_path: str = ""
    git_new_path: str = ""
    hunks: List[_HunkBuilder] = field(default_factory=list)

    @property
    def label(self) -> str:
        return self.new_path or self.old_path or self.git_new_path or self.git_old_path or "(unnamed)"

    def build(self) -> FilePatch:
        old_path, new_path = self.old_path, self.new_path
        if not self.seen_old_header and not self.seen_new_header:
            # Extended-header-only entries: fall back to the `diff --git` paths.
            old_path = "" if self.is_new_file else self.git_old_path
            new_path = "" if self.is_delete_file else self.git_new_path
        return FilePatch(
            old_path=old_path,
            new_path=new_path,
            is_new_file=self.is_new_file,
            is_delete_file=self.is_delete_file,
            old_no_newline_at_end=self.old_no_newline_at_end,
            new_no_newline_at_end=self.new_no_newline_at_end,
            hunks=tuple(h.build() for h in self.hunks),
        )


def parse_path_token(token: str) -> Tuple[str, bool]:
    """
    Parse the path after `--- ` / `+++ `. Returns (path, is_dev_null).
    Drops a tab-separated timestamp, surrounding quotes and one `a/`/`b/` prefix.
    """
    token = token.split("\t", 1)[0].strip()
    if len(token) >= 2 and token[0] == token[-1] == '"':
        token = token[1:-1]
    if token == DEV_NULL:
        return "", True
    if len(token) >= 2 and token[0] in "ab" and token[1] == "/":
        token = token[2:]
    return token.strip(), False


def parse_range(token: str) -> Tuple[int, int]:
    """'12,3' -> (12, 3); '12' -> (12, 1). Raises ValueError on malformed input."""
    start, sep, count = token.partition(",")
    if not start.isdigit() or (sep and not count.isdigit()):
        raise ValueError(f"bad range token {token!r}")
    return int(start), int(count) if sep else 1


def parse_hunk_header(line: str) -> _HunkBuilder:
    """Parse `@@ -a[,b] +c[,d] @@ [section]` into a hunk builder."""

    def fail(reason: str) -> DiffParseError:
        return DiffParseError(f"Failed to parse hunk header:\n{reason}\n\nLine: {line}")

    second = line.find("@@", 2)
    if not line.startswith("@@") or second < 0:
        raise fail("Invalid @@ header format.")
    parts = line[2:second].split()
    if len(parts) < 2:
        raise fail("Invalid @@ header tokens.")
    if not parts[0].startswith("-") or not parts[1].startswith("+"):
        raise fail("Missing -old/+new in @@ header.")
    try:
        old_start, old_count = parse_range(parts[0][1:])
        new_start, new_count = parse_range(parts[1][1:])
    except ValueError:
        raise fail("Failed to parse hunk ranges.") from None
    return _HunkBuilder(old_start, old_count, new_start, new_count)


class DiffParser:
    """Single-use parser; call `parse` once per diff text."""

    def __init__(self, *, allow_headerless: bool = False) -> None:
        self.allow_headerless = allow_headerless
        self.files: List[_FileBuilder] = []
        self.current: Optional[_FileBuilder] = None
        self.hunk: Optional[_HunkBuilder] = None
        self.last_kind: Optional[LineKind] = None

    # ---------- driver ----------

    def parse(self, text: str) -> List[FilePatch]:
        lines = normalize_to_lf(text).split("\n")
        state = ScanState.OUTSIDE
        for i, line in enumerate(lines):
            next_line = lines[i + 1] if i + 1 < len(lines) else ""
            state = self.step(state, line, next_line)
        return self.finish()

    def step(self, state: ScanState, line: str, next_line: str = "") -> ScanState:
        if line.startswith("diff --git "):
            return self.on_git_header(line)
        if line.startswith(_UNSUPPORTED_PREFIXES):
            raise UnsupportedDiffError(
                "Unsupported diff operation detected (rename/copy/binary patch).\n\nLine: " + line
            )

        if state is ScanState.OUTSIDE:
            if line.startswith("--- "):
                self._start_file()
                return self.on_old_header(line)
            if self.allow_headerless and line.startswith("@@ "):
                self._start_file()
                return self.on_hunk_header(line)
            return state

        if line.startswith("--- "):
            # Inside a hunk, `--- x` is a deleted "-- x" line unless a `+++` header follows.
            if state is ScanState.IN_HUNK and not next_line.startswith("+++ "):
                return self.on_body_line(line)
            if self.current.seen_old_header or self.current.hunks:
                self._start_file()
            return self.on_old_header(line)
        if line.startswith("+++ "):
            if state is ScanState.IN_HUNK:
                return self.on_body_line(line)
            return self.on_new_header(line)
        if line.startswith("@@ "):
            return self.on_hunk_header(line)
        if line.startswith("\\"):
            return self.on_newline_marker(state)

        if state is ScanState.IN_FILE:
            if line.startswith("deleted file mode"):
                self.current.is_delete_file = True
            elif line.startswith("new file mode"):
                self.current.is_new_file = True
            return state

        return self.on_body_line(line)

    # ---------- transitions ----------

    def _start_file(self) -> _FileBuilder:
        self.current = _FileBuilder()
        self.files.append(self.current)
        self.hunk = None
        self.last_kind = None
        return self.current

    def on_git_header(self, line: str) -> ScanState:
        fb = self._start_file()
        m = _GIT_HEADER_RE.match(line)
        if m:
            fb.git_old_path, fb.git_new_path = m.group(1), m.group(2)
        return ScanState.IN_FILE

    def on_old_header(self, line: str) -> ScanState:
        path, is_null = parse_path_token(line[4:])
        self.current.old_path = path
        self.current.seen_old_header = True
        if is_null:
            self.current.is_new_file = True
        self.hunk = None
        self.last_kind = None
        return ScanState.IN_FILE

    def on_new_header(self, line: str) -> ScanState:
        path, is_null = parse_path_token(line[4:])
        self.current.new_path = path
        self.current.seen_new_header = True
        if is_null:
            self.current.is_delete_file = True
        return ScanState.IN_FILE

    def on_hunk_header(self, line: str) -> ScanState:
        self.hunk = parse_hunk_header(line)
        self.current.hunks.append(self.hunk)
        self.last_kind = None
        return ScanState.IN_HUNK

    def on_newline_marker(self, state: ScanState) -> ScanState:
        if self.last_kind is LineKind.DELETE:
            self.current.old_no_newline_at_end = True
        elif self.last_kind is LineKind.INSERT:
            self.current.new_no_newline_at_end = True
        elif self.last_kind is LineKind.CONTEXT:
            self.current.old_no_newline_at_end = True
            self.current.new_no_newline_at_end = True
        return state

    def on_body_line(self, line: str) -> ScanState:
        kind = _KIND_BY_PREFIX.get(line[:1])
        if kind is not None:
            self.hunk.lines.append(PatchLine(kind, line[1:]))
            self.last_kind = kind
        # Blank lines and stray text (e.g. `index ...`) inside a hunk are ignored.
        return ScanState.IN_HUNK

    # ---------- validation ----------

    def finish(self) -> List[FilePatch]:
        for fb in self.files:
            if fb.is_new_file and fb.is_delete_file:
                raise DiffParseError(
                    f"Patch indicates both new file and delete file for the same entry: {fb.label}"
                )
            if not fb.hunks and not fb.is_delete_file:
                raise DiffParseError(f"No hunks found for file entry: {fb.label}")
        return [fb.build() for fb in self.files]


def parse_unified_diff(
    text: str, *, allow_headerless: bool = False, logger=None, log: bool = False
) -> List[FilePatch]:
    """
    Parse unified-diff text into FilePatch objects, in file order.

    All-or-nothing: raises DiffParseError (UnsupportedDiffError for
    rename/copy/binary entries) instead of returning a partial result.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__)
    patches = DiffParser(allow_headerless=allow_headerless).parse(text)
    log.debug(
        f"Parsed {len(patches)} file patch(es), "
        f"{sum(len(fp.hunks) for fp in patches)} hunk(s)"
    )
    return patches
