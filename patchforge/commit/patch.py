# patchforge/commit/patch.py
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .._logging import resolve_logger
from ..errors.patch import HunkNotFoundError, NewFileError, PatchFailedError
from ..models.diff import FilePatch, Hunk, LineKind
from ..models.snapshot import TextSnapshot
from ..parse.diffs import parse_unified_diff
from .hunks import COUNT_TOLERANCE, apply_hunk_at
from .locate import MAX_CANDIDATE_STARTS, SEARCH_RADIUS_LINES, locate_candidates

__all__ = ["patch_lines", "patch_text", "build_new_file_lines", "final_newline_state"]


def check_settings(search_radius: int, max_candidates: int, count_tolerance: int) -> None:
    if search_radius < 0:
        raise ValueError("search_radius must be >= 0")
    if max_candidates < 1:
        raise ValueError("max_candidates must be >= 1")
    if count_tolerance < 0:
        raise ValueError("count_tolerance must be >= 0")


def patch_lines(
    original_lines: Sequence[str],
    hunks: Iterable[Hunk],
    *,
    search_radius: int = SEARCH_RADIUS_LINES,
    max_candidates: int = MAX_CANDIDATE_STARTS,
    count_tolerance: int = COUNT_TOLERANCE,
    logger=None,
    log: bool = False,
) -> List[str]:
    """
    Apply hunks left to right over LF-normalized lines and return the new lines.

    A monotonic cursor over the old lines keeps hunks from overlapping or going
    backwards. For each hunk the ranked candidates are tried with strict
    application; the first that fits wins. Unchanged lines between hunks and
    the file tail are copied through verbatim.

    Raises HunkNotFoundError (carrying the hunk header) when no candidate fits.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)
    check_settings(search_radius, max_candidates, count_tolerance)

    out: List[str] = []
    cursor = 0
    for number, hunk in enumerate(hunks, 1):
        candidates = locate_candidates(
            original_lines,
            hunk,
            cursor,
            search_radius=search_radius,
            max_candidates=max_candidates,
            logger=log,
        )
        if not candidates:
            raise HunkNotFoundError(
                f"Failed to locate hunk start (no candidates).\nHunk: {hunk.header}", hunk.header
            )

        best_error: Optional[PatchFailedError] = None
        best_start = -1
        for start in candidates[:max_candidates]:
            if start < cursor:
                continue
            try:
                outcome = apply_hunk_at(original_lines, hunk, start, count_tolerance=count_tolerance)
            except PatchFailedError as e:
                if best_error is None:
                    best_error, best_start = e, start
                continue
            out.extend(original_lines[cursor:start])
            out.extend(outcome.produced)
            log.debug(
                f"Hunk #{number} {hunk.header} applied at line {start + 1} "
                f"(declared {hunk.old_start}, consumed {outcome.consumed})"
            )
            cursor = start + outcome.consumed
            break
        else:
            detail = (
                f"Best candidate (line {best_start + 1}) error:\n{best_error}"
                if best_error is not None
                else "No candidate start at or after the previous hunk."
            )
            raise HunkNotFoundError(
                "Failed to apply hunk (strict match) within search window.\n\n"
                f"Hunk: {hunk.header}\n\n{detail}",
                hunk.header,
            ) from best_error

    out.extend(original_lines[cursor:])
    return out


def build_new_file_lines(fp: FilePatch) -> List[str]:
    """Collect a new file's lines: every hunk line must be an insertion or context."""
    lines: List[str] = []
    for hunk in fp.hunks:
        for pl in hunk.lines:
            if pl.kind is LineKind.DELETE:
                raise NewFileError("New file patch contains deletions, which is not supported safely.")
            lines.append(pl.content)
    return lines


def final_newline_state(fp: FilePatch, original: TextSnapshot) -> bool:
    """
    A diff only pins the final newline when it carries a "\\ No newline" marker,
    in which case the new side decides. Otherwise keep the original's state
    (an empty original has none).
    """
    if fp.has_newline_marker:
        return not fp.new_no_newline_at_end
    return original.ended_with_newline


def patch_text(
    content: str,
    diff_text: str,
    *,
    search_radius: int = SEARCH_RADIUS_LINES,
    max_candidates: int = MAX_CANDIDATE_STARTS,
    count_tolerance: int = COUNT_TOLERANCE,
    logger=None,
    log: bool = False,
) -> str:
    """
    Apply a single-file unified diff to an in-memory string.

    File headers are optional; bare `@@` hunks are accepted. The result keeps
    the input's dominant line ending and trailing-newline state (subject to
    any "\\ No newline at end of file" marker). A delete-file diff yields "".

    Raises DiffParseError or a PatchFailedError subclass.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)
    patches = parse_unified_diff(diff_text, allow_headerless=True, logger=log)
    if len(patches) != 1:
        raise PatchFailedError(f"Expected a single-file diff, got {len(patches)} file entries.")
    fp = patches[0]

    if fp.is_delete_file:
        return ""
    if fp.is_new_file:
        return TextSnapshot().render(build_new_file_lines(fp), not fp.new_no_newline_at_end)

    snap = TextSnapshot.from_text(content)
    new_lines = patch_lines(
        snap.lines,
        fp.hunks,
        search_radius=search_radius,
        max_candidates=max_candidates,
        count_tolerance=count_tolerance,
        logger=log,
    )
    return snap.render(new_lines, final_newline_state(fp, snap))
