# patchforge/commit/core.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence

import pathspec

from .._logging import resolve_logger
from ..errors.base import PatchforgeError
from ..errors.commit import FileReadError
from ..errors.parse import DiffParseError
from ..errors.path import PathViolation
from ..models.diff import FilePatch
from ..models.snapshot import TextSnapshot
from ..parse.diffs import parse_unified_diff
from ..utils.gitignore import build_deny_spec
from ..utils.paths import resolve_target, to_posix
from .hunks import COUNT_TOLERANCE
from .locate import MAX_CANDIDATE_STARTS, SEARCH_RADIUS_LINES
from .patch import build_new_file_lines, check_settings, final_newline_state, patch_lines
from .workspace import DirectWorkspace, StagedWorkspace


@dataclass
class ApplyResult:
    """Outcome of one `try_apply` call."""

    success: bool = False
    # Repository-relative, forward-slash paths actually (or, in a dry run, prospectively) changed.
    touched_files: List[str] = field(default_factory=list)
    error: str = ""
    # Relative path of the entry that failed, when the failure is attributable to one.
    failed_path: Optional[str] = None
    dry_run: bool = False

    def __bool__(self) -> bool:
        return self.success


@dataclass
class _Settings:
    search_radius: int
    max_candidates: int
    count_tolerance: int
    deny_spec: pathspec.PathSpec


def _read_snapshot(ws: DirectWorkspace, full_path: str, rel: str) -> TextSnapshot:
    data = ws.read_bytes(full_path)
    try:
        return TextSnapshot.from_bytes(data)
    except UnicodeDecodeError as e:
        raise FileReadError(f"Cannot decode '{rel}': {e}") from e


def _apply_file_patch(
    project_root: str,
    fp: FilePatch,
    ws: DirectWorkspace,
    settings: _Settings,
    touched: List[str],
    log,
) -> None:
    if fp.is_new_file and fp.is_delete_file:
        raise DiffParseError("Patch indicates both new file and delete file for the same entry.")
    if not fp.target_path:
        raise PathViolation("Missing file paths.")

    rel = to_posix(fp.target_path)
    full_path = resolve_target(project_root, rel, settings.deny_spec)

    def record() -> None:
        if rel not in touched:
            touched.append(rel)

    if fp.is_delete_file:
        if ws.exists(full_path):
            ws.delete(full_path)
            record()
            log.debug(f"Deleted {rel}")
        else:
            log.debug(f"Delete of {rel} skipped: already absent")
        return

    if fp.is_new_file:
        lines = build_new_file_lines(fp)
        # New files: UTF-8 without BOM, LF endings.
        ws.write_bytes(full_path, TextSnapshot().encode(lines, not fp.new_no_newline_at_end))
        record()
        log.debug(f"Created {rel} ({len(lines)} lines)")
        return

    if not ws.exists(full_path):
        raise FileReadError(f"Target file does not exist.\n\nPath: {rel}")

    snap = _read_snapshot(ws, full_path, rel)
    new_lines = patch_lines(
        snap.lines,
        fp.hunks,
        search_radius=settings.search_radius,
        max_candidates=settings.max_candidates,
        count_tolerance=settings.count_tolerance,
        logger=log,
    )
    ws.write_bytes(full_path, snap.encode(new_lines, final_newline_state(fp, snap)))
    record()
    log.debug(f"Modified {rel}: {len(fp.hunks)} hunk(s), {len(snap.lines)} -> {len(new_lines)} lines")


def _failure_message(rel: str, exc: Exception) -> str:
    if isinstance(exc, PathViolation):
        return f"Apply blocked: {exc}"
    if rel:
        return f"Apply failed for file:\n{rel}\n\n{exc}"
    return f"Apply failed: {exc}"


def apply_file_patches(
    project_root: str,
    patches: Sequence[FilePatch],
    *,
    search_radius: int = SEARCH_RADIUS_LINES,
    max_candidates: int = MAX_CANDIDATE_STARTS,
    count_tolerance: int = COUNT_TOLERANCE,
    atomic: bool = False,
    dry_run: bool = False,
    blocked_patterns: Optional[Iterable[str]] = None,
    logger=None,
    log: bool = False,
) -> ApplyResult:
    """
    Apply already-parsed file patches under `project_root`, in order.

    The first failing entry aborts the call. Without `atomic`, entries processed
    before the failure stay written (their paths are in `touched_files`); with
    `atomic`, every entry is computed first and nothing reaches disk unless all
    succeed. `dry_run` computes everything and writes nothing.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)
    check_settings(search_radius, max_candidates, count_tolerance)
    settings = _Settings(search_radius, max_candidates, count_tolerance, build_deny_spec(blocked_patterns))

    ws = StagedWorkspace() if (atomic or dry_run) else DirectWorkspace()
    result = ApplyResult(dry_run=dry_run)

    for fp in patches:
        rel = to_posix(fp.target_path)
        try:
            _apply_file_patch(project_root, fp, ws, settings, result.touched_files, log)
        except (PatchforgeError, OSError) as e:
            log.debug(f"Aborting on {rel or '(no path)'}: {type(e).__name__}")
            result.error = _failure_message(rel, e)
            result.failed_path = rel or None
            if atomic or dry_run:
                # Nothing was written; report nothing as touched.
                result.touched_files = []
            return result

    if dry_run:
        result.success = True
        log.info(f"Dry run: {len(result.touched_files)} file(s) would change")
        return result

    try:
        ws.commit()
    except PatchforgeError as e:
        log.warning(f"Atomic promotion failed and was rolled back: {e}")
        result.error = f"Apply failed: {e}"
        result.touched_files = []
        return result

    result.success = True
    log.info(f"Applied patch: {len(result.touched_files)} file(s) touched")
    return result


def try_apply(
    project_root: str,
    diff_text: str,
    *,
    search_radius: int = SEARCH_RADIUS_LINES,
    max_candidates: int = MAX_CANDIDATE_STARTS,
    count_tolerance: int = COUNT_TOLERANCE,
    atomic: bool = False,
    dry_run: bool = False,
    blocked_patterns: Optional[Iterable[str]] = None,
    logger=None,
    log: bool = False,
) -> ApplyResult:
    """
    Parse unified-diff text and apply it to the tree rooted at `project_root`.

    Args:
        project_root: Directory every patched path must resolve strictly inside.
        diff_text: Git-style unified diff; may touch several files.
        search_radius: Lines either side of a hunk's declared start to search.
        max_candidates: Ranked start positions tried per hunk before giving up.
        count_tolerance: Allowed drift between @@ header counts and hunk bodies.
        atomic: Stage all results and promote them only if every entry succeeds.
        dry_run: Validate and compute without writing anything.
        blocked_patterns: Extra gitignore-style patterns patches may not touch
                          ('.git/' is always blocked).

    Returns:
        ApplyResult. Every expected failure (parse, path safety, location,
        application, I/O) is reported through it rather than raised; invalid
        settings raise ValueError.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__, level=logging.DEBUG)
    check_settings(search_radius, max_candidates, count_tolerance)

    if not diff_text or not diff_text.strip():
        return ApplyResult(error="Apply failed: patch text is empty.", dry_run=dry_run)

    try:
        patches = parse_unified_diff(diff_text, logger=log)
    except DiffParseError as e:
        return ApplyResult(error=f"Apply failed: parse error.\n\n{e}", dry_run=dry_run)

    return apply_file_patches(
        project_root,
        patches,
        search_radius=search_radius,
        max_candidates=max_candidates,
        count_tolerance=count_tolerance,
        atomic=atomic,
        dry_run=dry_run,
        blocked_patterns=blocked_patterns,
        logger=log,
    )
