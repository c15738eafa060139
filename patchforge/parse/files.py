from __future__ import annotations

from typing import Iterable, List, Optional

from ..utils.gitignore import build_deny_spec
from ..utils.paths import check_patch_path
from .diffs import parse_unified_diff


def affected_paths(diff_text: str, *, blocked_patterns: Optional[Iterable[str]] = None) -> List[str]:
    """
    List the repository-relative files a diff would touch, de-duplicated, in diff order.

    Every path passes the same static safety checks the orchestrator applies
    (no absolute paths, no '..', nothing matching `blocked_patterns`), so
    callers can snapshot exactly these files before applying.
    Raises DiffParseError or PathViolation.
    """
    spec = build_deny_spec(blocked_patterns)
    seen: List[str] = []
    for fp in parse_unified_diff(diff_text):
        p = check_patch_path(fp.target_path, spec)
        if p not in seen:
            seen.append(p)
    return seen
