# patchforge/commit/locate.py
"""
Anchor-scored search for where a hunk starts in drifted content.

Line numbers in a diff are often stale by the time it is applied. Instead of
trusting the header, every plausible start inside a bounded window is scored
against a handful of weighted anchor lines, and the caller tries the ranked
starts in order with strict application until one fits.
"""
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from .._logging import debug_enabled, resolve_logger
from ..models.diff import AnchorCheck, Hunk, LineKind

__all__ = [
    "SEARCH_RADIUS_LINES",
    "MAX_CANDIDATE_STARTS",
    "build_anchor_checks",
    "nominal_start",
    "score_candidate",
    "locate_candidates",
]

SEARCH_RADIUS_LINES = 200
MAX_CANDIDATE_STARTS = 30
# Below this many anchor hits, widen the net by walking outward from nominal.
MIN_ANCHOR_CANDIDATES = 5

W_CONTEXT_EDGE = 8
W_CONTEXT_PAIR = 6
W_CONTEXT_NEAR_EDGE = 2
W_DELETE_PRIMARY = 6
W_DELETE_FOLLOWING = 4
W_DELETE_ALWAYS = 5


def build_anchor_checks(hunk: Hunk) -> Tuple[List[AnchorCheck], Optional[AnchorCheck]]:
    """
    Derive weighted anchors from a hunk's context and delete lines.

    Offsets are relative to the hunk start in old-file lines. Returns
    (anchors, primary) where `primary` drives candidate generation; it is the
    first context line, or the first deleted line when the hunk has no context.
    """
    context: List[Tuple[int, str]] = []
    removals: List[Tuple[int, str]] = []
    offset = 0
    for ln in hunk.lines:
        if ln.kind is LineKind.CONTEXT:
            context.append((offset, ln.content))
        elif ln.kind is LineKind.DELETE:
            removals.append((offset, ln.content))
        if ln.kind is not LineKind.INSERT:
            offset += 1

    anchors: List[AnchorCheck] = []
    primary: Optional[AnchorCheck] = None

    if context:
        primary = AnchorCheck(context[0][0], context[0][1], W_CONTEXT_EDGE)
        anchors.append(primary)
        anchors.append(AnchorCheck(context[-1][0], context[-1][1], W_CONTEXT_EDGE))

        for a, b in zip(context, context[1:]):
            if b[0] == a[0] + 1:
                anchors.append(AnchorCheck(a[0], a[1], W_CONTEXT_PAIR))
                anchors.append(AnchorCheck(b[0], b[1], W_CONTEXT_PAIR))
                break

        for off, content in context[1:3]:
            anchors.append(AnchorCheck(off, content, W_CONTEXT_NEAR_EDGE))
        for off, content in context[max(0, len(context) - 3) : len(context) - 1]:
            anchors.append(AnchorCheck(off, content, W_CONTEXT_NEAR_EDGE))
    elif removals:
        primary = AnchorCheck(removals[0][0], removals[0][1], W_DELETE_PRIMARY)
        anchors.append(primary)
        for off, content in removals[1:3]:
            anchors.append(AnchorCheck(off, content, W_DELETE_FOLLOWING))

    # Deleted lines are stronger evidence of a wrong offset than context.
    for off, content in removals[:2]:
        anchors.append(AnchorCheck(off, content, W_DELETE_ALWAYS))

    best: Dict[Tuple[int, str], AnchorCheck] = {}
    for a in anchors:
        key = (a.old_offset, a.content)
        if key not in best or a.weight > best[key].weight:
            best[key] = a
    return list(best.values()), primary


def nominal_start(hunk: Hunk, cursor: int) -> int:
    """
    0-based start implied by the header, never behind the cursor.

    A zero-length old range (`-5,0`) names the line *after which* to insert,
    so its start is the header value itself rather than value - 1.
    """
    declared = hunk.old_start if hunk.old_count == 0 else hunk.old_start - 1
    return max(cursor, max(0, declared))


def score_candidate(lines: Sequence[str], start: int, anchors: Sequence[AnchorCheck]) -> int:
    score = 0
    n = len(lines)
    for a in anchors:
        idx = start + a.old_offset
        if 0 <= idx < n and lines[idx] == a.content:
            score += a.weight
        else:
            score -= a.weight
    return score


def locate_candidates(
    lines: Sequence[str],
    hunk: Hunk,
    cursor: int = 0,
    *,
    search_radius: int = SEARCH_RADIUS_LINES,
    max_candidates: int = MAX_CANDIDATE_STARTS,
    logger=None,
    log: bool = False,
) -> List[int]:
    """
    Rank candidate 0-based start indices for `hunk`, best first.

    Candidates come from the nominal header offset, every window position
    matching the primary anchor, and (when those are scarce) an outward walk
    from nominal. Starts whose consumed span would run past end of file are
    dropped. Ranking: anchor score desc, distance from nominal asc, index asc.
    """
    log = resolve_logger(logger=logger, enabled=log, name=__name__)
    n = len(lines)
    nominal = nominal_start(hunk, cursor)
    window_start = max(cursor, nominal - search_radius)
    window_end = min(n + 1, nominal + search_radius + 1)

    anchors, primary = build_anchor_checks(hunk)

    starts = {nominal}
    if primary is not None:
        for i in range(max(0, window_start), min(n, window_end)):
            if lines[i] != primary.content:
                continue
            cand = i - primary.old_offset
            if window_start <= cand < window_end and 0 <= cand <= n:
                starts.add(cand)

    if len(starts) < MIN_ANCHOR_CANDIDATES:
        left, right = nominal - 1, nominal + 1
        while len(starts) < max_candidates and (left >= window_start or right < window_end):
            if right < window_end:
                starts.add(right)
            if left >= window_start:
                starts.add(left)
            right += 1
            left -= 1

    consumed = hunk.consumed_old_line_count
    scored = [
        (s, score_candidate(lines, s, anchors))
        for s in starts
        if 0 <= s <= n and s + consumed <= n
    ]
    scored.sort(key=lambda item: (-item[1], abs(item[0] - nominal), item[0]))

    if debug_enabled(log):
        log.debug(
            f"{hunk.header}: nominal={nominal} window=[{window_start}, {window_end}) "
            f"anchors={len(anchors)} candidates={len(scored)} "
            f"top={[(s, sc) for s, sc in scored[:5]]}"
        )
    return [s for s, _ in scored]
