import pytest

from patchforge.commit.locate import (
    W_CONTEXT_EDGE,
    W_DELETE_ALWAYS,
    W_DELETE_PRIMARY,
    build_anchor_checks,
    locate_candidates,
    nominal_start,
    score_candidate,
)
from patchforge.commit.hunks import apply_hunk_at
from patchforge.errors import HunkMismatchError
from patchforge.models import Hunk, LineKind, PatchLine


def hunk(old_start, old_count, new_start, new_count, *body):
    kinds = {" ": LineKind.CONTEXT, "-": LineKind.DELETE, "+": LineKind.INSERT}
    return Hunk(
        old_start,
        old_count,
        new_start,
        new_count,
        tuple(PatchLine(kinds[b[0]], b[1:]) for b in body),
    )


def test_anchor_weights_for_context_hunk():
    h = hunk(1, 3, 1, 3, " a", "-b", "+B", " c")
    anchors, primary = build_anchor_checks(h)
    by_key = {(a.old_offset, a.content): a.weight for a in anchors}
    assert primary.content == "a" and primary.old_offset == 0
    assert by_key[(0, "a")] == W_CONTEXT_EDGE
    assert by_key[(2, "c")] == W_CONTEXT_EDGE
    assert by_key[(1, "b")] == W_DELETE_ALWAYS
    # one entry per (offset, content)
    assert len(by_key) == len(anchors)


def test_delete_only_hunk_uses_first_deletion_as_primary():
    h = hunk(4, 2, 4, 0, "-x", "-y")
    anchors, primary = build_anchor_checks(h)
    assert primary.content == "x"
    weights = {(a.old_offset, a.content): a.weight for a in anchors}
    assert weights[(0, "x")] == W_DELETE_PRIMARY
    assert weights[(1, "y")] == W_DELETE_ALWAYS


def test_insert_only_hunk_has_no_anchors():
    anchors, primary = build_anchor_checks(hunk(2, 0, 3, 1, "+new"))
    assert anchors == [] and primary is None


def test_nominal_start_conventions():
    assert nominal_start(hunk(5, 2, 5, 2, " a", " b"), 0) == 4
    assert nominal_start(hunk(5, 0, 6, 1, "+x"), 0) == 5
    assert nominal_start(hunk(0, 0, 1, 1, "+x"), 0) == 0
    assert nominal_start(hunk(1, 1, 1, 1, " a"), 7) == 7


def test_score_rewards_matches_and_penalizes_misses():
    h = hunk(1, 2, 1, 2, " a", " b")
    anchors, _ = build_anchor_checks(h)
    lines = ["a", "b", "z"]
    assert score_candidate(lines, 0, anchors) > 0
    assert score_candidate(lines, 1, anchors) < 0


def test_exact_position_ranks_first_without_drift():
    lines = [f"line{i}" for i in range(1, 21)]
    h = hunk(10, 3, 10, 3, " line10", "-line11", "+LINE11", " line12")
    assert locate_candidates(lines, h)[0] == 9


@pytest.mark.parametrize("drift", [1, 5, 37, 150, 200])
def test_drifted_position_found_by_anchor(drift):
    lines = [f"pad{i}" for i in range(drift)] + [f"line{i}" for i in range(1, 21)]
    h = hunk(10, 3, 10, 3, " line10", "-line11", "+LINE11", " line12")
    # The header offset is stale: strict replay there fails.
    with pytest.raises(HunkMismatchError):
        apply_hunk_at(lines, h, 9)
    assert locate_candidates(lines, h)[0] == 9 + drift
    assert apply_hunk_at(lines, h, 9 + drift).produced == ["line10", "LINE11", "line12"]


def test_drift_just_past_radius_is_not_found():
    drift = 201
    lines = [f"pad{i}" for i in range(drift)] + [f"line{i}" for i in range(1, 21)]
    h = hunk(10, 3, 10, 3, " line10", "-line11", "+LINE11", " line12")
    assert 9 + drift not in locate_candidates(lines, h)


def test_drift_beyond_radius_is_not_found():
    lines = [f"pad{i}" for i in range(50)] + ["target", "x"]
    h = hunk(1, 2, 1, 2, " target", "-x", "+y")
    ranked = locate_candidates(lines, h, search_radius=10)
    assert 50 not in ranked


def test_candidates_running_past_eof_are_dropped():
    lines = ["a", "b", "c"]
    h = hunk(3, 2, 3, 2, " c", "-d", "+D")
    ranked = locate_candidates(lines, h)
    assert all(s + 2 <= len(lines) for s in ranked)
    assert 2 not in ranked


def test_ties_break_toward_nominal():
    lines = ["dup", "x", "dup", "x", "dup", "x"]
    h = hunk(3, 2, 3, 2, " dup", "-x", "+y")
    assert locate_candidates(lines, h)[0] == 2


def test_cursor_blocks_earlier_candidates():
    lines = ["dup", "x", "dup", "x"]
    h = hunk(1, 2, 1, 2, " dup", "-x", "+y")
    assert locate_candidates(lines, h, cursor=2)[0] == 2
    assert 0 not in locate_candidates(lines, h, cursor=2)


def test_sparse_anchors_fill_outward_up_to_cap():
    lines = [str(i) for i in range(100)]
    h = hunk(50, 1, 50, 1, " nowhere")
    ranked = locate_candidates(lines, h, max_candidates=7)
    assert len(ranked) == 7
    assert ranked[0] == 49
