import logging
import textwrap

import pytest

from patchforge.commit import patch_lines, patch_text
from patchforge.errors import DiffParseError, HunkNotFoundError, NewFileError, PatchFailedError
from patchforge.parse import parse_unified_diff


def dd(s: str) -> str:
    return textwrap.dedent(s).lstrip("\n")


def test_patch_text_bare_hunk():
    original = "a\nb\nc\n"
    diff = "@@ -1,3 +1,3 @@\n a\n-b\n+B\n c\n"
    assert patch_text(original, diff) == "a\nB\nc\n"


def test_patch_text_with_headers_and_drift():
    original = "".join(f"{i}\n" for i in range(1, 31))
    diff = dd(
        """
        --- a/nums.txt
        +++ b/nums.txt
        @@ -5,3 +5,3 @@
         20
        -21
        +twenty-one
         22
        """
    )
    out = patch_text(original, diff)
    assert "twenty-one\n" in out
    assert "\n21\n" not in out
    assert out.count("\n") == 30


def test_multi_hunk_keeps_gaps_and_tail():
    original = [f"l{i}" for i in range(1, 13)]
    diff = dd(
        """
        --- a/f
        +++ b/f
        @@ -2,2 +2,2 @@
         l2
        -l3
        +L3
        @@ -9,2 +9,3 @@
         l9
        +inserted
         l10
        """
    )
    (fp,) = parse_unified_diff(diff)
    out = patch_lines(original, fp.hunks)
    assert out == ["l1", "l2", "L3", "l4", "l5", "l6", "l7", "l8", "l9", "inserted", "l10", "l11", "l12"]


def test_later_hunk_cannot_go_behind_earlier_one():
    original = ["x", "y", "x", "y"]
    diff = dd(
        """
        --- a/f
        +++ b/f
        @@ -3,2 +3,2 @@
         x
        -y
        +Y2
        @@ -1,2 +1,2 @@
         x
        -y
        +Y1
        """
    )
    (fp,) = parse_unified_diff(diff)
    with pytest.raises(HunkNotFoundError):
        patch_lines(original, fp.hunks)


def test_not_found_error_names_hunk_and_best_candidate():
    original = ["a", "b", "c"]
    diff = "@@ -1,2 +1,2 @@\n a\n-zzz\n+q\n"
    with pytest.raises(HunkNotFoundError) as ei:
        patch_text("\n".join(original) + "\n", diff)
    msg = str(ei.value)
    assert "Failed to apply hunk (strict match) within search window." in msg
    assert "Hunk: @@ -1,2 +1,2 @@" in msg
    assert "Best candidate (line 1) error:" in msg
    assert 'Expected to delete: "zzz"' in msg
    assert ei.value.header == "@@ -1,2 +1,2 @@"


def test_no_candidates_when_hunk_longer_than_file():
    with pytest.raises(HunkNotFoundError) as ei:
        patch_text("a\n", "@@ -1,3 +1,3 @@\n a\n b\n c\n")
    assert "no candidates" in str(ei.value)


def test_insert_into_empty_content_adds_no_final_newline():
    assert patch_text("", "@@ -0,0 +1,2 @@\n+hello\n+world\n") == "hello\nworld"


def test_crlf_and_missing_final_newline_preserved():
    original = "a\r\nb\r\nc"
    diff = "@@ -1,2 +1,2 @@\n a\n-b\n+B\n"
    assert patch_text(original, diff) == "a\r\nB\r\nc"


def test_no_newline_marker_sets_final_state():
    original = "a\nb\n"
    diff = dd(
        """
        @@ -1,2 +1,2 @@
         a
        -b
        +b
        \\ No newline at end of file
        """
    )
    assert patch_text(original, diff) == "a\nb"


def test_new_file_diff_renders_lines():
    diff = dd(
        """
        --- /dev/null
        +++ b/n.txt
        @@ -0,0 +1,2 @@
        +one
        +two
        """
    )
    assert patch_text("", diff) == "one\ntwo\n"


def test_new_file_with_deletion_rejected():
    diff = "--- /dev/null\n+++ b/n.txt\n@@ -0,0 +1,1 @@\n-x\n+y\n"
    with pytest.raises(NewFileError):
        patch_text("", diff)


def test_delete_file_diff_yields_empty():
    diff = "--- a/x.txt\n+++ /dev/null\n@@ -1 +0,0 @@\n-x\n"
    assert patch_text("x\n", diff) == ""


def test_multi_file_diff_rejected_by_patch_text():
    diff = "--- a/1\n+++ b/1\n@@ -1 +1 @@\n-a\n+b\n--- a/2\n+++ b/2\n@@ -1 +1 @@\n-a\n+b\n"
    with pytest.raises(PatchFailedError):
        patch_text("a\n", diff)


def test_unparseable_diff_raises():
    with pytest.raises(DiffParseError):
        patch_text("a\n", "@@ nonsense @@\n")


@pytest.mark.parametrize(
    "kwargs",
    [{"search_radius": -1}, {"max_candidates": 0}, {"count_tolerance": -2}],
)
def test_invalid_settings_raise_value_error(kwargs):
    with pytest.raises(ValueError):
        patch_lines(["a"], [], **kwargs)


def test_debug_logging_reports_placement(caplog):
    with caplog.at_level(logging.DEBUG):
        patch_text("a\nb\n", "@@ -1,2 +1,2 @@\n a\n-b\n+c\n", log=True)
    assert any("applied at line 1" in rec.getMessage() for rec in caplog.records)


def test_zero_length_old_range_inserts_after_named_line():
    assert patch_text("a\nb\nc\n", "@@ -1,0 +2 @@\n+X\n") == "a\nX\nb\nc\n"
