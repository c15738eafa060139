from __future__ import annotations

from typing import List, Sequence

from ..errors.patch import HunkCountError, HunkMismatchError
from ..models.diff import Hunk, HunkOutcome, LineKind

COUNT_TOLERANCE = 5


def validate_hunk_counts(hunk: Hunk, tolerance: int = COUNT_TOLERANCE) -> None:
    """Body-derived line counts must match the @@ header within `tolerance`."""
    consumed = hunk.consumed_old_line_count
    produced = hunk.produced_new_line_count
    if abs(consumed - hunk.old_count) > tolerance or abs(produced - hunk.new_count) > tolerance:
        raise HunkCountError(
            "Hunk count validation failed.\n"
            f"Parsed oldConsumed={consumed}, header oldCount={hunk.old_count}\n"
            f"Parsed newProduced={produced}, header newCount={hunk.new_count}"
        )


def apply_hunk_at(
    lines: Sequence[str],
    hunk: Hunk,
    start: int,
    *,
    count_tolerance: int = COUNT_TOLERANCE,
) -> HunkOutcome:
    """
    Replay `hunk` strictly against `lines` beginning at 0-based `start`.

    Context and delete lines must equal the file line under the read cursor
    exactly. Returns how many old lines were consumed and the lines to emit in
    their place; raises HunkMismatchError with the 1-based line number and the
    expected/actual text, or HunkCountError.
    """
    n = len(lines)
    if start < 0 or start > n:
        raise HunkMismatchError(f"Invalid hunk start index: {start} (file has {n} lines).")

    idx = start
    produced: List[str] = []
    for pl in hunk.lines:
        if pl.kind is LineKind.INSERT:
            produced.append(pl.content)
            continue

        is_context = pl.kind is LineKind.CONTEXT
        if idx >= n:
            if is_context:
                msg = f'Context line expected but reached end of file.\nExpected: "{pl.content}"'
            else:
                msg = f'Delete line expected but reached end of file.\nExpected to delete: "{pl.content}"'
            raise HunkMismatchError(msg, line_number=idx + 1, expected=pl.content)

        actual = lines[idx]
        if actual != pl.content:
            if is_context:
                msg = (
                    "Context mismatch.\n"
                    f"At line {idx + 1}\n"
                    f'Expected: "{pl.content}"\n'
                    f'Actual:   "{actual}"'
                )
            else:
                msg = (
                    "Delete mismatch.\n"
                    f"At line {idx + 1}\n"
                    f'Expected to delete: "{pl.content}"\n'
                    f'Actual:            "{actual}"'
                )
            raise HunkMismatchError(msg, line_number=idx + 1, expected=pl.content, actual=actual)

        if is_context:
            produced.append(actual)
        idx += 1

    validate_hunk_counts(hunk, count_tolerance)
    return HunkOutcome(consumed=idx - start, produced=produced)
