from __future__ import annotations

from .base import PatchforgeError


class PatchFailedError(PatchforgeError):
    """A hunk could not be applied to the target content."""


class HunkNotFoundError(PatchFailedError):
    """No candidate start inside the search window survived strict application."""

    def __init__(self, message: str, header: str = "") -> None:
        super().__init__(message)
        self.header = header


class HunkMismatchError(PatchFailedError):
    """Context/delete mismatch, premature end of file, or an invalid start index."""

    def __init__(
        self,
        message: str,
        *,
        line_number: int | None = None,
        expected: str | None = None,
        actual: str | None = None,
    ) -> None:
        super().__init__(message)
        self.line_number = line_number
        self.expected = expected
        self.actual = actual


class HunkCountError(PatchFailedError):
    """Parsed hunk body disagrees with its @@ header counts beyond the tolerance."""


class NewFileError(PatchFailedError):
    """A new-file patch contains lines that require prior content."""
