from .base import PatchforgeError


class DiffParseError(PatchforgeError):
    """Malformed unified-diff text (bad headers, missing hunks, conflicting flags)."""


class UnsupportedDiffError(DiffParseError):
    """The diff uses an operation the engine refuses: rename, copy or binary patch."""
