from .base import PatchforgeError


class CommitError(PatchforgeError):
    """Filesystem-level failure while reading or writing patch targets."""


class FileReadError(CommitError):
    """The modify target is missing or its bytes cannot be decoded."""


class FileWriteError(CommitError):
    """Writing, deleting or promoting a target file failed."""
