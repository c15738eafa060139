from .base import PatchforgeError
from .commit import CommitError, FileReadError, FileWriteError
from .parse import DiffParseError, UnsupportedDiffError
from .patch import (
    HunkCountError,
    HunkMismatchError,
    HunkNotFoundError,
    NewFileError,
    PatchFailedError,
)
from .path import PathViolation

__all__ = [
    "PatchforgeError",
    "DiffParseError",
    "UnsupportedDiffError",
    "PathViolation",
    "PatchFailedError",
    "HunkNotFoundError",
    "HunkMismatchError",
    "HunkCountError",
    "NewFileError",
    "CommitError",
    "FileReadError",
    "FileWriteError",
]
