from .commit import (
    ApplyResult,
    apply_file_patches,
    apply_hunk_at,
    locate_candidates,
    patch_lines,
    patch_text,
    try_apply,
)
from .models import AnchorCheck, FilePatch, Hunk, HunkOutcome, LineKind, PatchLine, TextSnapshot
from .parse import affected_paths, parse_unified_diff
from .utils import contains_path_traversal, is_inside_directory
from .errors import (
    CommitError,
    DiffParseError,
    FileReadError,
    FileWriteError,
    HunkCountError,
    HunkMismatchError,
    HunkNotFoundError,
    NewFileError,
    PatchFailedError,
    PatchforgeError,
    PathViolation,
    UnsupportedDiffError,
)

__version__ = "0.1.0"

__all__ = [
    "try_apply",
    "apply_file_patches",
    "ApplyResult",
    "patch_text",
    "patch_lines",
    "parse_unified_diff",
    "affected_paths",
    "locate_candidates",
    "apply_hunk_at",
    "contains_path_traversal",
    "is_inside_directory",
    "AnchorCheck",
    "FilePatch",
    "Hunk",
    "HunkOutcome",
    "LineKind",
    "PatchLine",
    "TextSnapshot",
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
