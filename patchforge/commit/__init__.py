from .core import ApplyResult, apply_file_patches, try_apply
from .hunks import apply_hunk_at
from .locate import locate_candidates
from .patch import patch_lines, patch_text

__all__ = [
    "ApplyResult",
    "apply_file_patches",
    "apply_hunk_at",
    "locate_candidates",
    "patch_lines",
    "patch_text",
    "try_apply",
]
