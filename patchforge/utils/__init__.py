from .gitignore import build_deny_spec, is_denied
from .paths import (
    check_patch_path,
    combine_path,
    contains_path_traversal,
    is_inside_directory,
    resolve_target,
)
from .text import (
    TextEncoding,
    convert_lf_to_eol,
    detect_encoding,
    detect_preferred_eol,
    normalize_to_lf,
)

__all__ = [
    "TextEncoding",
    "build_deny_spec",
    "check_patch_path",
    "combine_path",
    "contains_path_traversal",
    "convert_lf_to_eol",
    "detect_encoding",
    "detect_preferred_eol",
    "is_denied",
    "is_inside_directory",
    "normalize_to_lf",
    "resolve_target",
]
