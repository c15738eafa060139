from ..errors import DiffParseError, UnsupportedDiffError
from .diffs import DiffParser, ScanState, parse_hunk_header, parse_unified_diff
from .files import affected_paths

__all__ = [
    "DiffParser",
    "ScanState",
    "affected_paths",
    "parse_hunk_header",
    "parse_unified_diff",
    "DiffParseError",
    "UnsupportedDiffError",
]
