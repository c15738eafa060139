from typing import Iterable, List, Optional

import pathspec

DEFAULT_BLOCKED_PATTERNS: List[str] = [".git/"]


def build_deny_spec(patterns: Optional[Iterable[str]] = None) -> pathspec.PathSpec:
    """
    Compile gitignore-style patterns naming paths a patch may never touch.
    '.git/' is always denied; blank lines and '#' comments are ignored the
    same way a .gitignore file treats them.
    """
    lines: List[str] = list(DEFAULT_BLOCKED_PATTERNS)
    if patterns:
        lines.extend(patterns)
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def is_denied(spec: pathspec.PathSpec, rel_path: str) -> bool:
    return spec.match_file(rel_path.replace("\\", "/"))
