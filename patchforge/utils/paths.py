import os
import re
from typing import Optional

import pathspec

from ..errors.path import PathViolation
from .gitignore import is_denied

_DRIVE_RE = re.compile(r"^[A-Za-z]:/")


def to_posix(rel_path: str) -> str:
    return rel_path.replace("\\", "/").strip()


def contains_path_traversal(rel_path: str) -> bool:
    """True if any segment of the (slash- or backslash-separated) path is '..'."""
    if not rel_path:
        return False
    return any(seg == ".." for seg in to_posix(rel_path).split("/"))


def is_absolute_patch_path(rel_path: str) -> bool:
    p = to_posix(rel_path)
    return p.startswith("/") or bool(_DRIVE_RE.match(p))


def combine_path(root: str, rel_path: str) -> str:
    """Join a forward-slash relative path onto root, dropping empty segments."""
    parts = [seg for seg in to_posix(rel_path).split("/") if seg]
    return os.path.join(root, *parts)


def is_inside_directory(full_path: str, root: str) -> bool:
    """
    True if `full_path` resolves strictly inside `root`.

    Both sides are canonicalized (symlinks resolved) and compared as a
    case-insensitive prefix that includes the trailing separator, so the root
    itself and sibling directories sharing a name prefix are outside.
    """
    full = os.path.normcase(os.path.realpath(full_path))
    base = os.path.normcase(os.path.realpath(root))
    if not base.endswith(os.sep):
        base += os.sep
    return full.casefold().startswith(base.casefold())


def check_patch_path(rel_path: str, deny_spec: Optional[pathspec.PathSpec] = None) -> str:
    """
    Validate a repository-relative patch path without touching the filesystem.
    Returns the forward-slash form; raises PathViolation.
    """
    if not rel_path:
        raise PathViolation("Missing file paths.")
    p = to_posix(rel_path)
    if "\x00" in p:
        raise PathViolation(f"Path contains a NUL byte: {rel_path!r}")
    if is_absolute_patch_path(p):
        raise PathViolation(f"Absolute paths are not allowed in patches: {rel_path}")
    if contains_path_traversal(p):
        raise PathViolation(f"Path traversal is not allowed in patches: {rel_path}")
    if deny_spec is not None and is_denied(deny_spec, p):
        raise PathViolation(f"Patch touches a blocked path: {p}")
    return p


def resolve_target(root: str, rel_path: str, deny_spec: Optional[pathspec.PathSpec] = None) -> str:
    """
    Validate a repository-relative patch path and return its absolute form.
    Raises PathViolation for absolute paths, '..' traversal, denied paths, or root escapes.
    """
    p = check_patch_path(rel_path, deny_spec)
    full_path = combine_path(os.path.abspath(root), p)
    if not is_inside_directory(full_path, root):
        raise PathViolation(f"File path escapes project root.\n\nPath: {full_path}")
    return full_path
