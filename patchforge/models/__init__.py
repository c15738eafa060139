from .diff import AnchorCheck, FilePatch, Hunk, HunkOutcome, LineKind, PatchLine
from .snapshot import TextSnapshot

__all__ = [
    "AnchorCheck",
    "FilePatch",
    "Hunk",
    "HunkOutcome",
    "LineKind",
    "PatchLine",
    "TextSnapshot",
]
