from .base import PatchforgeError


class PathViolation(PatchforgeError):
    """A patch path is missing, absolute, traverses upward, is denied, or escapes the root."""
