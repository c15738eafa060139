from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from ..utils.text import (
    LF,
    TextEncoding,
    convert_lf_to_eol,
    detect_encoding,
    detect_preferred_eol,
    ends_with_newline,
    join_lf_lines,
    normalize_to_lf,
    split_lf_lines,
)


@dataclass
class TextSnapshot:
    """
    Decoded view of one file: its byte-level conventions plus LF-normalized lines.

    Created once per modified file and discarded after the write. `render` and
    `encode` rebuild output with the same encoding, BOM and preferred EOL.
    """

    encoding: TextEncoding = TextEncoding.UTF8
    has_bom: bool = False
    preferred_eol: str = LF
    ended_with_newline: bool = False
    lines: List[str] = field(default_factory=list)

    @classmethod
    def from_text(cls, text: str) -> "TextSnapshot":
        return cls(
            preferred_eol=detect_preferred_eol(text),
            ended_with_newline=ends_with_newline(text),
            lines=split_lf_lines(normalize_to_lf(text)),
        )

    @classmethod
    def from_bytes(cls, data: bytes) -> "TextSnapshot":
        """Decode raw file bytes. Raises UnicodeDecodeError on invalid input."""
        encoding, has_bom, bom_len = detect_encoding(data)
        text = data[bom_len:].decode(encoding.codec)
        snap = cls.from_text(text)
        snap.encoding = encoding
        snap.has_bom = has_bom
        return snap

    def render(self, lines: List[str], end_with_newline: bool) -> str:
        return convert_lf_to_eol(join_lf_lines(lines, end_with_newline), self.preferred_eol)

    def encode(self, lines: List[str], end_with_newline: bool) -> bytes:
        body = self.render(lines, end_with_newline).encode(self.encoding.codec)
        return (self.encoding.bom if self.has_bom else b"") + body
