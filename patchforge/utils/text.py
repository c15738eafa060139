"""
Pure text helpers shared by the read and write paths: encoding/BOM detection,
line-ending detection and LF normalization.
"""
from __future__ import annotations

import codecs
from enum import Enum
from typing import List, Tuple

LF = "\n"
CRLF = "\r\n"


class TextEncoding(Enum):
    """Encodings a patched file can round-trip through, with their BOM bytes."""

    UTF8 = ("utf-8", b"")
    UTF8_BOM = ("utf-8", codecs.BOM_UTF8)
    UTF16_LE = ("utf-16-le", codecs.BOM_UTF16_LE)
    UTF16_BE = ("utf-16-be", codecs.BOM_UTF16_BE)

    @property
    def codec(self) -> str:
        return self.value[0]

    @property
    def bom(self) -> bytes:
        return self.value[1]


def detect_encoding(data: bytes) -> Tuple[TextEncoding, bool, int]:
    """
    Sniff the byte-order mark. Returns (encoding, has_bom, bom_length).

    Checked in order: UTF-8 BOM, UTF-16 LE, UTF-16 BE; anything else is
    treated as UTF-8 without a BOM.
    """
    if data.startswith(codecs.BOM_UTF8):
        return TextEncoding.UTF8_BOM, True, 3
    if data.startswith(codecs.BOM_UTF16_LE):
        return TextEncoding.UTF16_LE, True, 2
    if data.startswith(codecs.BOM_UTF16_BE):
        return TextEncoding.UTF16_BE, True, 2
    return TextEncoding.UTF8, False, 0


def detect_preferred_eol(text: str) -> str:
    """Majority vote between CRLF and lone LF; CRLF only wins when strictly more common."""
    if not text:
        return LF
    crlf = text.count(CRLF)
    lf = text.count(LF) - crlf
    return CRLF if crlf > lf else LF


def normalize_to_lf(text: str) -> str:
    if not text:
        return ""
    return text.replace(CRLF, LF).replace("\r", LF)


def convert_lf_to_eol(text_lf: str, eol: str) -> str:
    if not text_lf:
        return ""
    if eol == CRLF:
        return text_lf.replace(LF, CRLF)
    return text_lf


def ends_with_newline(text: str) -> bool:
    return text.endswith(("\n", "\r"))


def split_lf_lines(text_lf: str) -> List[str]:
    """
    Split LF-normalized text into lines without a phantom trailing "" element.
    Whether the text ended with a newline is tracked separately by the caller.
    """
    if not text_lf:
        return []
    lines = text_lf.split(LF)
    if text_lf.endswith(LF):
        lines.pop()
    return lines


def join_lf_lines(lines: List[str], end_with_newline: bool) -> str:
    if not lines:
        return ""
    text = LF.join(lines)
    return text + LF if end_with_newline else text
