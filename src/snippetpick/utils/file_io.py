"""Decoding helpers for snippet files and the extension to language table."""

from __future__ import annotations

import codecs
import locale
from pathlib import PurePath

__all__ = [
    "LANGUAGE_BY_EXTENSION",
    "decode_text",
    "detect_language",
]

_BOM_MAP: dict[bytes, str] = {
    codecs.BOM_UTF8: "utf-8-sig",
    codecs.BOM_UTF32_LE: "utf-32-le",
    codecs.BOM_UTF32_BE: "utf-32-be",
    codecs.BOM_UTF16_LE: "utf-16-le",
    codecs.BOM_UTF16_BE: "utf-16-be",
}

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    "ts": "typescript",
    "js": "javascript",
    "py": "python",
    "java": "java",
    "go": "go",
    "rs": "rust",
    "cpp": "cpp",
    "c": "c",
    "h": "c",
    "hpp": "cpp",
    "cs": "csharp",
    "rb": "ruby",
    "php": "php",
    "swift": "swift",
    "kt": "kotlin",
    "sh": "shell",
    "bash": "bash",
    "zsh": "shell",
    "html": "html",
    "css": "css",
    "json": "json",
    "xml": "xml",
    "sql": "sql",
    "md": "markdown",
    "yaml": "yaml",
    "yml": "yaml",
}


def decode_text(raw: bytes, *, encoding: str | None = None, normalize_newlines: bool = True) -> str:
    """Decode ``raw`` honouring byte-order marks, falling back through common encodings."""

    detected = encoding or _detect_encoding(raw)
    text = raw.decode(detected)
    if text.startswith("\ufeff"):
        text = text[1:]
    if normalize_newlines and "\r" in text:
        text = text.replace("\r\n", "\n").replace("\r", "\n")
    return text


def detect_language(path: str | PurePath | None) -> str | None:
    """Map a file extension to an editor language tag; unknown extensions give ``None``."""

    if not path:
        return None
    suffix = PurePath(path).suffix
    if not suffix:
        return None
    return LANGUAGE_BY_EXTENSION.get(suffix[1:].lower())


def _detect_encoding(raw: bytes) -> str:
    # UTF-32 LE BOM starts with the UTF-16 LE BOM, so order matters in _BOM_MAP.
    for bom, name in _BOM_MAP.items():
        if raw.startswith(bom):
            return name

    preferred = locale.getpreferredencoding(False) or "utf-8"
    seen: set[str] = set()
    for candidate in ("utf-8", preferred, "latin-1"):
        if candidate in seen:
            continue
        seen.add(candidate)
        try:
            raw.decode(candidate)
        except UnicodeDecodeError:
            continue
        return candidate
    return "utf-8"
