from __future__ import annotations

from pathlib import Path
from typing import Iterable

from config.constants import CJK_RANGE, IMAGE_EXTENSIONS

# (format, predicate) checked in priority order
_SIGNATURES = (
    ("jpeg", lambda d: d.startswith(b"\xff\xd8\xff")),
    ("png", lambda d: d.startswith(b"\x89PNG\r\n\x1a\n")),
    ("gif", lambda d: d.startswith(b"GIF87a") or d.startswith(b"GIF89a")),
    ("bmp", lambda d: d.startswith(b"BM")),
    ("webp", lambda d: d.startswith(b"RIFF") and d[8:12] == b"WEBP"),
)


def is_image_file(filename: str, extensions: Iterable[str] = IMAGE_EXTENSIONS) -> bool:
    """Extension-only check, case insensitive."""
    return Path(filename).suffix.lower() in extensions


def detect_image_format(data: bytes) -> str:
    """Sniff the image format from its magic bytes.

    Returns one of jpeg, png, gif, bmp, webp, or "unknown" when fewer than
    12 bytes are available or no signature matches.
    """
    if len(data) < 12:
        return "unknown"
    for fmt, matches in _SIGNATURES:
        if matches(data):
            return fmt
    return "unknown"


def image_mime_type(data: bytes) -> str:
    return f"image/{detect_image_format(data)}"


def _is_path_safe(ch: str) -> bool:
    if ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ("0" <= ch <= "9") or ch == " ":
        return True
    return CJK_RANGE[0] <= ord(ch) <= CJK_RANGE[1]


def sanitize_category(category: str) -> str:
    """Make a category name usable as a single path segment.

    Unsupported characters and spaces become underscores, then leading and
    trailing underscores are trimmed: "风景 / test!" -> "风景___test".
    """
    mapped = "".join(ch if _is_path_safe(ch) else "_" for ch in category)
    return mapped.replace(" ", "_").strip("_")


__all__ = ["is_image_file", "detect_image_format", "image_mime_type", "sanitize_category"]
