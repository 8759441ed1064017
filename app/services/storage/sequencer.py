from __future__ import annotations

import posixpath
from typing import Dict, Mapping, Optional

from helpers.image_utils import sanitize_category
from utils.logging import get_logger

logger = get_logger(__name__)


class CategorySequencer:
    """Per-category file numbering for one pipeline run.

    The counter for a category is the name of the next file uploaded into it.
    ``commit`` is called only after the upload succeeded, so a failed upload
    leaves the number free for the next image. Keys are the unsanitized
    category names; unknown categories start at 0.
    """

    def __init__(self, offsets: Optional[Mapping[str, int]] = None):
        self._table: Dict[str, int] = dict(offsets or {})

    @classmethod
    def from_offsets(cls, offsets: Mapping[str, int]) -> "CategorySequencer":
        sequencer = cls(offsets)
        logger.info("Sequence table seeded: %s", sequencer.snapshot())
        return sequencer

    def peek(self, category: str) -> int:
        return self._table.get(category, 0)

    def commit(self, category: str) -> int:
        """Advance the counter after a successful upload; returns the new value."""
        self._table[category] = self.peek(category) + 1
        return self._table[category]

    def destination_path(self, upload_dir: str, category: str, extension: str) -> str:
        """uploadDir/sanitizedCategory/<counter><extension>, POSIX separators."""
        filename = f"{self.peek(category)}{extension}"
        parts = [p for p in (upload_dir.strip("/"), sanitize_category(category), filename) if p]
        return posixpath.join(*parts)

    def snapshot(self) -> Dict[str, int]:
        return dict(self._table)


__all__ = ["CategorySequencer"]
