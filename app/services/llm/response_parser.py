from __future__ import annotations

import json
import re
from typing import List

from utils.logging import get_logger

logger = get_logger(__name__)

# {"cate": ["a", "b", ...]} with at least one double-quoted element
CATE_PATTERN = re.compile(r'\{\s*"cate"\s*:\s*\[\s*"[^"]+"\s*(?:,\s*"[^"]+"\s*)*\]\s*\}')


class ResponseParser:
    """Extracts the category list from free-form model output."""

    def __init__(self, pattern: re.Pattern = CATE_PATTERN):
        self.pattern = pattern

    def parse_categories(self, response_text: str) -> List[str]:
        """Return the categories of the last decodable {"cate": [...]} object.

        Surrounding prose and code fences are ignored. Text without a match
        yields an empty list.
        """
        if not response_text:
            logger.warning("Empty response text; nothing to parse.")
            return []

        matches = self.pattern.findall(response_text)
        if not matches:
            logger.warning("No category object detected in response: %s", response_text[:200])
            return []
        if len(matches) > 1:
            logger.debug("Found %d category objects; keeping the last one", len(matches))

        categories: List[str] = []
        for match in matches:
            try:
                data = json.loads(match)
            except json.JSONDecodeError as e:
                logger.warning("JSON decode failed for %r: %s", match, e)
                continue
            categories = [str(c) for c in data.get("cate", [])]
        return categories


__all__ = ["ResponseParser", "CATE_PATTERN"]
