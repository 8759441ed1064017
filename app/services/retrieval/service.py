from __future__ import annotations

from typing import Any, Dict, List, Optional

from config.constants import IMAGE_LOOKUP_TOOL
from config.exceptions import CategoryNotFoundError
from services.retrieval.manifest_loader import ImageStore
from services.retrieval.sampler import Sampler
from utils.logging import get_logger

logger = get_logger(__name__)

NOT_INITIALIZED_MESSAGE = (
    "Error: Image store is not yet initialized. Please check the server logs for loading errors."
)


def text_result(texts: List[str], is_error: bool = False) -> Dict[str, Any]:
    return {
        "content": [{"type": "text", "text": t} for t in texts],
        "isError": is_error,
    }


def coerce_num(raw: Any) -> int:
    """Requested count as an int >= 1; anything unparseable becomes 1."""
    try:
        num = int(raw)
    except (TypeError, ValueError, OverflowError):
        return 1
    return num if num >= 1 else 1


class RetrievalService:
    """Tool-call surface of the image lookup server."""

    def __init__(self, store: ImageStore, sampler: Optional[Sampler] = None):
        self.store = store
        self.sampler = sampler or Sampler(store)
        self.tools = [IMAGE_LOOKUP_TOOL]

    def list_tools(self) -> List[Dict[str, Any]]:
        return list(self.tools)

    def get_image_link(self, category: str, num: int = 1) -> Dict[str, Any]:
        if not self.store.initialized:
            return text_result([NOT_INITIALIZED_MESSAGE], is_error=True)
        try:
            links = self.sampler.sample(category, num)
        except CategoryNotFoundError as e:
            logger.info("Unknown category requested: %r", category)
            return text_result([f"Error: {e}"], is_error=True)
        logger.debug("get_image_link(%r, %d) -> %d links", category, num, len(links))
        return text_result(links)

    def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Dispatch one tool call; errors come back as isError results."""
        arguments = arguments or {}
        try:
            if name == IMAGE_LOOKUP_TOOL["name"]:
                category = arguments.get("category")
                if not isinstance(category, str):
                    return text_result(["Error: 'category' is required and must be a string."], is_error=True)
                return self.get_image_link(category, coerce_num(arguments.get("num")))
            return text_result([f"Unknown tool: {name}"], is_error=True)
        except Exception as e:
            logger.exception("Tool %s failed", name)
            return text_result([f"Tool execution error: {e}"], is_error=True)


__all__ = ["RetrievalService", "text_result", "coerce_num", "NOT_INITIALIZED_MESSAGE"]
