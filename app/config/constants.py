from __future__ import annotations

import os
from typing import Any, Optional

# --------------- Classification pipeline ---------------
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png")

SUPPORTED_LLM_TYPES = ("gemini",)
DEFAULT_LLM_TYPE = "gemini"
DEFAULT_MODEL_NAME = "gemini-2.5-flash"

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"
GEMINI_API_VERSION = "v1beta"
# Generation on large images can take minutes
MODEL_TIMEOUT = int(os.getenv("MODEL_TIMEOUT", "300"))

# --------------- Remote store (GitHub) ---------------
GITHUB_API_URL = "https://api.github.com"
GITHUB_ACCEPT = "application/vnd.github.v3+json"
UPLOAD_TIMEOUT = int(os.getenv("UPLOAD_TIMEOUT", "60"))
COMMIT_MESSAGE_TEMPLATE = "[PhotoClassifier] Classify and upload {filename} to category {category}"

# Sanitized path segments keep ASCII letters, digits, space and this CJK block
CJK_RANGE = (0x4E00, 0x9FA5)

# --------------- Retrieval service ---------------
MANIFEST_URL = os.getenv(
    "GITHUB_FILE_URL",
    "https://raw.githubusercontent.com/example/repo/main/image_links.json",
)
MANIFEST_TIMEOUT = int(os.getenv("MANIFEST_TIMEOUT", "30"))
MANIFEST_USER_AGENT = "photo-classifier-lookup"

SERVER_NAME = "photo-classifier/image-lookup"
SERVER_VERSION = "1.0.0"

IMAGE_LOOKUP_TOOL = {
    "name": "get_image_link",
    "description": "Retrieves multiple public image URLs by category and number of image.",
    "inputSchema": {
        "type": "object",
        "properties": {
            "category": {
                "type": "string",
                "description": "The name of the category, which corresponds to a key in the loaded JSON file.",
            },
            "num": {
                "type": "integer",
                "description": "The number of image links to retrieve from the category. Default is 1.",
                "minimum": 1,
            },
        },
        "required": ["category"],
    },
}


def get_int_env(key: str, default: Optional[int] = None) -> Optional[int]:
    raw = os.getenv(key)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def parse_bool(raw: Any) -> bool:
    """Accept a real bool, or one of 1/true/yes/on (any case) as true."""
    if isinstance(raw, bool):
        return raw
    if raw is None:
        return False
    return str(raw).strip().lower() in ("1", "true", "yes", "on")


def get_bool_env(key: str, default: bool = False) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return parse_bool(raw)


__all__ = [
    "IMAGE_EXTENSIONS",
    "SUPPORTED_LLM_TYPES",
    "DEFAULT_LLM_TYPE",
    "DEFAULT_MODEL_NAME",
    "GEMINI_BASE_URL",
    "GEMINI_API_VERSION",
    "MODEL_TIMEOUT",
    "GITHUB_API_URL",
    "GITHUB_ACCEPT",
    "UPLOAD_TIMEOUT",
    "COMMIT_MESSAGE_TEMPLATE",
    "CJK_RANGE",
    "MANIFEST_URL",
    "MANIFEST_TIMEOUT",
    "MANIFEST_USER_AGENT",
    "SERVER_NAME",
    "SERVER_VERSION",
    "IMAGE_LOOKUP_TOOL",
    "get_int_env",
    "get_bool_env",
    "parse_bool",
]
