from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from config.constants import MANIFEST_TIMEOUT, MANIFEST_USER_AGENT
from config.exceptions import ManifestError
from config.settings import LookupConfig
from utils.logging import get_logger

logger = get_logger(__name__)


def fetch_manifest(url: str, token: str = "", timeout: int = MANIFEST_TIMEOUT) -> Dict[str, Any]:
    """GET the manifest and return its top-level JSON object.

    Raises:
        ManifestError: transport failure, non-2xx status, invalid JSON, or a
            top-level value that is not an object.
    """
    headers = {"Accept": "application/json", "User-Agent": MANIFEST_USER_AGENT}
    if token:
        headers["Authorization"] = f"token {token}"

    logger.info("Fetching manifest from %s", url)
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
    except requests.RequestException as e:
        raise ManifestError(f"Failed to fetch manifest: {e}") from e

    if not response.ok:
        raise ManifestError(
            f"Failed to fetch manifest. Status: {response.status_code}. Check GITHUB_FILE_URL."
        )

    try:
        data = response.json()
    except ValueError as e:
        raise ManifestError(f"Manifest is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ManifestError(
            f"Manifest must be a JSON object mapping categories to URL lists, got {type(data).__name__}"
        )
    return data


def validate_manifest(data: Dict[str, Any]) -> Dict[str, List[str]]:
    """Keep only categories whose value is a list of strings."""
    valid: Dict[str, List[str]] = {}
    for category, links in data.items():
        if isinstance(links, list) and all(isinstance(link, str) for link in links):
            valid[category] = list(links)
        else:
            logger.warning(
                "Skipping category '%s': links must be an array of strings (got %s)",
                category,
                type(links).__name__,
            )
    return valid


class ImageStore:
    """In-memory category -> URL list map, read-only between loads."""

    def __init__(self, url: str, token: str = "", timeout: int = MANIFEST_TIMEOUT):
        self.url = url
        self.token = token
        self.timeout = timeout
        self._images: Dict[str, List[str]] = {}
        self.initialized = False
        self.last_error: Optional[str] = None

    @classmethod
    def from_config(cls, cfg: LookupConfig) -> "ImageStore":
        return cls(url=cfg.manifest_url, token=cfg.token, timeout=cfg.timeout)

    def load(self) -> bool:
        """Fetch and validate the manifest, replacing the current contents.

        Never raises: on failure the store is left empty and uninitialized.
        Returns the new ``initialized`` flag.
        """
        try:
            images = validate_manifest(fetch_manifest(self.url, self.token, self.timeout))
        except ManifestError as e:
            logger.error("Could not load image manifest: %s", e)
            self._images = {}
            self.initialized = False
            self.last_error = str(e)
            return False

        self._images = images
        self.initialized = bool(images)
        self.last_error = None if images else "Manifest contained no valid categories"
        if self.initialized:
            logger.info(
                "Image store initialized: %d categories, %d images",
                len(images), self.total_images,
            )
        else:
            logger.warning("No valid categories in manifest %s", self.url)
        return self.initialized

    @property
    def categories(self) -> List[str]:
        return list(self._images)

    @property
    def total_images(self) -> int:
        return sum(len(links) for links in self._images.values())

    def get(self, category: str) -> Optional[List[str]]:
        return self._images.get(category)


__all__ = ["ImageStore", "fetch_manifest", "validate_manifest"]
