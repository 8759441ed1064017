from __future__ import annotations

import base64
from dataclasses import dataclass
from urllib.parse import quote

import requests

from config.constants import (
    COMMIT_MESSAGE_TEMPLATE,
    GITHUB_ACCEPT,
    GITHUB_API_URL,
    UPLOAD_TIMEOUT,
)
from config.exceptions import FileAlreadyExistsError, UploadError, UploadTransportError
from config.settings import RunConfig
from utils.logging import get_logger

logger = get_logger(__name__)


def _mentions_sha(body: str) -> bool:
    """True when a 422 body names the missing ``sha`` field.

    GitHub reports it inside the JSON message string, where the quotes
    arrive escaped (``\\"sha\\"``); a plain ``"sha"`` key is accepted too.
    """
    return '"sha"' in body or '\\"sha\\"' in body


@dataclass
class UploadRecord:
    source_path: str
    destination_path: str
    commit_message: str
    content_b64: str


class GitHubUploader:
    """Create-only writes through the GitHub contents API.

    Every upload is a single PUT without a SHA; an existing file at the
    destination is reported as FileAlreadyExistsError and never overwritten.
    """

    def __init__(self, repo: str, token: str, api_url: str = GITHUB_API_URL, timeout: int = UPLOAD_TIMEOUT):
        self.repo = repo.strip("/")
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_config(cls, cfg: RunConfig) -> "GitHubUploader":
        return cls(repo=cfg.github_repo, token=cfg.github_token, timeout=cfg.upload_timeout)

    def build_record(self, content: bytes, source_path: str, destination_path: str, category: str) -> UploadRecord:
        filename = source_path.replace("\\", "/").rsplit("/", 1)[-1]
        return UploadRecord(
            source_path=source_path,
            destination_path=destination_path,
            commit_message=COMMIT_MESSAGE_TEMPLATE.format(filename=filename, category=category),
            content_b64=base64.b64encode(content).decode("ascii"),
        )

    def contents_url(self, path: str) -> str:
        return f"{self.api_url}/repos/{self.repo}/contents/{quote(path.lstrip('/'))}"

    def upload(self, record: UploadRecord) -> None:
        """PUT the file. Raises an UploadError subclass on any failure."""
        url = self.contents_url(record.destination_path)
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "Accept": GITHUB_ACCEPT,
        }
        payload = {"message": record.commit_message, "content": record.content_b64}

        logger.debug("PUT %s (%d base64 chars)", url, len(record.content_b64))
        try:
            response = requests.put(url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("GitHub request failed: %s", e)
            raise UploadTransportError(f"GitHub PUT request failed: {e}") from e

        if response.status_code >= 400:
            body = response.text
            if response.status_code == 422 and _mentions_sha(body):
                raise FileAlreadyExistsError(
                    f"File already exists at '{record.destination_path}'; updating existing files is not supported",
                    status_code=response.status_code,
                    body=body,
                )
            raise UploadError(
                f"GitHub API error status {response.status_code}: {body[:500]}",
                status_code=response.status_code,
                body=body,
            )

        logger.info("Uploaded %s -> %s/%s", record.source_path, self.repo, record.destination_path)


__all__ = ["GitHubUploader", "UploadRecord"]
