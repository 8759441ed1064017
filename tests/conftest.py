"""Shared fixtures. Mirrors how the scripts run: app/ on sys.path."""
from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Keep per-run log files out of the working tree
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="photo-classifier-logs-"))
sys.path.insert(0, str(PROJECT_ROOT / "app"))

import pytest  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16
JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 16


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, status_code: int = 200, json_data=None, text: str | None = None):
        self.status_code = status_code
        self._json = json_data
        if text is None:
            import json

            text = json.dumps(json_data) if json_data is not None else ""
        self.text = text

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json


@pytest.fixture
def image_folder(tmp_path):
    folder = tmp_path / "images"
    folder.mkdir()
    return folder
