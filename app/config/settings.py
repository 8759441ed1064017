"""Run configuration for the classifier pipeline and the lookup server.

Two sources are supported:
    * a JSON file using the conf.json layout (``RunConfig.from_file``)
    * environment variables, with ``.env`` loaded by the caller (``RunConfig.from_env``)
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from config.constants import (
    DEFAULT_LLM_TYPE,
    DEFAULT_MODEL_NAME,
    MANIFEST_TIMEOUT,
    MANIFEST_URL,
    MODEL_TIMEOUT,
    SUPPORTED_LLM_TYPES,
    UPLOAD_TIMEOUT,
    get_bool_env,
    get_int_env,
    parse_bool,
)
from config.exceptions import ConfigError
from utils.logging import get_logger

logger = get_logger(__name__)


def split_list(raw: Any) -> List[str]:
    """Split a comma-separated setting, trimming items and dropping empty ones."""
    if not raw:
        return []
    items = raw if isinstance(raw, list) else str(raw).split(",")
    return [str(item).strip() for item in items if str(item).strip()]


def parse_offsets(raw: Any) -> List[int]:
    """Parse the comma-separated starting offsets; unparseable items become 0."""
    offsets: List[int] = []
    if raw is None or raw == "":
        return offsets
    items = raw if isinstance(raw, list) else str(raw).split(",")
    for item in items:
        try:
            offsets.append(int(str(item).strip()))
        except ValueError:
            logger.warning("Invalid class offset %r, using 0", item)
            offsets.append(0)
    return offsets


def _int_setting(data: Dict[str, Any], key: str, default: int) -> int:
    raw = data.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw) or default
    except (TypeError, ValueError, OverflowError) as e:
        raise ConfigError(f"Setting '{key}' must be an integer, got {raw!r}") from e


@dataclass
class RunConfig:
    image_folder: str = ""
    model_token: str = ""
    llm_type: str = DEFAULT_LLM_TYPE
    model_name: str = DEFAULT_MODEL_NAME
    model_custom_url: str = ""
    proxy_url: str = ""
    github_repo: str = ""
    github_token: str = ""
    github_dir: str = ""
    target_classes: List[str] = field(default_factory=list)
    class_idx: List[int] = field(default_factory=list)
    dry_run: bool = False
    model_timeout: int = MODEL_TIMEOUT
    upload_timeout: int = UPLOAD_TIMEOUT

    @classmethod
    def from_env(cls) -> "RunConfig":
        return cls(
            image_folder=os.getenv("IMAGE_FOLDER", ""),
            model_token=os.getenv("MODEL_TOKEN", ""),
            llm_type=os.getenv("LLM_TYPE", DEFAULT_LLM_TYPE),
            model_name=os.getenv("MODEL_NAME", DEFAULT_MODEL_NAME),
            model_custom_url=os.getenv("MODEL_CUSTOM_URL", ""),
            proxy_url=os.getenv("PROXY_URL", ""),
            github_repo=os.getenv("GITHUB_REPO", ""),
            github_token=os.getenv("GITHUB_TOKEN", ""),
            github_dir=os.getenv("GITHUB_DIR", ""),
            target_classes=split_list(os.getenv("TARGET_CLASSES")),
            class_idx=parse_offsets(os.getenv("CLASS_IDX")),
            dry_run=get_bool_env("DRY_RUN"),
            model_timeout=get_int_env("MODEL_TIMEOUT", MODEL_TIMEOUT) or MODEL_TIMEOUT,
            upload_timeout=get_int_env("UPLOAD_TIMEOUT", UPLOAD_TIMEOUT) or UPLOAD_TIMEOUT,
        )

    @classmethod
    def from_file(cls, path: Path | str) -> "RunConfig":
        """Load the JSON config file (conf.json layout)."""
        p = Path(path)
        try:
            data: Dict[str, Any] = json.loads(p.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Failed to read config file '{p}': {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"Failed to parse config file '{p}': {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Config file '{p}' must contain a JSON object")

        return cls(
            image_folder=str(data.get("image_folder") or ""),
            model_token=str(data.get("model_token") or ""),
            llm_type=str(data.get("llm_type") or DEFAULT_LLM_TYPE),
            model_name=str(data.get("model_name") or DEFAULT_MODEL_NAME),
            model_custom_url=str(data.get("model_custom_url") or ""),
            proxy_url=str(data.get("proxy_url") or ""),
            github_repo=str(data.get("git_hub_repo_url") or ""),
            github_token=str(data.get("github_token") or ""),
            github_dir=str(data.get("github_dir") or ""),
            target_classes=split_list(data.get("target_classes")),
            class_idx=parse_offsets(data.get("class_idx")),
            dry_run=parse_bool(data.get("dry_run")),
            model_timeout=_int_setting(data, "model_timeout", MODEL_TIMEOUT),
            upload_timeout=_int_setting(data, "upload_timeout", UPLOAD_TIMEOUT),
        )

    def validate(self) -> None:
        """Raise ConfigError if a required setting is missing."""
        required = {
            "image_folder": self.image_folder,
            "model_token": self.model_token,
            "llm_type": self.llm_type,
            "model_name": self.model_name,
        }
        if not self.dry_run:
            required["github_token"] = self.github_token
            required["github_repo"] = self.github_repo
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")

        if self.llm_type.lower() not in SUPPORTED_LLM_TYPES:
            raise ConfigError(
                f"Unsupported llm_type '{self.llm_type}' "
                f"(supported: {', '.join(SUPPORTED_LLM_TYPES)})"
            )
        if not Path(self.image_folder).is_dir():
            raise ConfigError(f"Image folder '{self.image_folder}' is not a directory")

    def starting_offsets(self) -> Dict[str, int]:
        """Pair each target class with its offset; classes without one start at 0."""
        offsets: Dict[str, int] = {}
        for i, name in enumerate(self.target_classes):
            offsets[name] = self.class_idx[i] if i < len(self.class_idx) else 0
        return offsets


@dataclass
class LookupConfig:
    manifest_url: str = MANIFEST_URL
    token: str = ""
    timeout: int = MANIFEST_TIMEOUT

    @classmethod
    def from_env(cls) -> "LookupConfig":
        return cls(
            manifest_url=os.getenv("GITHUB_FILE_URL", MANIFEST_URL),
            token=os.getenv("GITHUB_TOKEN", ""),
            timeout=get_int_env("MANIFEST_TIMEOUT", MANIFEST_TIMEOUT) or MANIFEST_TIMEOUT,
        )


__all__ = ["RunConfig", "LookupConfig", "split_list", "parse_offsets"]
