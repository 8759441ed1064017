from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

import requests

from config.constants import GEMINI_API_VERSION, GEMINI_BASE_URL, MODEL_TIMEOUT
from config.exceptions import (
    EmptyModelResponseError,
    ModelClientInitError,
    ModelGenerationError,
)
from config.settings import RunConfig
from helpers.image_utils import image_mime_type
from utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class ModelResponse:
    text: str
    total_tokens: int = 0


def _valid_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class GeminiClient:
    """Gemini generateContent client for single-image classification."""

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = "",
        proxy_url: str = "",
        timeout: int = MODEL_TIMEOUT,
    ):
        if not api_key:
            raise ModelClientInitError("Gemini API key is missing")
        if not model:
            raise ModelClientInitError("Gemini model name is missing")
        if base_url and not _valid_url(base_url):
            raise ModelClientInitError(f"Invalid model base URL: {base_url!r}")
        if proxy_url and not _valid_url(proxy_url):
            raise ModelClientInitError(f"Invalid proxy URL: {proxy_url!r}")

        self.api_key = api_key
        self.model = model
        self.custom_base_url = base_url
        self.base_url = (base_url or GEMINI_BASE_URL).rstrip("/")
        self.proxies = {"http": proxy_url, "https": proxy_url} if proxy_url else None
        self.timeout = timeout
        self.full_endpoint = f"{self.base_url}/{GEMINI_API_VERSION}/models/{model}:generateContent"

    @classmethod
    def from_config(cls, cfg: RunConfig) -> "GeminiClient":
        return cls(
            api_key=cfg.model_token,
            model=cfg.model_name,
            base_url=cfg.model_custom_url,
            proxy_url=cfg.proxy_url,
            timeout=cfg.model_timeout,
        )

    def _headers(self) -> dict:
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        # Custom gateways in front of Gemini expect a bearer token
        if self.custom_base_url:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def classify_image(self, image: bytes, prompt: str, *, timeout: Optional[int] = None) -> ModelResponse:
        """Send one image plus the instruction and return the raw text.

        Raises:
            ModelGenerationError: transport failure or non-200 answer.
            EmptyModelResponseError: the answer holds no text.
        """
        mime_type = image_mime_type(image)
        payload = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {
                            "inline_data": {
                                "mime_type": mime_type,
                                "data": base64.b64encode(image).decode("ascii"),
                            }
                        },
                        {"text": prompt},
                    ],
                }
            ],
        }

        logger.info("Sending image to %s (%s, %d bytes)", self.model, mime_type, len(image))
        logger.debug("Endpoint: %s, Prompt length: %d chars", self.full_endpoint, len(prompt))

        try:
            response = requests.post(
                self.full_endpoint,
                headers=self._headers(),
                json=payload,
                proxies=self.proxies,
                timeout=timeout or self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Request failed: %s", e)
            raise ModelGenerationError(f"Model request failed: {e}") from e

        logger.debug("Response status: %d", response.status_code)

        if response.status_code != 200:
            error_msg = response.text[:500]
            logger.error("Model error [%d]: %s", response.status_code, error_msg)
            raise ModelGenerationError(f"Model error [{response.status_code}]: {error_msg}")

        try:
            data = response.json()
        except ValueError as e:
            raise ModelGenerationError(f"Failed to parse model response: {e}") from e

        usage = data.get("usageMetadata") or {}
        total_tokens = int(usage.get("totalTokenCount", 0) or 0)
        if usage:
            logger.info(
                "Tokens used: %d (prompt=%d, completion=%d)",
                total_tokens,
                usage.get("promptTokenCount", 0),
                usage.get("candidatesTokenCount", 0),
            )

        text = self._extract_text(data)
        if not text.strip():
            feedback = data.get("promptFeedback")
            logger.warning("Empty model response (feedback=%s)", feedback)
            raise EmptyModelResponseError(
                f"Model returned no text{f' ({feedback})' if feedback else ''}"
            )

        logger.debug("Response: %s", text[:300])
        return ModelResponse(text=text, total_tokens=total_tokens)

    @staticmethod
    def _extract_text(data: dict) -> str:
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(p.get("text", "") for p in parts if isinstance(p, dict) and not p.get("thought"))


__all__ = ["GeminiClient", "ModelResponse"]
