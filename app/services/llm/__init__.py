"""LLM classification services.

Exports:
	GeminiClient: Thin wrapper around the Gemini generateContent endpoint.
	ModelResponse: Raw response text plus total token usage.
	PromptBuilder: Builds the image classification instruction.
	ResponseParser: Extracts the category list from model responses.
"""

from .gemini_client import GeminiClient, ModelResponse
from .prompt_builder import PromptBuilder
from .response_parser import ResponseParser

__all__ = [
	"GeminiClient",
	"ModelResponse",
	"PromptBuilder",
	"ResponseParser",
]
