"""Photo classification and image lookup services.

Exports:
    GeminiClient: Gemini generateContent wrapper for single-image classification.
    PromptBuilder: Builds the classification instruction from the allowed categories.
    ResponseParser: Extracts the {"cate": [...]} category list from model output.
    CategorySequencer: Per-category file numbering for one run.
    GitHubUploader: Create-only uploads through the GitHub contents API.
    ClassificationPipeline: Folder walk driving classify -> parse -> number -> upload.
    ImageStore: In-memory category -> URL manifest.
    Sampler: Distinct random URLs per category.
    RetrievalService: Tool-call surface of the lookup server.
"""

from .llm.gemini_client import GeminiClient, ModelResponse
from .llm.prompt_builder import PromptBuilder
from .llm.response_parser import ResponseParser
from .storage.sequencer import CategorySequencer
from .storage.github_uploader import GitHubUploader, UploadRecord
from .pipeline import ClassificationPipeline, PipelineStats
from .retrieval.manifest_loader import ImageStore
from .retrieval.sampler import Sampler
from .retrieval.service import RetrievalService

__all__ = [
    "GeminiClient",
    "ModelResponse",
    "PromptBuilder",
    "ResponseParser",
    "CategorySequencer",
    "GitHubUploader",
    "UploadRecord",
    "ClassificationPipeline",
    "PipelineStats",
    "ImageStore",
    "Sampler",
    "RetrievalService",
]
