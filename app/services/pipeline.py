from __future__ import annotations

import time
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from config.exceptions import ModelClientError, UploadError
from helpers.image_utils import is_image_file
from services.llm.gemini_client import GeminiClient
from services.llm.prompt_builder import PromptBuilder
from services.llm.response_parser import ResponseParser
from services.storage.github_uploader import GitHubUploader
from services.storage.sequencer import CategorySequencer
from utils.console import console
from utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class PipelineStats:
    images: int = 0
    classified: int = 0
    skipped: int = 0
    failed: int = 0
    uploaded: int = 0
    upload_failed: int = 0
    tokens: int = 0
    category_counts: Counter = field(default_factory=Counter)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "images": self.images,
            "classified": self.classified,
            "skipped": self.skipped,
            "failed": self.failed,
            "uploaded": self.uploaded,
            "upload_failed": self.upload_failed,
            "tokens": self.tokens,
            "category_counts": dict(self.category_counts),
        }


class ClassificationPipeline:
    """Classify every image in a folder and upload it once per returned category.

    Files are processed one at a time in name order. Per-file failures
    (unreadable file, model error) skip the file; per-category upload
    failures skip that category only. The sequencer is owned by the pipeline
    for its whole lifetime.
    """

    def __init__(
        self,
        client: GeminiClient,
        uploader: Optional[GitHubUploader],
        sequencer: CategorySequencer,
        allowed_categories: Sequence[str],
        upload_dir: str = "",
        parser: Optional[ResponseParser] = None,
        builder: Optional[PromptBuilder] = None,
        dry_run: bool = False,
    ):
        if uploader is None and not dry_run:
            raise ValueError("An uploader is required unless dry_run is set")
        self.client = client
        self.uploader = uploader
        self.sequencer = sequencer
        self.allowed_categories = list(allowed_categories)
        self.upload_dir = upload_dir
        self.parser = parser or ResponseParser()
        self.builder = builder or PromptBuilder()
        self.dry_run = dry_run
        self.prompt = self.builder.build_classification_prompt(self.allowed_categories)

    def run(self, folder: Path | str) -> PipelineStats:
        folder = Path(folder)
        entries = sorted(folder.iterdir(), key=lambda p: p.name)
        stats = PipelineStats()

        logger.info(
            "Classification starting: folder=%s, entries=%d, categories=%s, dry_run=%s",
            folder, len(entries), self.allowed_categories, self.dry_run,
        )
        console.classification_start(str(folder), len(entries), self.allowed_categories)

        if not entries:
            logger.info("No files found in %s", folder)

        for index, entry in enumerate(entries, 1):
            if entry.is_dir():
                continue
            if not is_image_file(entry.name):
                logger.info("Skipping %s: not an image file", entry.name)
                continue

            stats.images += 1
            console.file_start(index, len(entries), entry.name)
            self.process_file(entry, stats)

        logger.info("Classification loop complete: %s", stats.as_dict())
        return stats

    def process_file(self, path: Path, stats: PipelineStats) -> List[str]:
        """Classify one image and upload it into each returned category.

        Returns the categories that were uploaded (or planned, in dry-run mode).
        """
        try:
            content = path.read_bytes()
        except OSError as e:
            logger.error("Cannot read %s: %s", path, e)
            stats.failed += 1
            console.file_failed(f"Cannot read file: {e}")
            return []

        start = time.time()
        try:
            response = self.client.classify_image(content, self.prompt)
        except ModelClientError as e:
            logger.error("Classifying %s failed: %s", path.name, e)
            stats.failed += 1
            console.file_failed(f"Classification failed: {e}")
            return []
        elapsed = time.time() - start

        stats.tokens += response.total_tokens
        categories = self.parser.parse_categories(response.text)
        logger.info(
            "%s -> categories=%s, tokens=%d, %.1fs",
            path.name, categories, response.total_tokens, elapsed,
        )
        console.file_result(categories, tokens=response.total_tokens, elapsed=elapsed)

        if not categories:
            stats.skipped += 1
            console.file_end()
            return []
        stats.classified += 1

        done: List[str] = []
        for category in categories:
            if category not in self.allowed_categories:
                logger.warning("%s: category %r is not in the allowed list", path.name, category)
            if self.upload_category(path, content, category, stats):
                done.append(category)

        console.file_end()
        return done

    def upload_category(self, path: Path, content: bytes, category: str, stats: PipelineStats) -> bool:
        destination = self.sequencer.destination_path(self.upload_dir, category, path.suffix)

        if self.dry_run:
            logger.info("Dry run: would upload %s -> %s", path.name, destination)
            self.sequencer.commit(category)
            stats.category_counts[category] += 1
            console.upload_planned(destination)
            return True

        record = self.uploader.build_record(content, str(path), destination, category)
        try:
            self.uploader.upload(record)
        except UploadError as e:
            logger.error("Uploading %s to %s failed: %s", path.name, destination, e)
            stats.upload_failed += 1
            console.upload_failed(category, str(e))
            return False

        self.sequencer.commit(category)
        stats.uploaded += 1
        stats.category_counts[category] += 1
        console.upload_ok(destination)
        return True


__all__ = ["ClassificationPipeline", "PipelineStats"]
