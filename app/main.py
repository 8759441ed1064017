"""
Photo Classifier - classify local images with Gemini and upload them to GitHub.

Usage:
    python app/main.py [path/to/conf.json]

Without a config file path (argument or CONFIG_FILE), settings are read from
environment variables / .env.

Behaviour:
- Each image is uploaded once per category the model returns
- Files are named by per-category sequence numbers, seeded from CLASS_IDX
- Existing files in the repository are never overwritten
"""
from __future__ import annotations

import os
import sys
import time
from typing import Optional, Sequence

from dotenv import load_dotenv

from config.exceptions import PipelineError
from config.settings import RunConfig
from services import (
    CategorySequencer,
    ClassificationPipeline,
    GeminiClient,
    GitHubUploader,
)
from utils.logging import get_logger, init_logging
from utils.console import console


# -------------------- Setup -------------------- #
init_logging("classify")
logger = get_logger(__name__)


def load_config(argv: Sequence[str]) -> RunConfig:
    """Config file from argv[1] or CONFIG_FILE, else environment variables."""
    config_file = argv[1] if len(argv) > 1 else os.getenv("CONFIG_FILE")
    if config_file:
        logger.info("Loading config from %s", config_file)
        return RunConfig.from_file(config_file)
    logger.info("Loading config from environment")
    return RunConfig.from_env()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Run the classification pipeline.

    Returns exit code.
    """
    pipeline_start = time.time()

    try:
        load_dotenv()
        cfg = load_config(argv if argv is not None else sys.argv)
        cfg.validate()

        return run_pipeline(cfg, pipeline_start)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        console.interrupted()
        return 130
    except PipelineError as e:
        logger.error("Pipeline error: %s", e)
        console.error("Pipeline Error", str(e))
        console.pipeline_finished(success=False)
        return 1
    except Exception as e:
        logger.exception("Unexpected error: %s", e)
        console.error("Unexpected Error", str(e))
        console.pipeline_finished(success=False)
        return 1


def run_pipeline(cfg: RunConfig, pipeline_start: float) -> int:
    """Build the collaborators from config and classify the folder."""
    mode = "DRY RUN" if cfg.dry_run else "UPLOAD"
    logger.info("[%s] Pipeline starting: folder=%s, model=%s", mode, cfg.image_folder, cfg.model_name)
    console.start(
        "Photo Classifier",
        f"{cfg.image_folder} → {cfg.github_repo or '(dry run)'}/{cfg.github_dir}",
    )

    client = GeminiClient.from_config(cfg)
    logger.info("Gemini client initialized: model=%s, endpoint=%s", client.model, client.full_endpoint)

    uploader = None if cfg.dry_run else GitHubUploader.from_config(cfg)
    sequencer = CategorySequencer.from_offsets(cfg.starting_offsets())

    pipeline = ClassificationPipeline(
        client=client,
        uploader=uploader,
        sequencer=sequencer,
        allowed_categories=cfg.target_classes,
        upload_dir=cfg.github_dir,
        dry_run=cfg.dry_run,
    )
    stats = pipeline.run(cfg.image_folder)

    total_elapsed = time.time() - pipeline_start
    logger.info(
        "[%s] Pipeline complete in %.1fs: %s. Next offsets: %s",
        mode, total_elapsed, stats.as_dict(), sequencer.snapshot(),
    )
    console.classification_summary(stats.as_dict(), elapsed=total_elapsed)
    console.info(
        "Next class offsets",
        ",".join(str(sequencer.peek(c)) for c in cfg.target_classes) or "(none)",
    )
    console.pipeline_finished(success=True)
    return 0


if __name__ == "__main__":
    exit(main())
