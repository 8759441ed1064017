"""Pretty console output for the photo classifier.

This module provides user-friendly terminal output with:
- Emojis for visual scanning
- Per-image blocks with the categories the model returned
- Upload results per category
- Final summary statistics

Usage:
    from utils.console import console
    console.start("Pipeline Started")
    console.file_start(1, 10, "cat.jpg")
    console.file_result(["风景", "生活"], tokens=812)
    console.upload_ok("images/风景/5.jpg")

Design principles:
- Isolated from logging (file logs are separate)
- Stateless methods (no side effects beyond printing)
- Stream is configurable: the lookup server prints to stderr
"""
from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, TextIO


@dataclass
class ConsoleConfig:
    """Configuration for console output behavior."""
    colors_enabled: bool = True
    max_name_length: int = 45
    max_category_display: int = 5
    box_width: int = 60

    @classmethod
    def from_env(cls) -> "ConsoleConfig":
        """Load configuration from environment variables."""
        return cls(
            colors_enabled=os.getenv("CONSOLE_COLORS", "true").lower() == "true",
            max_name_length=int(os.getenv("CONSOLE_MAX_NAME_LEN", "45")),
        )


class Console:
    """Pretty console output handler for pipeline operations.

    All output goes to the configured stream (stdout by default) and is
    designed to be human-readable. For machine-readable logs, use the
    logging module instead.
    """

    def __init__(self, config: Optional[ConsoleConfig] = None, stream: Optional[TextIO] = None):
        self.config = config or ConsoleConfig.from_env()
        self.stream = stream

    # ==================== Helpers ====================

    def _truncate(self, text: str, max_len: int) -> str:
        """Truncate text with ellipsis if too long."""
        if len(text) <= max_len:
            return text
        return text[: max_len - 3] + "..."

    def _print(self, *args, **kwargs) -> None:
        """Print to the configured stream with flush."""
        print(*args, **kwargs, file=self.stream or sys.stdout, flush=True)

    # ==================== Phase Indicators ====================

    def start(self, message: str, detail: Optional[str] = None) -> None:
        """Display pipeline/phase start message."""
        self._print(f"\n🚀 {message}")
        if detail:
            self._print(f"   └─ {detail}")

    def error(self, message: str, detail: Optional[str] = None) -> None:
        self._print(f"\n❌ {message}")
        if detail:
            self._print(f"   └─ {detail}")

    def warning(self, message: str, detail: Optional[str] = None) -> None:
        self._print(f"\n⚠️  {message}")
        if detail:
            self._print(f"   └─ {detail}")

    def info(self, message: str, detail: Optional[str] = None) -> None:
        self._print(f"\n📋 {message}")
        if detail:
            self._print(f"   └─ {detail}")

    # ==================== Classification ====================

    def classification_start(self, folder: str, total_files: int, categories: Sequence[str]) -> None:
        """Display classification start info."""
        shown = ", ".join(categories[: self.config.max_category_display])
        if len(categories) > self.config.max_category_display:
            shown += f", ...+{len(categories) - self.config.max_category_display} more"
        self._print("\n🤖 Classification Starting")
        self._print(f"   ├─ Folder: {folder} ({total_files} entries)")
        self._print(f"   └─ Categories: {shown or '(none)'}")

    def file_start(self, index: int, total: int, filename: str) -> None:
        """Open the per-image block."""
        name = self._truncate(filename, self.config.max_name_length)
        self._print(f"\n┌─ Image {index}/{total}: {name}")

    def file_result(self, categories: Sequence[str], tokens: int = 0, elapsed: Optional[float] = None) -> None:
        """Show the categories the model returned for one image."""
        tokens_str = f", {tokens:,} tokens" if tokens > 0 else ""
        time_str = f" in {elapsed:.1f}s" if elapsed is not None else ""
        if categories:
            self._print(f"│  🏷  {', '.join(categories)}{time_str}{tokens_str}")
        else:
            self._print(f"│  ⚠️  No category returned{time_str}{tokens_str}, skipping upload")

    def file_failed(self, reason: str) -> None:
        self._print(f"│  ❌ {self._truncate(reason, 120)}")
        self._print(f"└{'─' * self.config.box_width}")

    def upload_ok(self, path: str) -> None:
        self._print(f"│  ✓ Uploaded → {path}")

    def upload_planned(self, path: str) -> None:
        self._print(f"│  ○ Dry run → {path}")

    def upload_failed(self, category: str, reason: str) -> None:
        self._print(f"│  ✗ {category}: {self._truncate(reason, 100)}")

    def file_end(self) -> None:
        self._print(f"└{'─' * self.config.box_width}")

    # ==================== Final Summary ====================

    def classification_summary(self, stats: Dict[str, Any], elapsed: Optional[float] = None) -> None:
        """Display final run summary."""
        self._print("\n✅ Classification Complete!")
        self._print(f"   ├─ Images classified: {stats.get('classified', 0)}/{stats.get('images', 0)}")
        self._print(f"   ├─ Skipped: {stats.get('skipped', 0)} │ Failed: {stats.get('failed', 0)}")
        self._print(
            f"   ├─ Uploads: {stats.get('uploaded', 0)} ok, {stats.get('upload_failed', 0)} failed"
        )
        counts: Dict[str, int] = stats.get("category_counts", {})
        if counts:
            top = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
            self._print("   ├─ Top categories:")
            for i, (name, count) in enumerate(top[: self.config.max_category_display], 1):
                self._print(f"   │    {i}. {self._truncate(name, 35):<35} {count:>4}")
        self._print(f"   └─ Tokens: {stats.get('tokens', 0):,}")
        if elapsed is not None:
            self._print(f"\n⏱️  Total: {elapsed:.1f}s")

    # ==================== Lookup Server ====================

    def store_loaded(self, categories: List[str], total_images: int) -> None:
        """Display manifest load statistics."""
        self._print("\n📥 Image Store Initialized")
        self._print(f"   ├─ Categories: {len(categories)}")
        self._print(f"   ├─ Images: {total_images}")
        self._print(f"   └─ Examples: {', '.join(categories[:5])}")

    # ==================== Pipeline Status ====================

    def pipeline_finished(self, success: bool = True) -> None:
        """Display pipeline completion status."""
        self._print(f"\n{'─' * 50}")
        if success:
            self._print("🎉 Pipeline finished successfully!")
        else:
            self._print("💥 Pipeline failed!")
        self._print(f"{'─' * 50}\n")

    def interrupted(self) -> None:
        self._print("\n\n⚡ Interrupted by user")
        self._print("   └─ Uploads already made are kept; restart with updated class offsets")


# ==================== Singleton Instance ====================
# This allows: from utils.console import console
console = Console()

__all__ = ["Console", "ConsoleConfig", "console"]
