# src/codetally/core/aggregator.py
import logging
from typing import Iterable, Tuple

from codetally.models import (
    FileEntry,
    FileStats,
    FolderStats,
    LanguageStats,
    LineKind,
    LineResult,
    SkippedFile,
)

logger = logging.getLogger(__name__)


def fold(results: Iterable[LineResult]) -> FileStats:
    """Per-line results -> per-file counters."""
    stats = FileStats()
    for result in results:
        if result.kind is LineKind.BLANK:
            stats.blank += 1
        elif result.kind is LineKind.COMMENT:
            stats.comment += 1
        else:
            stats.code += 1
        stats.variables += result.variable_count
        stats.total += 1
    return stats


class FolderAggregator:
    """Accumulates per-file stats into folder totals, grouped by language."""

    def __init__(self) -> None:
        self._folder = FolderStats()

    def add(self, entry: FileEntry) -> None:
        folder = self._folder
        stats = entry.stats

        folder.total_files += 1
        folder.total_lines += stats.total
        folder.blank += stats.blank
        folder.comment += stats.comment
        folder.code += stats.code
        folder.variables += stats.variables

        language = folder.per_language.setdefault(entry.language, LanguageStats())
        language.files += 1
        language.add(stats)

        folder.per_file.append(entry)

    def skip(self, filename: str, reason: str) -> None:
        logger.warning("Skipping %s (%s)", filename, reason)
        self._folder.skipped.append(SkippedFile(filename=filename, reason=reason))

    def build(self) -> FolderStats:
        return self._folder


def fold_folder(entries: Iterable[Tuple[str, str, FileStats]]) -> FolderStats:
    """(filename, language, stats) triples -> FolderStats."""
    aggregator = FolderAggregator()
    for filename, language, stats in entries:
        aggregator.add(FileEntry(filename=filename, language=language, stats=stats))
    return aggregator.build()
