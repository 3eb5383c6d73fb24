# src/codetally/core/analyzer.py
"""
Ties the pieces together: registry lookup, line splitting, chunked
classification and aggregation, for a single text or a batch of files.
"""
import asyncio
import logging
from typing import Callable, Iterable, List, Optional

from codetally.config import DEFAULT_MAX_LINES, AnalyzerSettings
from codetally.core.aggregator import FolderAggregator, fold
from codetally.core.chunked import CancelCheck, ChunkedProcessor, ProgressCallback
from codetally.core.registry import DEFAULT_REGISTRY, LanguageRegistry, LanguageRule
from codetally.errors import (
    AnalysisCancelled,
    AnalysisError,
    InputTooLargeError,
    SourceUnavailableError,
    UnsupportedLanguageError,
)
from codetally.models import (
    ClassifierState,
    FileEntry,
    FolderStats,
    LineKind,
    LineResult,
    SourceFile,
)

logger = logging.getLogger(__name__)


def split_lines(text: str, max_lines: int = DEFAULT_MAX_LINES, filename: str = "<text>") -> List[str]:
    """Splits on newlines; a trailing terminator yields a final empty line."""
    lines = text.split("\n")
    if len(lines) > max_lines:
        raise InputTooLargeError(filename, len(lines), max_lines)
    return lines


def make_line_processor(rule: LanguageRule, state: ClassifierState) -> Callable[[str], LineResult]:
    """Closure over one file's classifier state."""

    def process_line(line: str) -> LineResult:
        kind = rule.parse_line(line, state)
        variables = rule.count_variables(line) if kind is LineKind.CODE else 0
        return LineResult(kind=kind, variable_count=variables)

    return process_line


class FileAnalyzer:
    def __init__(
        self,
        registry: Optional[LanguageRegistry] = None,
        settings: Optional[AnalyzerSettings] = None,
    ):
        self.registry = registry if registry is not None else DEFAULT_REGISTRY
        self.settings = (settings or AnalyzerSettings()).validate()
        self.processor = ChunkedProcessor(self.settings.chunk_size)

    def resolve(self, filename: str) -> LanguageRule:
        rule = self.registry.resolve(filename)
        if rule is None:
            raise UnsupportedLanguageError(filename)
        return rule

    def _prepare(self, filename: str, text: str):
        rule = self.resolve(filename)
        lines = split_lines(text, self.settings.max_lines, filename)
        # Fresh state per file; never shared with another analysis
        per_line = make_line_processor(rule, ClassifierState())
        return rule, lines, per_line

    async def analyze_text(
        self,
        filename: str,
        text: str,
        on_progress: ProgressCallback = None,
        should_cancel: CancelCheck = None,
    ) -> FileEntry:
        rule, lines, per_line = self._prepare(filename, text)
        results = await self.processor.process(lines, per_line, on_progress, should_cancel)
        return FileEntry(filename=filename, language=rule.name, stats=fold(results))

    def analyze_text_sync(
        self,
        filename: str,
        text: str,
        on_progress: ProgressCallback = None,
    ) -> FileEntry:
        rule, lines, per_line = self._prepare(filename, text)
        results = self.processor.process_sync(lines, per_line, on_progress)
        return FileEntry(filename=filename, language=rule.name, stats=fold(results))

    def _load(self, source: SourceFile) -> str:
        try:
            return source.load()
        except (OSError, UnicodeDecodeError) as e:
            raise SourceUnavailableError(source.display_name, str(e)) from e

    async def analyze_folder(
        self,
        sources: Iterable[SourceFile],
        on_progress: ProgressCallback = None,
        should_cancel: CancelCheck = None,
    ) -> FolderStats:
        """
        Files are analyzed one after another in the order given. A file that
        cannot be read, is too large, or has no rule is logged and skipped;
        it never aborts the batch and never contributes to the totals.
        """
        source_list = list(sources)
        aggregator = FolderAggregator()

        for index, source in enumerate(source_list):
            name = source.display_name
            try:
                self.resolve(source.name)
                text = self._load(source)
                entry = await self.analyze_text(name, text, should_cancel=should_cancel)
            except AnalysisCancelled:
                raise
            except AnalysisError as e:
                aggregator.skip(name, str(e))
            else:
                aggregator.add(entry)
                logger.debug("Analyzed %s: %d lines", name, entry.stats.total)

            if on_progress:
                on_progress(100.0 * (index + 1) / len(source_list))
            await asyncio.sleep(0)

        return aggregator.build()

    def analyze_folder_sync(
        self,
        sources: Iterable[SourceFile],
        on_progress: ProgressCallback = None,
    ) -> FolderStats:
        return asyncio.run(self.analyze_folder(sources, on_progress))
