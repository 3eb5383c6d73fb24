# src/codetally/core/chunked.py
import asyncio
import math
from typing import Callable, Iterator, List, Optional, Sequence, TypeVar

from codetally.config import DEFAULT_CHUNK_SIZE
from codetally.errors import AnalysisCancelled, AnalysisError, ErrorCode

T = TypeVar("T")

ProgressCallback = Optional[Callable[[float], None]]
CancelCheck = Optional[Callable[[], bool]]


class ChunkedProcessor:
    """
    Applies a per-line function over consecutive fixed-size batches.

    Batches run strictly in order and `per_line` is never called
    concurrently, so any state captured by `per_line` (the classifier's
    block-comment flag) carries over batch boundaries unchanged.
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        if chunk_size <= 0:
            raise AnalysisError(
                ErrorCode.CONFIG_ERROR,
                f"chunk_size must be a positive integer, got {chunk_size!r}",
            )
        self.chunk_size = chunk_size

    def total_chunks(self, line_count: int) -> int:
        return math.ceil(line_count / self.chunk_size)

    def iter_chunks(
        self,
        lines: Sequence[str],
        per_line: Callable[[str], T],
        on_progress: ProgressCallback = None,
    ) -> Iterator[List[T]]:
        """Yields one list of results per batch, reporting progress after each."""
        total = self.total_chunks(len(lines))
        for index in range(total):
            start = index * self.chunk_size
            batch = lines[start:start + self.chunk_size]
            results = [per_line(line) for line in batch]
            if on_progress:
                on_progress(100.0 * (index + 1) / total)
            yield results

    def process_sync(
        self,
        lines: Sequence[str],
        per_line: Callable[[str], T],
        on_progress: ProgressCallback = None,
    ) -> List[T]:
        results: List[T] = []
        for batch in self.iter_chunks(lines, per_line, on_progress):
            results.extend(batch)
        return results

    async def process(
        self,
        lines: Sequence[str],
        per_line: Callable[[str], T],
        on_progress: ProgressCallback = None,
        should_cancel: CancelCheck = None,
    ) -> List[T]:
        """
        Same results as process_sync, but hands control back to the event
        loop between batches. `should_cancel` is only consulted at those
        yield points, never in the middle of a batch.
        """
        total = self.total_chunks(len(lines))
        results: List[T] = []
        for index, batch in enumerate(self.iter_chunks(lines, per_line, on_progress)):
            results.extend(batch)
            if index < total - 1:
                await asyncio.sleep(0)
                if should_cancel and should_cancel():
                    raise AnalysisCancelled()
        return results
