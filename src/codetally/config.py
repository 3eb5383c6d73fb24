# src/codetally/config.py
from dataclasses import dataclass

from codetally.errors import AnalysisError, ErrorCode

# Lines classified per batch before control goes back to the event loop
DEFAULT_CHUNK_SIZE = 1000

# Files with more lines than this are rejected before classification
DEFAULT_MAX_LINES = 100_000

DEFAULT_MAX_FILE_BYTES = 50 * 1024 * 1024

DEFAULT_IGNORE_PATTERNS = [
    "# Default ignore patterns",
    ".git/",
    "node_modules/",
    "venv/",
    ".venv/",
    "__pycache__/",
    "dist/",
    "build/",
    "target/",
    ".vscode/",
    ".idea/",
    ".pytest_cache/",
    ".DS_Store",
    "*.min.js",
]


@dataclass(frozen=True)
class AnalyzerSettings:
    """Knobs for one analyzer instance."""
    chunk_size: int = DEFAULT_CHUNK_SIZE
    max_lines: int = DEFAULT_MAX_LINES

    def validate(self) -> "AnalyzerSettings":
        for field_name in ("chunk_size", "max_lines"):
            value = getattr(self, field_name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise AnalysisError(
                    ErrorCode.CONFIG_ERROR,
                    f"{field_name} must be a positive integer, got {value!r}",
                    context={"field": field_name, "value": value},
                )
        return self
