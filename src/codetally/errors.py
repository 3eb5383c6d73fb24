# src/codetally/errors.py
"""Error codes and exceptions raised by the analysis core."""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    UNSUPPORTED_LANGUAGE = "UNSUPPORTED_LANGUAGE"
    INPUT_TOO_LARGE = "INPUT_TOO_LARGE"
    SOURCE_UNAVAILABLE = "SOURCE_UNAVAILABLE"
    CONFIG_ERROR = "CONFIG_ERROR"
    CANCELLED = "CANCELLED"


class AnalysisError(RuntimeError):
    """Exception carrying a structured error code for the CLI and callers."""

    def __init__(self, code: ErrorCode, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        base = super().__str__()
        return f"[{self.code.value}] {base}" if base else self.code.value


class UnsupportedLanguageError(AnalysisError):
    def __init__(self, filename: str) -> None:
        super().__init__(
            ErrorCode.UNSUPPORTED_LANGUAGE,
            f"Unsupported file type: {filename}",
            context={"filename": filename},
        )
        self.filename = filename


class InputTooLargeError(AnalysisError):
    def __init__(self, filename: str, size: int, limit: int, *, unit: str = "lines") -> None:
        super().__init__(
            ErrorCode.INPUT_TOO_LARGE,
            f"File too large: {filename} has {size} {unit} (max: {limit})",
            context={"filename": filename, "size": size, "limit": limit, "unit": unit},
        )
        self.filename = filename
        self.size = size
        self.limit = limit


class SourceUnavailableError(AnalysisError):
    def __init__(self, filename: str, reason: str) -> None:
        super().__init__(
            ErrorCode.SOURCE_UNAVAILABLE,
            f"Failed to read {filename}: {reason}",
            context={"filename": filename, "reason": reason},
        )
        self.filename = filename


class AnalysisCancelled(AnalysisError):
    def __init__(self, filename: str = "") -> None:
        message = f"Analysis of {filename} cancelled" if filename else "Analysis cancelled"
        super().__init__(ErrorCode.CANCELLED, message, context={"filename": filename})
