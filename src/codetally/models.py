# src/codetally/models.py
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Callable, Dict, List


class LineKind(str, Enum):
    BLANK = "blank"
    COMMENT = "comment"
    CODE = "code"


@dataclass
class ClassifierState:
    """Multi-line comment flag owned by a single file analysis."""
    in_block_comment: bool = False


@dataclass(frozen=True)
class LineResult:
    kind: LineKind
    variable_count: int = 0


def _percent(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole else 0.0


@dataclass
class FileStats:
    """Line counters for one file. blank + comment + code == total once folded."""
    blank: int = 0
    comment: int = 0
    code: int = 0
    variables: int = 0
    total: int = 0

    def add(self, other: "FileStats") -> None:
        self.blank += other.blank
        self.comment += other.comment
        self.code += other.code
        self.variables += other.variables
        self.total += other.total

    @property
    def code_density(self) -> float:
        return _percent(self.code, self.total)

    @property
    def comment_ratio(self) -> float:
        return _percent(self.comment, self.total)

    @property
    def blank_ratio(self) -> float:
        return _percent(self.blank, self.total)

    @property
    def variables_per_line(self) -> float:
        return self.variables / self.total if self.total else 0.0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class LanguageStats(FileStats):
    files: int = 0


@dataclass(frozen=True)
class FileEntry:
    filename: str
    language: str
    stats: FileStats

    def to_dict(self) -> Dict[str, object]:
        return {"filename": self.filename, "language": self.language, **self.stats.to_dict()}


@dataclass(frozen=True)
class SkippedFile:
    filename: str
    reason: str


@dataclass
class FolderStats:
    total_files: int = 0
    total_lines: int = 0
    blank: int = 0
    comment: int = 0
    code: int = 0
    variables: int = 0
    per_language: Dict[str, LanguageStats] = field(default_factory=dict)
    per_file: List[FileEntry] = field(default_factory=list)
    skipped: List[SkippedFile] = field(default_factory=list)

    @property
    def code_density(self) -> float:
        return _percent(self.code, self.total_lines)

    @property
    def comment_ratio(self) -> float:
        return _percent(self.comment, self.total_lines)

    @property
    def blank_ratio(self) -> float:
        return _percent(self.blank, self.total_lines)

    @property
    def variables_per_line(self) -> float:
        return self.variables / self.total_lines if self.total_lines else 0.0

    @property
    def average_lines_per_file(self) -> float:
        return self.total_lines / self.total_files if self.total_files else 0.0

    def languages(self) -> Dict[str, int]:
        return {name: stats.files for name, stats in self.per_language.items()}

    def to_dict(self) -> Dict[str, object]:
        return {
            "total_files": self.total_files,
            "total_lines": self.total_lines,
            "blank": self.blank,
            "comment": self.comment,
            "code": self.code,
            "variables": self.variables,
            "per_language": {name: stats.to_dict() for name, stats in self.per_language.items()},
            "per_file": [entry.to_dict() for entry in self.per_file],
            "skipped": [asdict(item) for item in self.skipped],
        }


@dataclass(frozen=True)
class SourceFile:
    """A file handed over by the acquisition layer; `load` produces its text."""
    name: str
    load: Callable[[], str]
    rel_path: str = ""

    @property
    def display_name(self) -> str:
        return self.rel_path or self.name
