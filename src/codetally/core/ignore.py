# src/codetally/core/ignore.py
import logging
from pathlib import Path
from typing import List, Optional

import pathspec

from codetally.config import DEFAULT_IGNORE_PATTERNS

logger = logging.getLogger(__name__)


def load_ignore_spec(root_dir: Path, extra_patterns: Optional[List[str]] = None) -> pathspec.PathSpec:
    """
    Builds a PathSpec from the built-in defaults plus the project's .gitignore.
    Any extra patterns (e.g. from the command line) are appended last.
    """
    lines = list(DEFAULT_IGNORE_PATTERNS)

    gitignore_file = root_dir / ".gitignore"
    if gitignore_file.is_file():
        try:
            with open(gitignore_file, "r", encoding="utf-8") as f:
                lines.extend(f.read().splitlines())
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", gitignore_file, e)

    if extra_patterns:
        lines.extend(extra_patterns)

    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def is_path_ignored(spec: pathspec.PathSpec, rel_path: Path, is_directory: bool = False) -> bool:
    path_str = rel_path.as_posix()
    # "venv/" style patterns only match when the path looks like a directory
    if is_directory:
        path_str += "/"
    return spec.match_file(path_str)
