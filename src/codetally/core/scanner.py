# src/codetally/core/scanner.py
import os
from functools import partial
from pathlib import Path
from typing import Iterator, Optional, Set

import pathspec

from codetally.config import DEFAULT_MAX_FILE_BYTES
from codetally.core.ignore import is_path_ignored
from codetally.core.registry import DEFAULT_REGISTRY, LanguageRegistry
from codetally.errors import InputTooLargeError, SourceUnavailableError
from codetally.models import SourceFile


def read_source(path: Path, display_name: str, max_bytes: int = DEFAULT_MAX_FILE_BYTES) -> str:
    """Reads a source file as UTF-8, refusing anything above max_bytes."""
    try:
        size = path.stat().st_size
        if size > max_bytes:
            raise InputTooLargeError(display_name, size, max_bytes, unit="bytes")
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnavailableError(display_name, str(e)) from e


class ProjectScanner:
    def __init__(
        self,
        root_dir: Path,
        ignore_spec: pathspec.PathSpec,
        registry: Optional[LanguageRegistry] = None,
        extensions: Optional[Set[str]] = None,
        max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
    ):
        self.root_dir = root_dir
        self.ignore_spec = ignore_spec
        self.registry = registry if registry is not None else DEFAULT_REGISTRY
        self.extensions = {e.lower() for e in extensions} if extensions else None
        self.max_file_bytes = max_file_bytes

    def _is_binary_file(self, path: Path) -> bool:
        """
        Reads the first 1024 bytes to check for null bytes.
        Unreadable files are not binary: the loader reports them later.
        """
        try:
            with path.open("rb") as f:
                chunk = f.read(1024)
                return b'\0' in chunk
        except OSError:
            return False

    def _wants(self, path: Path) -> bool:
        if not self.registry.is_supported(path.name):
            return False
        if self.extensions is not None and path.suffix.lower() not in self.extensions:
            return False
        return True

    def scan(self) -> Iterator[SourceFile]:
        """
        Walks the directory tree, pruning ignored directories, and yields a
        SourceFile for every supported, non-binary file. Files are not read
        here; each SourceFile carries a loader.
        """
        for root, dirs, files in os.walk(self.root_dir):
            root_path = Path(root)

            # --- 1. Prune Directories (in place, so os.walk skips them) ---
            for d in list(dirs):
                dir_rel_path = (root_path / d).relative_to(self.root_dir)
                if is_path_ignored(self.ignore_spec, dir_rel_path, is_directory=True):
                    dirs.remove(d)
            # Deterministic order: files are analyzed in the order yielded
            dirs.sort()

            # --- 2. Process Files ---
            for f in sorted(files):
                file_abs_path = root_path / f
                rel_path = file_abs_path.relative_to(self.root_dir)

                if is_path_ignored(self.ignore_spec, rel_path, is_directory=False):
                    continue
                if not self._wants(file_abs_path):
                    continue
                if self._is_binary_file(file_abs_path):
                    continue

                rel = rel_path.as_posix()
                yield SourceFile(
                    name=f,
                    rel_path=rel,
                    load=partial(read_source, file_abs_path, rel, self.max_file_bytes),
                )
