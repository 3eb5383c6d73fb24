# tests/test_scanner.py
import logging
from pathlib import Path

import pytest

from codetally.core.ignore import is_path_ignored, load_ignore_spec
from codetally.core.scanner import ProjectScanner, read_source
from codetally.errors import ErrorCode, InputTooLargeError, SourceUnavailableError


@pytest.fixture
def project(tmp_path):
    """A small project with ignored, unsupported and binary files mixed in."""
    src_dir = tmp_path / "src"
    src_dir.mkdir()
    (src_dir / "main.py").write_text("x = 1\n")
    (src_dir / "app.js").write_text("let a = 1;\n")

    (tmp_path / "notes.txt").write_text("not code")
    (tmp_path / "bundle.min.js").write_text("var a=1;")
    (tmp_path / "blob.py").write_bytes(b"\x00\x01\x02")

    vendored = tmp_path / "node_modules" / "lib"
    vendored.mkdir(parents=True)
    (vendored / "index.js").write_text("let b = 2;")

    generated = tmp_path / "generated"
    generated.mkdir()
    (generated / "out.py").write_text("y = 2")

    (tmp_path / ".gitignore").write_text("generated/\n")
    return tmp_path


# --- Test 1: Ignore rules ---

def test_default_patterns(tmp_path):
    spec = load_ignore_spec(tmp_path)
    assert is_path_ignored(spec, Path("venv"), is_directory=True) is True
    assert is_path_ignored(spec, Path("src/__pycache__"), is_directory=True) is True
    assert is_path_ignored(spec, Path(".DS_Store")) is True
    assert is_path_ignored(spec, Path("src/main.py")) is False


def test_directory_pattern_needs_directory(tmp_path):
    spec = load_ignore_spec(tmp_path)
    assert is_path_ignored(spec, Path("venv"), is_directory=False) is False


def test_gitignore_and_extra_patterns(project):
    spec = load_ignore_spec(project, extra_patterns=["report.json"])
    assert is_path_ignored(spec, Path("generated"), is_directory=True) is True
    assert is_path_ignored(spec, Path("report.json")) is True


def test_unreadable_gitignore_is_logged(tmp_path, caplog):
    (tmp_path / ".gitignore").write_bytes(b"\xff\xfe\xfd")
    with caplog.at_level(logging.WARNING):
        spec = load_ignore_spec(tmp_path)
    assert ".gitignore" in caplog.text
    assert is_path_ignored(spec, Path("node_modules"), is_directory=True) is True


# --- Test 2: Scanning ---

def test_scan_yields_supported_files_in_order(project):
    scanner = ProjectScanner(project, load_ignore_spec(project))
    sources = list(scanner.scan())
    assert [s.rel_path for s in sources] == ["src/app.js", "src/main.py"]
    assert [s.name for s in sources] == ["app.js", "main.py"]


def test_scan_extension_filter(project):
    scanner = ProjectScanner(project, load_ignore_spec(project), extensions={".PY"})
    assert [s.rel_path for s in scanner.scan()] == ["src/main.py"]


def test_scan_does_not_read_files(project):
    scanner = ProjectScanner(project, load_ignore_spec(project))
    sources = list(scanner.scan())
    (project / "src" / "main.py").write_text("z = 3\n")
    main = [s for s in sources if s.name == "main.py"][0]
    assert main.load() == "z = 3\n"


# --- Test 3: Reading ---

def test_read_source(tmp_path):
    path = tmp_path / "a.py"
    path.write_text("x = 1\n")
    assert read_source(path, "a.py") == "x = 1\n"


def test_read_source_too_large(tmp_path):
    path = tmp_path / "a.py"
    path.write_text("x = 1234567890\n")
    with pytest.raises(InputTooLargeError) as excinfo:
        read_source(path, "a.py", max_bytes=5)
    assert "bytes" in str(excinfo.value)


def test_read_source_invalid_utf8(tmp_path):
    path = tmp_path / "a.py"
    path.write_bytes(b"\xff\xfe\xfd")
    with pytest.raises(SourceUnavailableError) as excinfo:
        read_source(path, "a.py")
    assert excinfo.value.code == ErrorCode.SOURCE_UNAVAILABLE


def test_read_source_missing(tmp_path):
    with pytest.raises(SourceUnavailableError):
        read_source(tmp_path / "missing.py", "missing.py")
