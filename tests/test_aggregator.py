# tests/test_aggregator.py
import logging

from codetally.core.aggregator import FolderAggregator, fold, fold_folder
from codetally.models import FileEntry, FileStats, FolderStats, LineKind, LineResult


def test_fold_counts_each_kind():
    stats = fold([
        LineResult(LineKind.COMMENT),
        LineResult(LineKind.BLANK),
        LineResult(LineKind.CODE, variable_count=2),
        LineResult(LineKind.CODE, variable_count=1),
    ])
    assert stats == FileStats(blank=1, comment=1, code=2, variables=3, total=4)
    assert stats.blank + stats.comment + stats.code == stats.total


def test_fold_empty():
    stats = fold([])
    assert stats.total == 0
    assert stats.code_density == 0.0
    assert stats.variables_per_line == 0.0


def test_derived_ratios():
    stats = FileStats(blank=1, comment=1, code=2, variables=2, total=4)
    assert stats.code_density == 50.0
    assert stats.comment_ratio == 25.0
    assert stats.blank_ratio == 25.0
    assert stats.variables_per_line == 0.5


def test_fold_folder_sums_and_groups():
    folder = fold_folder([
        ("a.js", "JavaScript", FileStats(blank=1, comment=2, code=3, variables=4, total=6)),
        ("b.js", "JavaScript", FileStats(blank=0, comment=1, code=1, variables=1, total=2)),
        ("c.py", "Python", FileStats(blank=2, comment=0, code=2, variables=0, total=4)),
    ])

    assert folder.total_files == 3
    assert folder.total_lines == 12
    assert (folder.blank, folder.comment, folder.code, folder.variables) == (3, 3, 6, 5)
    assert folder.blank + folder.comment + folder.code == folder.total_lines
    assert folder.languages() == {"JavaScript": 2, "Python": 1}

    javascript = folder.per_language["JavaScript"]
    assert (javascript.files, javascript.total, javascript.variables) == (2, 8, 5)
    assert [e.filename for e in folder.per_file] == ["a.js", "b.js", "c.py"]
    assert folder.average_lines_per_file == 4.0


def test_empty_folder():
    folder = fold_folder([])
    assert folder == FolderStats()
    assert folder.code_density == 0.0
    assert folder.average_lines_per_file == 0.0


def test_skip_is_logged_and_not_counted(caplog):
    aggregator = FolderAggregator()
    aggregator.add(FileEntry("a.py", "Python", FileStats(code=1, total=1)))

    with caplog.at_level(logging.WARNING):
        aggregator.skip("broken.py", "unreadable")

    folder = aggregator.build()
    assert folder.total_files == 1
    assert folder.total_lines == 1
    assert [s.filename for s in folder.skipped] == ["broken.py"]
    assert "broken.py" in caplog.text


def test_folder_to_dict():
    folder = fold_folder([("a.py", "Python", FileStats(code=2, variables=1, total=2))])
    data = folder.to_dict()
    assert data["total_files"] == 1
    assert data["per_language"]["Python"]["files"] == 1
    assert data["per_file"][0] == {
        "filename": "a.py", "language": "Python",
        "blank": 0, "comment": 0, "code": 2, "variables": 1, "total": 2,
    }
    assert data["skipped"] == []
