# tests/test_classifier.py
import pytest

from codetally.core.classifier import LineClassifier
from codetally.models import ClassifierState, LineKind


@pytest.fixture
def c_style():
    return LineClassifier("//", "/*", "*/")


@pytest.fixture
def python_style():
    return LineClassifier("#", '"""', '"""')


def classify(classifier, lines):
    state = ClassifierState()
    return [classifier.parse_line(line, state) for line in lines], state


# --- Test 1: Single lines ---

def test_blank_lines(c_style):
    state = ClassifierState()
    assert c_style.parse_line("", state) == LineKind.BLANK
    assert c_style.parse_line("   \t ", state) == LineKind.BLANK


def test_line_comment_and_code(c_style):
    kinds, state = classify(c_style, ["// hello", "", "let x = 1;"])
    assert kinds == [LineKind.COMMENT, LineKind.BLANK, LineKind.CODE]
    assert state.in_block_comment is False


def test_indented_comment(c_style):
    state = ClassifierState()
    assert c_style.parse_line("    // indented", state) == LineKind.COMMENT


def test_one_line_block_comment(c_style):
    state = ClassifierState()
    assert c_style.parse_line("/* note */", state) == LineKind.COMMENT
    assert state.in_block_comment is False


# --- Test 2: Multi-line block comments ---

def test_block_comment_spans_lines(c_style):
    kinds, state = classify(c_style, ["/* start", "still in comment", "end */", "code();"])
    assert kinds == [LineKind.COMMENT, LineKind.COMMENT, LineKind.COMMENT, LineKind.CODE]
    assert state.in_block_comment is False


def test_blank_line_inside_block_keeps_state(c_style):
    kinds, state = classify(c_style, ["/* start", ""])
    assert kinds == [LineKind.COMMENT, LineKind.BLANK]
    assert state.in_block_comment is True


def test_code_after_closing_token_is_comment(c_style):
    kinds, state = classify(c_style, ["/* start", "*/ int x = 1;", "int y = 2;"])
    assert kinds == [LineKind.COMMENT, LineKind.COMMENT, LineKind.CODE]


def test_unterminated_block_runs_to_end(c_style):
    kinds, state = classify(c_style, ["/*", "a", "b"])
    assert kinds == [LineKind.COMMENT] * 3
    assert state.in_block_comment is True


# --- Test 3: Python delimiters ---

def test_python_docstring_block(python_style):
    kinds, state = classify(python_style, ['"""Docstring start', "text", '"""', "x = 1"])
    assert kinds == [LineKind.COMMENT, LineKind.COMMENT, LineKind.COMMENT, LineKind.CODE]
    assert state.in_block_comment is False


def test_python_one_line_docstring(python_style):
    kinds, state = classify(python_style, ['"""Doc."""', "x = 1"])
    assert kinds == [LineKind.COMMENT, LineKind.CODE]
    assert state.in_block_comment is False


def test_python_hash_comment(python_style):
    state = ClassifierState()
    assert python_style.parse_line("# config", state) == LineKind.COMMENT


def test_python_string_assignment_does_not_open_block(python_style):
    kinds, state = classify(python_style, ['text = """hello', "world"])
    assert kinds == [LineKind.CODE, LineKind.CODE]
    assert state.in_block_comment is False


# --- Test 4: Block comment tokens after code ---

def test_block_start_after_code_does_not_open_block(c_style):
    kinds, state = classify(c_style, ["int x = 1; /* start", "more();"])
    assert kinds == [LineKind.CODE, LineKind.CODE]
    assert state.in_block_comment is False


def test_block_tokens_inside_strings(c_style):
    lines = [
        'const headers = { Accept: "*/*" };',
        "let a = 1;",
        'const pattern = "src/*";',
        "build(pattern);",
    ]
    kinds, state = classify(c_style, lines)
    assert kinds == [LineKind.CODE] * 4
    assert state.in_block_comment is False


def test_closed_block_after_code(c_style):
    kinds, state = classify(c_style, ["foo(); /* note */", "bar();"])
    assert kinds == [LineKind.CODE, LineKind.CODE]
    assert state.in_block_comment is False


def test_block_start_inside_line_comment(c_style):
    kinds, state = classify(c_style, ["x(); // see /* here", "y();"])
    assert kinds == [LineKind.CODE, LineKind.CODE]
    assert state.in_block_comment is False
