# src/codetally/core/registry.py
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Tuple

from codetally.core.classifier import LineClassifier
from codetally.core.heuristics import (
    INDENTED_HEURISTIC,
    SCRIPT_HEURISTIC,
    TYPED_HEURISTIC,
    VariableHeuristic,
)
from codetally.models import ClassifierState, LineKind


@dataclass(frozen=True)
class LanguageRule:
    """Comment delimiters, extensions and variable heuristic for one language."""
    name: str
    extensions: FrozenSet[str]
    classifier: LineClassifier
    heuristic: VariableHeuristic

    @property
    def single_line_comment(self) -> str:
        return self.classifier.single_line_comment

    @property
    def block_comment_start(self) -> str:
        return self.classifier.block_comment_start

    @property
    def block_comment_end(self) -> str:
        return self.classifier.block_comment_end

    def parse_line(self, line: str, state: ClassifierState) -> LineKind:
        return self.classifier.parse_line(line, state)

    def count_variables(self, line: str) -> int:
        trimmed = line.strip()
        if not trimmed or trimmed.startswith(self.single_line_comment):
            return 0

        # Drop a trailing inline comment before matching
        comment_index = trimmed.find(self.single_line_comment)
        code = trimmed[:comment_index] if comment_index > 0 else trimmed
        return self.heuristic.count(code)


def make_rule(
    name: str,
    extensions: Iterable[str],
    delimiters: Tuple[str, str, str],
    heuristic: VariableHeuristic,
) -> LanguageRule:
    single, start, end = delimiters
    return LanguageRule(
        name=name,
        extensions=frozenset(ext.lower() for ext in extensions),
        classifier=LineClassifier(single, start, end),
        heuristic=heuristic,
    )


C_STYLE = ("//", "/*", "*/")
PYTHON_STYLE = ("#", '"""', '"""')

# Order matters: the first rule claiming an extension wins
DEFAULT_RULES = (
    make_rule("Java", [".java"], C_STYLE, TYPED_HEURISTIC),
    make_rule("Python", [".py", ".pyw"], PYTHON_STYLE, INDENTED_HEURISTIC),
    make_rule("JavaScript", [".js", ".jsx", ".mjs", ".cjs"], C_STYLE, SCRIPT_HEURISTIC),
    make_rule("TypeScript", [".ts", ".tsx"], C_STYLE, SCRIPT_HEURISTIC),
    make_rule("C#", [".cs"], C_STYLE, TYPED_HEURISTIC),
    make_rule("C++", [".cpp", ".cc", ".cxx", ".h", ".hpp"], C_STYLE, TYPED_HEURISTIC),
    make_rule("C", [".c"], C_STYLE, TYPED_HEURISTIC),
)


def extension_of(filename: Optional[str]) -> Optional[str]:
    """Lower-cased '.ext' after the last dot of the base name, or None."""
    if not filename:
        return None
    base_name = filename.replace("\\", "/").rsplit("/", 1)[-1]
    dot = base_name.rfind(".")
    if dot == -1 or dot == len(base_name) - 1:
        return None
    return base_name[dot:].lower()


class LanguageRegistry:
    def __init__(self, rules: Iterable[LanguageRule] = DEFAULT_RULES):
        self._rules: List[LanguageRule] = list(rules)

    def register(self, rule: LanguageRule) -> None:
        """Appends a rule; it only wins for extensions no earlier rule claims."""
        self._rules.append(rule)

    def resolve(self, filename: Optional[str]) -> Optional[LanguageRule]:
        extension = extension_of(filename)
        if extension is None:
            return None
        for rule in self._rules:
            if extension in rule.extensions:
                return rule
        return None

    def is_supported(self, filename: Optional[str]) -> bool:
        return self.resolve(filename) is not None

    def supported_extensions(self) -> FrozenSet[str]:
        return frozenset(ext for rule in self._rules for ext in rule.extensions)

    def language_names(self) -> List[str]:
        return [rule.name for rule in self._rules]


DEFAULT_REGISTRY = LanguageRegistry()


def get_rule_for_file(filename: Optional[str]) -> Optional[LanguageRule]:
    return DEFAULT_REGISTRY.resolve(filename)
