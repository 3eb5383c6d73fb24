# src/codetally/core/heuristics.py
"""
Regex heuristics that estimate how many variables a single line declares.

Each language family is a VariableHeuristic: an ordered tuple of pattern
families that are run independently over the line. Counts are additive and
never deduplicated across families, so ambiguous syntax can be counted twice.
"""
import re
from dataclasses import dataclass
from enum import Enum
from re import Match, Pattern
from typing import Tuple

SCRIPT_IDENT = r"[a-zA-Z_$][a-zA-Z0-9_$]*"
PY_IDENT = r"[a-zA-Z_][a-zA-Z0-9_]*"

_PUNCTUATION_ONLY = re.compile(r"^[{}();,\[\]]+$")
_DESTRUCTURING_BRACKETS = re.compile(r"[{}\[\]]")
_TRAILING_ARRAY_SUFFIX = re.compile(r"\[.*$")


class Capture(str, Enum):
    # one identifier bound per match
    BINDER = "binder"
    # comma list of bare identifiers (parameters, destructuring)
    PARAMS = "params"
    # comma list of "Type name" pieces, the trailing name is what counts
    TYPED_PARAMS = "typed_params"


@dataclass(frozen=True)
class PatternFamily:
    name: str
    pattern: Pattern[str]
    capture: Capture = Capture.BINDER


def _family(name: str, regex: str, capture: Capture = Capture.BINDER) -> PatternFamily:
    return PatternFamily(name=name, pattern=re.compile(regex), capture=capture)


def _declarator_name(piece: str) -> str:
    """'final Map<K, V> m = x' -> 'm', 'char **argv' -> 'argv'."""
    tokens = piece.split("=", 1)[0].split()
    if not tokens:
        return ""
    name = tokens[-1].lstrip("*&")
    return _TRAILING_ARRAY_SUFFIX.sub("", name)


@dataclass(frozen=True)
class VariableHeuristic:
    name: str
    identifier: Pattern[str]
    families: Tuple[PatternFamily, ...]

    def count(self, line: str) -> int:
        """Best-effort count for one line of code; never raises."""
        trimmed = line.strip()
        if not trimmed or _PUNCTUATION_ONLY.match(trimmed):
            return 0

        total = 0
        for family in self.families:
            for match in family.pattern.finditer(trimmed):
                total += self._count_match(family.capture, match)
        return total

    def _count_match(self, capture: Capture, match: Match[str]) -> int:
        if capture is Capture.BINDER:
            return 1

        inner = match.group(1) or ""
        if capture is Capture.PARAMS:
            pieces = _DESTRUCTURING_BRACKETS.sub("", inner).split(",")
        else:
            pieces = [_declarator_name(piece) for piece in inner.split(",")]
        return sum(1 for piece in pieces if self.identifier.fullmatch(piece.strip()))


# --- Brace-style, dynamically typed (JavaScript / TypeScript) ---

_JS = SCRIPT_IDENT
_JS_DECLARATOR = r"\b(?:let|const|var)"
_JS_NOT_A_FIELD = r"(?!(?:return|case|default|else|typeof|await|yield|throw|new|delete|export|import)\b)"

SCRIPT_FAMILIES = (
    _family(
        "declarator",
        _JS_DECLARATOR + r"\s+(" + _JS + r"(?:\s*,\s*" + _JS + r")*)\s*(?:[=;:]|$)",
        Capture.PARAMS,
    ),
    _family(
        "function_params",
        r"\bfunction\b\s*\*?\s*(?:" + _JS + r")?\s*\(([^)]*)\)",
        Capture.PARAMS,
    ),
    _family(
        "for_binder",
        r"\bfor\s*\(\s*(?:let|const|var)\s+(" + _JS + r")\s+(?:of|in)\b",
    ),
    _family("arrow_params", r"\(([^()]*)\)\s*=>", Capture.PARAMS),
    _family("arrow_param", r"(" + _JS + r")\s*=>"),
    _family(
        "class_field",
        r"^(?:(?:public|private|protected|static|readonly)\s+)*" + _JS_NOT_A_FIELD
        + r"(#?" + _JS + r")\s*[:=](?![=>])",
    ),
    _family("object_destructuring", _JS_DECLARATOR + r"\s*\{([^}]+)\}", Capture.PARAMS),
    _family("array_destructuring", _JS_DECLARATOR + r"\s*\[([^\]]+)\]", Capture.PARAMS),
    _family("object_target", r"(?:^|[(,])\s*\{([^{}]+)\}\s*=(?![=>])", Capture.PARAMS),
    _family("array_target", r"(?:^|[(,])\s*\[([^\[\]]+)\]\s*=(?![=>])", Capture.PARAMS),
)

SCRIPT_HEURISTIC = VariableHeuristic(
    name="script",
    identifier=re.compile(SCRIPT_IDENT),
    families=SCRIPT_FAMILIES,
)


# --- Brace-style, statically typed (Java / C# / C / C++) ---

PRIMITIVE_TYPES = (
    "byte", "short", "int", "long", "float", "double", "char", "boolean",
    "bool", "unsigned", "signed", "size_t", "auto", "decimal", "string",
    "object", "var", "dynamic",
)

KNOWN_OBJECT_TYPES = (
    "String", "Integer", "Long", "Float", "Double", "Character", "Boolean",
    "Byte", "Short", "Number", "BigDecimal", "BigInteger", "Object", "Class",
    "List", "Set", "Map", "Collection", "Iterable", "Iterator", "ArrayList",
    "LinkedList", "HashMap", "LinkedHashMap", "TreeMap", "HashSet",
    "LinkedHashSet", "TreeSet", "Queue", "Deque", "ArrayDeque", "Optional",
    "Stream", "Consumer", "Function", "Predicate", "Supplier", "Runnable",
    "Callable", "Thread", "StringBuilder", "Exception", "Error", "Dictionary",
    "IEnumerable", "IList", "Task",
)

_T = SCRIPT_IDENT
_PRIMS = r"(?:" + "|".join(PRIMITIVE_TYPES) + r")"
_KNOWN = r"(?:" + "|".join(KNOWN_OBJECT_TYPES) + r")"
_GENERIC = r"(?:\s*<[^;=(){}]*?>+)?"
_ARRAY = r"(?:\s*\[\s*\])*"
_SEP = r"[\s*&]+"
_ANY_TYPE = r"\b(?:" + _PRIMS + r"|" + _KNOWN + r"|[A-Z][a-zA-Z0-9_$]*)" + _GENERIC + _ARRAY
_NOT_A_NAME = r"(?!(?:new|return|else|throw|case)\b)"

TYPED_FAMILIES = (
    _family(
        "primitive",
        r"\b" + _PRIMS + _ARRAY + _SEP + r"(" + _T + r")(?:\s*\[[^\]]*\])*\s*[=;]",
    ),
    _family(
        "known_type",
        r"\b" + _KNOWN + _GENERIC + _ARRAY + r"\s+(" + _T + r")\s*[=;]",
    ),
    _family(
        "generic_type",
        r"\b(?!" + _KNOWN + r"\b)[A-Z][a-zA-Z0-9_$]*" + _GENERIC + _ARRAY + _SEP + r"(" + _T + r")\s*[=;]",
    ),
    _family(
        "method_params",
        r"(?:" + _ANY_TYPE + r"|\bvoid)" + _SEP + _NOT_A_NAME + _T + r"\s*\(([^)]*)\)",
        Capture.TYPED_PARAMS,
    ),
    _family(
        "constructor_params",
        r"\b(?:public|private|protected|internal)\s+[A-Z][a-zA-Z0-9_$]*\s*\(([^)]*)\)",
        Capture.TYPED_PARAMS,
    ),
    _family(
        "for_binder",
        r"\b(?:for|foreach)\s*\(\s*(?:final\s+)?" + _ANY_TYPE + _SEP + r"(" + _T + r")\s*(?:[:=]|\bin\b)",
    ),
    _family(
        "resource_binder",
        r"\b(?:try|using)\s*\(\s*(?:final\s+)?" + _ANY_TYPE + _SEP + r"(" + _T + r")\s*=",
    ),
    _family("lambda_params", r"\(([^()]*)\)\s*(?:->|=>)", Capture.TYPED_PARAMS),
    _family("lambda_param", r"\b(" + _T + r")\s*(?:->|=>)(?![\w$])"),
)

TYPED_HEURISTIC = VariableHeuristic(
    name="typed",
    identifier=re.compile(SCRIPT_IDENT),
    families=TYPED_FAMILIES,
)


# --- Indentation-style (Python) ---

BUILTIN_TYPE_NAMES = (
    "str", "int", "float", "bool", "bytes", "list", "dict", "tuple", "set",
    "frozenset", "complex", "object", "Optional", "Union", "Any", "List",
    "Dict", "Tuple", "Set", "Callable", "Iterable", "Sequence", "Mapping",
)

_PY = PY_IDENT
_PY_LIST = _PY + r"(?:\s*,\s*" + _PY + r")"

INDENTED_FAMILIES = (
    _family("assignment", r"^(" + _PY + r")\s*=(?!=)"),
    _family("tuple_assignment", r"^(" + _PY_LIST + r"+)\s*=(?!=)", Capture.PARAMS),
    _family("chained_assignment", r"(?<=[^=!<>+\-*/%&|^:@]=)\s*(" + _PY + r")(?=\s*=(?!=))"),
    _family("for_binder", r"\bfor\s+\(?(" + _PY_LIST + r"*)\)?\s+in\b", Capture.PARAMS),
    _family("with_binder", r"\bwith\s+[^:]*?\bas\s+(" + _PY + r")"),
    _family("attribute_binder", r"\b(?:self|cls)\.(" + _PY + r")\s*=(?!=)"),
    _family("function_params", r"\bdef\s+" + _PY + r"\s*\(([^)]*)\)", Capture.PARAMS),
    _family("lambda_params", r"\blambda\b\s*([^:]*):", Capture.PARAMS),
    _family(
        "type_annotation",
        r"\b(" + _PY + r")\s*:\s*(?:" + "|".join(BUILTIN_TYPE_NAMES) + r")\b",
    ),
)

INDENTED_HEURISTIC = VariableHeuristic(
    name="indented",
    identifier=re.compile(PY_IDENT),
    families=INDENTED_FAMILIES,
)
