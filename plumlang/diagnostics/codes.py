"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final, Literal

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


LEXER_UNEXPECTED_CHARACTER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNEXPECTED_CHARACTER",
    message="Unexpected character.",
    hint="Remove the character or quote it inside a string.",
    category="lexer",
)

LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string literal.",
    hint="Close the string with the same quote it was opened with.",
    category="lexer",
)

LEXER_INVALID_ESCAPE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_INVALID_ESCAPE",
    message="Invalid escape sequence.",
    hint="Valid escapes are \\\\ \\/ \\\" \\' \\b \\f \\n \\r \\t and \\uXXXX.",
    category="lexer",
)

LEXER_INVALID_UNICODE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_INVALID_UNICODE",
    message="Invalid unicode character.",
    hint="The escape was replaced by U+FFFD.",
    category="lexer",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="Expected token",
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="Unexpected token",
    category="parser",
)

PARSER_UNKNOWN_OPERATOR: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNKNOWN_OPERATOR",
    message="Unknown operator",
    hint="Operators are ** * / % + - == != < > <= >= and or in .. ..= and prefix !.",
    category="parser",
)

PARSER_INVALID_NUMBER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_INVALID_NUMBER",
    message="Invalid number literal",
    category="parser",
)

PARSER_UNCLOSED_DELIMITER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNCLOSED_DELIMITER",
    message="Unclosed delimiter",
    category="parser",
)

PARSER_EMPTY_PROGRAM: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EMPTY_PROGRAM",
    message="Program contains no statements",
    category="parser",
)

RESOLVE_REASSIGN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="RESOLVE_REASSIGN",
    message="Name is assigned more than once.",
    hint="Every name can only be assigned once; rename one of the definitions.",
    category="resolve",
)

RESOLVE_UNDEFINED_REFERENCE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="RESOLVE_UNDEFINED_REFERENCE",
    message="Reference to an undefined name.",
    category="resolve",
)

RESOLVE_CIRCULAR_DEPENDENCY: Final[DiagnosticSpec] = DiagnosticSpec(
    code="RESOLVE_CIRCULAR_DEPENDENCY",
    message="Circular dependency between definitions.",
    hint="Break the cycle by removing one of the references.",
    category="resolve",
)

EVAL_TYPE_ERROR: Final[DiagnosticSpec] = DiagnosticSpec(
    code="EVAL_TYPE_ERROR",
    message="Incompatible types",
    category="eval",
)

EVAL_INDEX_OUT_OF_BOUNDS: Final[DiagnosticSpec] = DiagnosticSpec(
    code="EVAL_INDEX_OUT_OF_BOUNDS",
    message="Index out of bounds",
    category="eval",
)

EVAL_RANGE_OUT_OF_BOUNDS: Final[DiagnosticSpec] = DiagnosticSpec(
    code="EVAL_RANGE_OUT_OF_BOUNDS",
    message="Range out of bounds",
    category="eval",
)

EVAL_UNDEFINED_REFERENCE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="EVAL_UNDEFINED_REFERENCE",
    message="Reference to an undefined name.",
    category="eval",
)
