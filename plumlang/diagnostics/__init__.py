"""Diagnostics."""

from plumlang.diagnostics.codes import (
    LEXER_UNEXPECTED_CHARACTER,
    LEXER_UNTERMINATED_STRING,
    LEXER_INVALID_ESCAPE,
    LEXER_INVALID_UNICODE,
    PARSER_EXPECTED_TOKEN,
    PARSER_UNEXPECTED_TOKEN,
    PARSER_UNKNOWN_OPERATOR,
    PARSER_INVALID_NUMBER,
    PARSER_UNCLOSED_DELIMITER,
    PARSER_EMPTY_PROGRAM,
    RESOLVE_REASSIGN,
    RESOLVE_UNDEFINED_REFERENCE,
    RESOLVE_CIRCULAR_DEPENDENCY,
    EVAL_TYPE_ERROR,
    EVAL_INDEX_OUT_OF_BOUNDS,
    EVAL_RANGE_OUT_OF_BOUNDS,
    EVAL_UNDEFINED_REFERENCE,
    DiagnosticSpec,
    Severity,
)
from plumlang.diagnostics.diagnostic import Diagnostic
from plumlang.diagnostics.errors import (
    CircularDependencyError,
    EvalError,
    IndexOutOfBoundsError,
    LexError,
    OperandTypeError,
    ParseError,
    PlumError,
    RangeIndexError,
    ReassignError,
    ResolveError,
    TypeErrorContext,
    TypeErrorContextKind,
    UndefinedReferenceError,
    errors_to_diagnostics,
)
from plumlang.diagnostics.render import RenderOptions, build_report, print_errors, render_error
from plumlang.diagnostics.report import collect_diagnostics, has_errors, sort_diagnostics

__all__ = [
    "LEXER_UNEXPECTED_CHARACTER",
    "LEXER_UNTERMINATED_STRING",
    "LEXER_INVALID_ESCAPE",
    "LEXER_INVALID_UNICODE",
    "PARSER_EXPECTED_TOKEN",
    "PARSER_UNEXPECTED_TOKEN",
    "PARSER_UNKNOWN_OPERATOR",
    "PARSER_INVALID_NUMBER",
    "PARSER_UNCLOSED_DELIMITER",
    "PARSER_EMPTY_PROGRAM",
    "RESOLVE_REASSIGN",
    "RESOLVE_UNDEFINED_REFERENCE",
    "RESOLVE_CIRCULAR_DEPENDENCY",
    "EVAL_TYPE_ERROR",
    "EVAL_INDEX_OUT_OF_BOUNDS",
    "EVAL_RANGE_OUT_OF_BOUNDS",
    "EVAL_UNDEFINED_REFERENCE",
    "CircularDependencyError",
    "Diagnostic",
    "DiagnosticSpec",
    "EvalError",
    "IndexOutOfBoundsError",
    "LexError",
    "OperandTypeError",
    "ParseError",
    "PlumError",
    "RangeIndexError",
    "ReassignError",
    "RenderOptions",
    "ResolveError",
    "Severity",
    "TypeErrorContext",
    "TypeErrorContextKind",
    "UndefinedReferenceError",
    "build_report",
    "collect_diagnostics",
    "errors_to_diagnostics",
    "has_errors",
    "print_errors",
    "render_error",
    "sort_diagnostics",
]
