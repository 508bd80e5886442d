"""Plum parser."""

from plumlang.parser.grammar import (
    INFIX_OPERATORS,
    parse_block,
    parse_expression,
    parse_program,
    parse_statement,
    split_operator_runs,
)
from plumlang.parser.options import ParseMode, ParserOptions
from plumlang.parser.parse_recovery import (
    ParseRecoveryDelimited,
    ParseRecoveryTokenSet,
    RecoveryError,
)
from plumlang.parser.parser import ParseAborted, Parser, ParserProgress
from plumlang.parser.program import ParseResult, parse, parse_source
from plumlang.parser.token_source import TokenSource

__all__ = [
    "INFIX_OPERATORS",
    "ParseAborted",
    "ParseMode",
    "ParseRecoveryDelimited",
    "ParseRecoveryTokenSet",
    "ParseResult",
    "Parser",
    "ParserOptions",
    "ParserProgress",
    "RecoveryError",
    "TokenSource",
    "parse",
    "parse_block",
    "parse_expression",
    "parse_program",
    "parse_source",
    "parse_statement",
    "split_operator_runs",
]
