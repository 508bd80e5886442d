"""Lexer."""

from plumlang.lexer.lexer import Lexer, LexResult, dump_tokens, lex
from plumlang.lexer.tokens import (
    CONTROL_CHARS,
    KEYWORDS,
    OPERATOR_CHARS,
    WORD_OPERATORS,
    Token,
    TokenKind,
)

__all__ = [
    "CONTROL_CHARS",
    "KEYWORDS",
    "OPERATOR_CHARS",
    "WORD_OPERATORS",
    "LexResult",
    "Lexer",
    "Token",
    "TokenKind",
    "dump_tokens",
    "lex",
]
