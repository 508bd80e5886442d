"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Final

from plumlang.text import TextRange


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 1

    # -------------------------
    # Identifiers / literals
    # -------------------------
    IDENTIFIER = 20
    NUMBER = 21  # raw number text, converted by the parser
    STRING = 22  # decoded string contents
    TRUE = 23
    FALSE = 24
    NULL = 25

    # -------------------------
    # Keywords
    # -------------------------
    IF = 30
    ELSE = 31

    # -------------------------
    # Operators: a maximal run of operator characters, `..`/`..=`,
    # or one of the word operators. The parser gives them meaning.
    # -------------------------
    OPERATOR = 40

    # -------------------------
    # Control characters
    # -------------------------
    LPAREN = 60  # (
    RPAREN = 61  # )
    LBRACKET = 62  # [
    RBRACKET = 63  # ]
    LBRACE = 64  # {
    RBRACE = 65  # }
    COMMA = 66  # ,
    SEMICOLON = 67  # ;

    @property
    def ends_operand(self) -> bool:
        """Whether a `-` right after this token is a binary minus rather than a sign."""
        return self in (
            TokenKind.IDENTIFIER,
            TokenKind.NUMBER,
            TokenKind.STRING,
            TokenKind.TRUE,
            TokenKind.FALSE,
            TokenKind.NULL,
            TokenKind.RPAREN,
            TokenKind.RBRACKET,
        )


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token."""

    kind: TokenKind
    range: TextRange
    text: str = ""

    def is_operator(self, symbol: str) -> bool:
        return self.kind == TokenKind.OPERATOR and self.text == symbol


OPERATOR_CHARS: Final[frozenset[str]] = frozenset("+-*/%!=<>&|")

KEYWORDS: Final[dict[str, TokenKind]] = {
    "if": TokenKind.IF,
    "else": TokenKind.ELSE,
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
    "null": TokenKind.NULL,
}

WORD_OPERATORS: Final[frozenset[str]] = frozenset({"and", "or", "in"})

CONTROL_CHARS: Final[dict[str, TokenKind]] = {
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    ",": TokenKind.COMMA,
    ";": TokenKind.SEMICOLON,
}

SIMPLE_ESCAPES: Final[dict[str, str]] = {
    "\\": "\\",
    "/": "/",
    '"': '"',
    "'": "'",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
