"""Parser recovery primitives."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Final

from plumlang.diagnostics.codes import PARSER_UNCLOSED_DELIMITER
from plumlang.diagnostics.errors import ParseError
from plumlang.lexer import TokenKind
from plumlang.text import TextRange

if TYPE_CHECKING:
    from plumlang.parser.parser import Parser

DELIMITERS: Final[dict[TokenKind, TokenKind]] = {
    TokenKind.LPAREN: TokenKind.RPAREN,
    TokenKind.LBRACKET: TokenKind.RBRACKET,
    TokenKind.LBRACE: TokenKind.RBRACE,
}
CLOSERS: Final[frozenset[TokenKind]] = frozenset(DELIMITERS.values())


class RecoveryError(StrEnum):
    EOF = "eof"
    ALREADY_RECOVERED = "already_recovered"
    RECOVERY_DISABLED = "recovery_disabled"
    UNCLOSED = "unclosed"


@dataclass(frozen=True, slots=True)
class ParseRecoveryTokenSet:
    """Recover a statement by skipping tokens until a safe token at nesting depth 0.

    Tokens in `recovery_set` end the skipped region and are consumed with it;
    tokens in `stop_set` end it and are left for the caller.
    """

    recovery_set: frozenset[TokenKind]
    stop_set: frozenset[TokenKind] = frozenset({TokenKind.EOF})

    def recover(self, parser: Parser) -> tuple[TextRange | None, RecoveryError | None]:
        if parser.at(TokenKind.EOF):
            return None, RecoveryError.EOF

        if parser.at_set(self.stop_set):
            return None, RecoveryError.ALREADY_RECOVERED

        if not parser.options.recover_statements:
            return None, RecoveryError.RECOVERY_DISABLED

        start = parser.current_range.start
        open_delimiters: list[TokenKind] = []
        while not parser.at(TokenKind.EOF):
            if not open_delimiters:
                if parser.at_set(self.stop_set):
                    break
                if parser.at_set(self.recovery_set):
                    parser.bump()
                    break
            _track_delimiter(parser.current, open_delimiters)
            parser.bump()

        return TextRange.new(start, parser.previous_range.end), None


@dataclass(frozen=True, slots=True)
class ParseRecoveryDelimited:
    """Skip the rest of a `(...)` or `[...]` group up to its matching closer.

    Nested `()`, `[]` and `{}` pairs are honoured. A closer that belongs to an
    enclosing group ends the skip without being consumed.
    """

    closer: TokenKind

    def recover(self, parser: Parser, open_range: TextRange) -> tuple[TextRange, RecoveryError | None]:
        if not parser.options.recover_delimited_groups:
            return TextRange.new(open_range.start, parser.previous_range.end), RecoveryError.RECOVERY_DISABLED

        open_delimiters: list[TokenKind] = [self.closer]
        while not parser.at(TokenKind.EOF):
            kind = parser.current
            if kind in CLOSERS and kind not in open_delimiters:
                break
            _track_delimiter(kind, open_delimiters)
            parser.bump()
            if not open_delimiters:
                return TextRange.new(open_range.start, parser.previous_range.end), None

        parser.error(
            ParseError(
                detail=f"Unclosed delimiter, expected a matching `{_closer_text(self.closer)}`",
                range=open_range,
                expected=(f"`{_closer_text(self.closer)}`",),
                code=PARSER_UNCLOSED_DELIMITER,
            )
        )
        end = max(open_range.end, parser.previous_range.end)
        return TextRange.new(open_range.start, end), RecoveryError.UNCLOSED


def _track_delimiter(kind: TokenKind, open_delimiters: list[TokenKind]) -> None:
    if kind in DELIMITERS:
        open_delimiters.append(DELIMITERS[kind])
    elif kind in CLOSERS and kind in open_delimiters:
        # a mismatched closer also closes every group opened after its partner
        while open_delimiters.pop() != kind:
            pass


def _closer_text(kind: TokenKind) -> str:
    match kind:
        case TokenKind.RPAREN:
            return ")"
        case TokenKind.RBRACKET:
            return "]"
        case _:
            return "}"
