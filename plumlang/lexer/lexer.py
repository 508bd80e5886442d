"""Lexer."""

import logging
from dataclasses import dataclass, field

from plumlang.diagnostics.codes import (
    LEXER_INVALID_ESCAPE,
    LEXER_INVALID_UNICODE,
    LEXER_UNEXPECTED_CHARACTER,
    LEXER_UNTERMINATED_STRING,
    DiagnosticSpec,
)
from plumlang.diagnostics.diagnostic import Diagnostic
from plumlang.diagnostics.errors import LexError
from plumlang.diagnostics.report import has_errors
from plumlang.lexer.tokens import (
    CONTROL_CHARS,
    KEYWORDS,
    OPERATOR_CHARS,
    SIMPLE_ESCAPES,
    WORD_OPERATORS,
    Token,
    TokenKind,
)
from plumlang.text import TextRange

logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


@dataclass(frozen=True, slots=True)
class LexResult:
    """Tokens plus every lexical error found on the way."""

    source: str
    tokens: list[Token]
    errors: list[LexError] = field(default_factory=list)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [error.to_diagnostic() for error in self.errors]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)


class Lexer:
    """Single-pass lexer. Whitespace and comments are dropped, errors are collected."""

    def __init__(self, source: str) -> None:
        self._source = source
        self._position = 0
        self._current_start = 0
        self._previous_kind: TokenKind | None = None
        self._errors: list[LexError] = []

    @property
    def source(self) -> str:
        return self._source

    @property
    def errors(self) -> list[LexError]:
        return self._errors

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_eof(self) -> bool:
        return self._position >= len(self._source)

    @property
    def current_range(self) -> TextRange:
        return TextRange.new(self._current_start, self._position)

    def lex(self) -> list[Token]:
        tokens: list[Token] = []
        while True:
            self._skip_trivia()
            self._current_start = self._position
            if self.is_eof:
                tokens.append(Token(TokenKind.EOF, TextRange.empty(self._position)))
                break
            token = self._lex_token()
            if token is None:
                continue
            self._previous_kind = token.kind
            tokens.append(token)
        return tokens

    def _lex_token(self) -> Token | None:
        ch = self._current_char()

        kind = CONTROL_CHARS.get(ch)
        if kind is not None:
            self._advance(1)
            return self._token(kind, ch)

        if ch == '"' or ch == "'":
            return self._lex_string(ch)

        if ch.isdigit():
            return self._lex_number()

        if ch == "-" and self._peek_char().isdigit() and not self._previous_ends_operand():
            self._advance(1)
            return self._lex_number()

        if ch.isalpha() or ch == "_":
            return self._lex_identifier()

        if ch == "." and self._peek_char() == ".":
            self._advance(2)
            if self._current_char() == "=":
                self._advance(1)
                return self._token(TokenKind.OPERATOR, "..=")
            return self._token(TokenKind.OPERATOR, "..")

        if ch in OPERATOR_CHARS:
            return self._lex_operator()

        self._lex_unexpected()
        return None

    def _lex_operator(self) -> Token:
        while not self.is_eof:
            ch = self._current_char()
            if ch not in OPERATOR_CHARS or self._at_comment():
                break
            # "=-5" is `=` followed by the literal -5
            if ch == "-" and self._peek_char().isdigit() and self._position > self._current_start:
                break
            self._advance(1)
        return self._token(TokenKind.OPERATOR, self._current_text())

    def _lex_number(self) -> Token:
        self._consume_digits()
        if self._current_char() == "." and self._peek_char().isdigit():
            self._advance(1)
            self._consume_digits()
        if self._current_char() in ("e", "E"):
            sign = self._peek_char()
            if sign.isdigit():
                self._advance(1)
                self._consume_digits()
            elif sign in ("+", "-") and self._peek_char(2).isdigit():
                self._advance(2)
                self._consume_digits()
        return self._token(TokenKind.NUMBER, self._current_text())

    def _lex_identifier(self) -> Token:
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch.isalnum() or ch == "_":
                self._advance(1)
                continue
            break
        text = self._current_text()
        if text in WORD_OPERATORS:
            return self._token(TokenKind.OPERATOR, text)
        return self._token(KEYWORDS.get(text, TokenKind.IDENTIFIER), text)

    def _lex_string(self, quote: str) -> Token:
        # Consume opening quote
        self._advance(1)
        parts: list[str] = []
        closed = False

        while not self.is_eof:
            ch = self._current_char()
            if ch == quote:
                self._advance(1)
                closed = True
                break
            if ch == "\\":
                parts.append(self._lex_escape())
                continue
            parts.append(ch)
            self._advance(1)

        if not closed:
            self._error(LEXER_UNTERMINATED_STRING, self.current_range)

        return self._token(TokenKind.STRING, "".join(parts))

    def _lex_escape(self) -> str:
        escape_start = self._position
        self._advance(1)
        if self.is_eof:
            # reported as an unterminated string by the caller
            return ""

        ch = self._current_char()
        simple = SIMPLE_ESCAPES.get(ch)
        if simple is not None:
            self._advance(1)
            return simple

        if ch == "u":
            self._advance(1)
            digits_start = self._position
            while self._position - digits_start < 4 and self._current_char() in _HEX_DIGITS:
                self._advance(1)
            digits = self._source[digits_start : self._position]
            escape_range = TextRange.new(escape_start, self._position)
            if len(digits) < 4:
                self._error(
                    LEXER_INVALID_ESCAPE,
                    escape_range,
                    "Unicode escapes need exactly four hex digits.",
                )
                return "\ufffd"
            code_point = int(digits, 16)
            if 0xD800 <= code_point <= 0xDFFF:
                self._error(
                    LEXER_INVALID_UNICODE,
                    escape_range,
                    f"\\u{digits} is not a valid unicode character.",
                )
                return "\ufffd"
            return chr(code_point)

        self._advance(1)
        self._error(
            LEXER_INVALID_ESCAPE,
            TextRange.new(escape_start, self._position),
            f"Invalid escape sequence `\\{ch}`.",
        )
        return ch

    def _lex_unexpected(self) -> None:
        # a run of unexpected characters is reported once
        self._advance(1)
        while not self.is_eof and not self._starts_token():
            self._advance(1)
        text = self._current_text()
        self._error(LEXER_UNEXPECTED_CHARACTER, self.current_range, f"Unexpected character(s) `{text}`.")

    def _starts_token(self) -> bool:
        ch = self._current_char()
        if ch.isspace() or ch.isalnum() or ch == "_":
            return True
        if ch in CONTROL_CHARS or ch in OPERATOR_CHARS or ch in ('"', "'"):
            return True
        return ch == "." and self._peek_char() == "."

    def _skip_trivia(self) -> None:
        while not self.is_eof:
            ch = self._current_char()
            if ch.isspace():
                self._advance(1)
                continue
            if self._at_comment():
                self._skip_comment()
                continue
            break

    def _skip_comment(self) -> None:
        # Consume until end of line, the newline is whitespace.
        self._advance(2)
        while not self.is_eof:
            ch = self._current_char()
            if ch == "\n" or ch == "\r":
                break
            self._advance(1)

    def _at_comment(self) -> bool:
        return self._current_char() == "/" and self._peek_char() == "/"

    def _previous_ends_operand(self) -> bool:
        return self._previous_kind is not None and self._previous_kind.ends_operand

    def _consume_digits(self) -> None:
        while self._current_char().isdigit():
            self._advance(1)

    def _token(self, kind: TokenKind, text: str) -> Token:
        return Token(kind, self.current_range, text)

    def _current_text(self) -> str:
        return self._source[self._current_start : self._position]

    def _error(self, spec: DiagnosticSpec, text_range: TextRange, detail: str | None = None) -> None:
        self._errors.append(LexError(detail or spec.message, text_range, spec))

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= len(self._source):
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        self._position += steps


def lex(source: str) -> LexResult:
    """Tokenize `source`. The token list always ends with an EOF token."""
    lexer = Lexer(source)
    tokens = lexer.lex()
    logger.debug("lexed %d tokens with %d errors", len(tokens), len(lexer.errors))
    return LexResult(source=source, tokens=tokens, errors=list(lexer.errors))


def dump_tokens(tokens: list[Token], errors: list[LexError] | None = None) -> None:
    """Print token list with kind, range, and text for debugging."""
    for i, tok in enumerate(tokens):
        print(f"{i:03d} {tok.kind.name:<12} range={tok.range.as_tuple()} text={tok.text!r}")

    if errors is not None:
        print("\nErrors:")
        for error in errors:
            print(f"- {error.kind} {error.spec.code} range={error.span.as_tuple()} message={error.message}")
