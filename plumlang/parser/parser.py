"""Recursive-descent parser core."""

from dataclasses import dataclass

from plumlang.diagnostics.codes import PARSER_EXPECTED_TOKEN, DiagnosticSpec
from plumlang.diagnostics.errors import ParseError
from plumlang.lexer import CONTROL_CHARS, Token, TokenKind
from plumlang.parser.options import ParserOptions
from plumlang.parser.token_source import TokenSource
from plumlang.text import TextRange

_KIND_NAMES: dict[TokenKind, str] = {
    TokenKind.EOF: "end of input",
    TokenKind.IDENTIFIER: "identifier",
    TokenKind.NUMBER: "number",
    TokenKind.STRING: "string",
    TokenKind.OPERATOR: "operator",
}

_CONTROL_TEXT: dict[TokenKind, str] = {kind: ch for ch, kind in CONTROL_CHARS.items()}


def describe_kind(kind: TokenKind) -> str:
    if kind in _KIND_NAMES:
        return _KIND_NAMES[kind]
    if kind in _CONTROL_TEXT:
        return f"`{_CONTROL_TEXT[kind]}`"
    return f"`{kind.name.lower()}`"


def describe_token(token: Token) -> str:
    match token.kind:
        case TokenKind.EOF:
            return "end of input"
        case TokenKind.IDENTIFIER:
            return f"identifier `{token.text}`"
        case TokenKind.STRING:
            return "string"
        case _:
            return f"`{token.text}`"


class ParseAborted(Exception):
    """Raised by `Parser.error` in strict mode to unwind to the entry point."""


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside list-style loops."""

    _position: int | None = None

    def has_progressed(self, parser: "Parser") -> bool:
        has_progressed = self._position is None or self._position < parser.position
        self._position = parser.position
        return has_progressed

    def assert_progressing(self, parser: "Parser") -> None:
        if not self.has_progressed(parser):
            raise RuntimeError(f"Parser stopped making progress at {parser.current.name} {parser.current_range}")


class Parser:
    """Token cursor plus error bookkeeping shared by the grammar routines."""

    def __init__(self, source: TokenSource, options: ParserOptions | None = None) -> None:
        self._source = source
        self._options = options or ParserOptions()
        self._errors: list[ParseError] = []

    @property
    def source(self) -> TokenSource:
        return self._source

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def errors(self) -> list[ParseError]:
        return self._errors

    @property
    def current(self) -> TokenKind:
        return self._source.current

    @property
    def current_token(self) -> Token:
        return self._source.current_token

    @property
    def current_range(self) -> TextRange:
        return self._source.current_range

    @property
    def previous_token(self) -> Token | None:
        return self._source.previous_token

    @property
    def previous_range(self) -> TextRange:
        return self._source.previous_range

    @property
    def position(self) -> int:
        return self._source.position

    def at(self, kind: TokenKind) -> bool:
        return self.current == kind

    def at_set(self, kinds: frozenset[TokenKind] | set[TokenKind]) -> bool:
        return self.current in kinds

    def at_operator(self, symbol: str) -> bool:
        return self.current_token.is_operator(symbol)

    def nth(self, n: int) -> Token:
        return self._source.nth(n)

    def bump(self) -> Token:
        token = self.current_token
        self._source.bump()
        return token

    def eat(self, kind: TokenKind) -> bool:
        if self.current == kind:
            self.bump()
            return True
        return False

    def expect(self, kind: TokenKind, what: str | None = None) -> Token | None:
        if self.current == kind:
            return self.bump()
        self.error_expected((what or describe_kind(kind),), PARSER_EXPECTED_TOKEN)
        return None

    def error_expected(self, expected: tuple[str, ...], code: DiagnosticSpec = PARSER_EXPECTED_TOKEN) -> None:
        found = describe_token(self.current_token)
        self.error(
            ParseError(
                detail=f"Expected {_join_alternatives(expected)}, found {found}",
                range=self.current_range,
                expected=expected,
                found=found,
                code=code,
            )
        )

    def error(self, error: ParseError) -> None:
        if self._errors:
            previous = self._errors[-1]
            if previous.range.start == error.range.start:
                return
        self._errors.append(error)
        if self._options.stop_at_first_error:
            raise ParseAborted(error.message)

    def finish(self) -> list[ParseError]:
        return self._errors


def _join_alternatives(expected: tuple[str, ...]) -> str:
    if len(expected) == 1:
        return expected[0]
    return ", ".join(expected[:-1]) + " or " + expected[-1]
