"""Cursor over a lexed token list."""

from plumlang.lexer import Token, TokenKind
from plumlang.text import TextRange


class TokenSource:
    """Read-only cursor; the last token is always EOF and is never stepped past."""

    def __init__(self, tokens: list[Token]) -> None:
        if not tokens or tokens[-1].kind != TokenKind.EOF:
            end = tokens[-1].range.end if tokens else 0
            tokens = [*tokens, Token(TokenKind.EOF, TextRange.empty(end))]
        self._tokens = tokens
        self._position = 0

    @property
    def tokens(self) -> list[Token]:
        return self._tokens

    @property
    def current_token(self) -> Token:
        return self._tokens[self._position]

    @property
    def current(self) -> TokenKind:
        return self.current_token.kind

    @property
    def current_range(self) -> TextRange:
        return self.current_token.range

    @property
    def position(self) -> int:
        return self._position

    @property
    def previous_token(self) -> Token | None:
        if self._position == 0:
            return None
        return self._tokens[self._position - 1]

    @property
    def previous_range(self) -> TextRange:
        """Range of the last consumed token, or an empty range at the start."""
        if self._position == 0:
            return TextRange.empty(self.current_range.start)
        return self._tokens[self._position - 1].range

    def nth(self, n: int) -> Token:
        index = min(self._position + n, len(self._tokens) - 1)
        return self._tokens[index]

    def bump(self) -> None:
        if self.current != TokenKind.EOF:
            self._position += 1
