"""High-level parse entrypoints for plum source."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from plumlang.ast import Expr, Spanned
from plumlang.diagnostics import Diagnostic, LexError, ParseError, has_errors
from plumlang.lexer import Token, lex
from plumlang.parser.grammar import parse_program, split_operator_runs
from plumlang.parser.options import ParseMode, ParserOptions
from plumlang.parser.parser import ParseAborted, Parser
from plumlang.parser.token_source import TokenSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Top-level statements plus every lexer and parser error, lexer errors first."""

    statements: list[Spanned[Expr]]
    errors: list[LexError | ParseError] = field(default_factory=list)
    options: ParserOptions = field(default_factory=ParserOptions)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [error.to_diagnostic() for error in self.errors]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)


def _resolve_options(
    options: ParserOptions | None,
    mode: ParseMode | None,
) -> ParserOptions:
    if mode is not None and options is not None:
        raise ValueError("Pass either options or mode, not both")

    if options is not None:
        return options

    if mode is not None:
        return ParserOptions.for_mode(mode)

    return ParserOptions()


def parse(
    tokens: Sequence[Token],
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> ParseResult:
    resolved_options = _resolve_options(options=options, mode=mode)

    parser = Parser(TokenSource(split_operator_runs(tokens)), options=resolved_options)
    try:
        statements = parse_program(parser)
    except ParseAborted:
        statements = []
    errors = parser.finish()

    logger.debug("parsed %d statements with %d errors", len(statements), len(errors))
    return ParseResult(statements=statements, errors=list(errors), options=resolved_options)


def parse_source(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> ParseResult:
    resolved_options = _resolve_options(options=options, mode=mode)

    lexed = lex(text)
    if lexed.has_errors and resolved_options.stop_at_first_error:
        return ParseResult(statements=[], errors=lexed.errors[:1], options=resolved_options)

    parsed = parse(lexed.tokens, options=resolved_options)
    return ParseResult(
        statements=parsed.statements,
        errors=[*lexed.errors, *parsed.errors],
        options=resolved_options,
    )
