"""Plum grammar routines producing span-annotated AST nodes."""

from collections.abc import Callable, Sequence
from typing import Final, TypeVar

from plumlang.ast import (
    MIN_BINDING_POWER,
    ArrayLiteral,
    Assign,
    Block,
    BoolLiteral,
    Conditional,
    ErrorExpr,
    Expr,
    Identifier,
    Index,
    InfixOp,
    InfixOperation,
    Not,
    NullLiteral,
    NumberLiteral,
    Spanned,
    StringLiteral,
)
from plumlang.diagnostics.codes import (
    PARSER_EMPTY_PROGRAM,
    PARSER_EXPECTED_TOKEN,
    PARSER_INVALID_NUMBER,
    PARSER_UNCLOSED_DELIMITER,
    PARSER_UNKNOWN_OPERATOR,
)
from plumlang.diagnostics.errors import ParseError
from plumlang.lexer import Token, TokenKind
from plumlang.parser.parse_recovery import ParseRecoveryDelimited, ParseRecoveryTokenSet, RecoveryError
from plumlang.parser.parser import ParseAborted, Parser, ParserProgress, describe_token
from plumlang.text import TextRange

T = TypeVar("T")

INFIX_OPERATORS: Final[dict[str, InfixOp]] = {op.symbol: op for op in InfixOp} | {
    "&&": InfixOp.AND,
    "||": InfixOp.OR,
}

TOP_LEVEL_RECOVERY: Final[ParseRecoveryTokenSet] = ParseRecoveryTokenSet(
    recovery_set=frozenset({TokenKind.SEMICOLON}),
    stop_set=frozenset({TokenKind.EOF}),
)

BLOCK_RECOVERY: Final[ParseRecoveryTokenSet] = ParseRecoveryTokenSet(
    recovery_set=frozenset({TokenKind.SEMICOLON}),
    stop_set=frozenset({TokenKind.EOF, TokenKind.RBRACE}),
)

BLOCK_END: Final[frozenset[TokenKind]] = frozenset({TokenKind.RBRACE, TokenKind.EOF})


def parse_program(parser: Parser) -> list[Spanned[Expr]]:
    statements: list[Spanned[Expr]] = []
    progress = ParserProgress()
    while not parser.at(TokenKind.EOF):
        progress.assert_progressing(parser)
        statements.append(parse_statement(parser, TOP_LEVEL_RECOVERY, top_level=True))

    if not statements:
        parser.error(
            ParseError(
                detail="Program contains no statements",
                range=parser.current_range,
                expected=("statement",),
                found="end of input",
                code=PARSER_EMPTY_PROGRAM,
            )
        )
    return statements


def parse_statement(parser: Parser, recovery: ParseRecoveryTokenSet, *, top_level: bool) -> Spanned[Expr]:
    start = parser.current_range.start
    if parser.at(TokenKind.IF):
        # a statement that opens with `if` ends at the conditional's last `}`
        expr = parse_conditional(parser)
    else:
        expr = parse_expression(parser)
    if expr is None:
        return _recover_statement(parser, recovery, start)

    if isinstance(expr.node, Assign):
        return expr

    if isinstance(expr.node, Conditional):
        parser.eat(TokenKind.SEMICOLON)
        return expr

    if parser.eat(TokenKind.SEMICOLON):
        return expr

    if top_level and parser.at(TokenKind.EOF):
        return expr

    parser.error_expected(("`;`",))
    _recover_statement(parser, recovery, start)
    return expr


def parse_expression(parser: Parser, min_binding_power: int = MIN_BINDING_POWER) -> Spanned[Expr] | None:
    """Precedence climbing over the infix layers; every layer folds left."""
    lhs = parse_prefix(parser)
    if lhs is None:
        return None

    while parser.at(TokenKind.OPERATOR) and not _after_assignment(parser):
        token = parser.current_token
        op = INFIX_OPERATORS.get(token.text)
        if op is None:
            if token.text == "=" or _is_not_cluster(token):
                break
            _unknown_operator(parser, token)
            return None

        if op.binding_power < min_binding_power:
            break

        parser.bump()
        rhs = parse_expression(parser, op.binding_power + 1)
        if rhs is None:
            return None
        lhs = Spanned(InfixOperation(lhs, op, rhs), lhs.span.cover(rhs.span))

    return lhs


def parse_prefix(parser: Parser) -> Spanned[Expr] | None:
    token = parser.current_token
    if not _is_not_cluster(token):
        return parse_postfix(parser)

    parser.bump()
    operand = parse_prefix(parser)
    if operand is None:
        return None

    # "!!x" is two negations
    span = token.range.cover(operand.span)
    expr = operand
    for _ in token.text:
        expr = Spanned(Not(expr), span)
    return expr


def parse_postfix(parser: Parser) -> Spanned[Expr] | None:
    base = parse_atom(parser)
    if base is None:
        return None

    while parser.at(TokenKind.LBRACKET) and not _after_assignment(parser):
        index, group_range = _parse_delimited(parser, TokenKind.RBRACKET, ("`]`",), parse_expression)
        if index is None:
            index = Spanned(ErrorExpr(), group_range)
        base = Spanned(Index(base, index), base.span.cover(group_range))

    return base


def parse_atom(parser: Parser) -> Spanned[Expr] | None:
    token = parser.current_token
    match token.kind:
        case TokenKind.NUMBER:
            parser.bump()
            return _number_literal(parser, token)
        case TokenKind.STRING:
            parser.bump()
            return Spanned(StringLiteral(token.text), token.range)
        case TokenKind.TRUE | TokenKind.FALSE:
            parser.bump()
            return Spanned(BoolLiteral(token.kind == TokenKind.TRUE), token.range)
        case TokenKind.NULL:
            parser.bump()
            return Spanned(NullLiteral(), token.range)
        case TokenKind.IDENTIFIER:
            if parser.nth(1).is_operator("="):
                return parse_assignment(parser)
            parser.bump()
            return Spanned(Identifier(token.text), token.range)
        case TokenKind.LPAREN:
            inner, group_range = _parse_delimited(parser, TokenKind.RPAREN, ("`)`",), parse_expression)
            if inner is None:
                return Spanned(ErrorExpr(), group_range)
            return inner
        case TokenKind.LBRACKET:
            items, group_range = _parse_delimited(parser, TokenKind.RBRACKET, ("`,`", "`]`"), _parse_array_items)
            if items is None:
                return Spanned(ErrorExpr(), group_range)
            return Spanned(ArrayLiteral(items), group_range)
        case TokenKind.IF:
            return parse_conditional(parser)
        case _:
            parser.error_expected(("expression",))
            return None


def parse_assignment(parser: Parser) -> Spanned[Expr] | None:
    """`name (= name)* = expr ;`, every name bound to the same value."""
    start = parser.current_range
    targets: list[Spanned[str]] = []
    while parser.at(TokenKind.IDENTIFIER) and parser.nth(1).is_operator("="):
        name = parser.bump()
        parser.bump()
        targets.append(Spanned(name.text, name.range))

    value = parse_expression(parser)
    if value is None:
        return None

    if parser.expect(TokenKind.SEMICOLON, "`;`") is None:
        return None

    return Spanned(Assign(tuple(targets), value), start.cover(parser.previous_range))


def parse_conditional(parser: Parser) -> Spanned[Expr] | None:
    if_token = parser.bump()
    condition = parse_expression(parser)
    if condition is None:
        return None

    then_branch = parse_block(parser)
    if then_branch is None:
        return None

    if parser.expect(TokenKind.ELSE, "`else`") is None:
        return None

    if parser.at(TokenKind.IF):
        else_branch = parse_conditional(parser)
    else:
        else_branch = parse_block(parser)
    if else_branch is None:
        return None

    return Spanned(
        Conditional(condition, then_branch, else_branch),
        if_token.range.cover(else_branch.span),
    )


def parse_block(parser: Parser) -> Spanned[Expr] | None:
    open_token = parser.expect(TokenKind.LBRACE, "`{`")
    if open_token is None:
        return None

    statements: list[Spanned[Expr]] = []
    progress = ParserProgress()
    while not parser.at_set(BLOCK_END):
        progress.assert_progressing(parser)
        statements.append(parse_statement(parser, BLOCK_RECOVERY, top_level=False))

    if parser.at(TokenKind.EOF):
        parser.error(
            ParseError(
                detail="Unclosed delimiter, expected a matching `}`",
                range=open_token.range,
                expected=("`}`",),
                found="end of input",
                code=PARSER_UNCLOSED_DELIMITER,
            )
        )
        return None

    close_token = parser.bump()
    span = open_token.range.cover(close_token.range)
    if not statements:
        parser.error(
            ParseError(
                detail="Expected at least one statement in block",
                range=close_token.range,
                expected=("statement",),
                found=describe_token(close_token),
                code=PARSER_EXPECTED_TOKEN,
            )
        )
        statements.append(Spanned(ErrorExpr(), close_token.range))

    return Spanned(Block(tuple(statements)), span)


def _parse_array_items(parser: Parser) -> tuple[Spanned[Expr], ...] | None:
    items: list[Spanned[Expr]] = []
    progress = ParserProgress()
    while not parser.at(TokenKind.RBRACKET):
        progress.assert_progressing(parser)
        item = parse_expression(parser)
        if item is None:
            return None
        items.append(item)
        if not parser.eat(TokenKind.COMMA):
            break
    return tuple(items)


def _parse_delimited(
    parser: Parser,
    closer: TokenKind,
    expected: tuple[str, ...],
    parse_inner: Callable[[Parser], T | None],
) -> tuple[T | None, TextRange]:
    """Parse `open inner close`; on failure skip to the matching closer."""
    open_token = parser.bump()
    inner = parse_inner(parser)
    if inner is not None:
        if parser.at(closer):
            close_token = parser.bump()
            return inner, open_token.range.cover(close_token.range)
        parser.error_expected(expected)

    group_range, recovery_error = ParseRecoveryDelimited(closer).recover(parser, open_token.range)
    if recovery_error == RecoveryError.RECOVERY_DISABLED:
        raise ParseAborted("delimited group recovery is disabled")
    return None, group_range


def _recover_statement(parser: Parser, recovery: ParseRecoveryTokenSet, start: int) -> Spanned[Expr]:
    skipped, recovery_error = recovery.recover(parser)
    if recovery_error == RecoveryError.RECOVERY_DISABLED:
        raise ParseAborted("statement recovery is disabled")
    end = skipped.end if skipped is not None else parser.previous_range.end
    return Spanned(ErrorExpr(), TextRange.new(start, max(start, end)))


def _number_literal(parser: Parser, token: Token) -> Spanned[Expr]:
    try:
        value = float(token.text)
    except ValueError:
        parser.error(
            ParseError(
                detail=f"Invalid number literal `{token.text}`",
                range=token.range,
                found=describe_token(token),
                code=PARSER_INVALID_NUMBER,
            )
        )
        return Spanned(ErrorExpr(), token.range)
    return Spanned(NumberLiteral(value), token.range)


def _unknown_operator(parser: Parser, token: Token) -> None:
    parser.error(
        ParseError(
            detail=f"Unknown operator `{token.text}`",
            range=token.range,
            expected=("operator",),
            found=describe_token(token),
            code=PARSER_UNKNOWN_OPERATOR,
        )
    )


def _is_not_cluster(token: Token) -> bool:
    return token.kind == TokenKind.OPERATOR and bool(token.text) and set(token.text) == {"!"}


def _after_assignment(parser: Parser) -> bool:
    # only an assignment ends on `;` inside an expression; the next statement starts here
    previous = parser.previous_token
    return previous is not None and previous.kind == TokenKind.SEMICOLON


def split_operator_runs(tokens: Sequence[Token]) -> list[Token]:
    """Split operator runs such as `=!` or `==!!` into an operator and a `!` run."""
    split: list[Token] = []
    for token in tokens:
        if token.kind != TokenKind.OPERATOR or _is_known_operator(token.text):
            split.append(token)
            continue
        head = token.text.rstrip("!")
        if not head or not _is_known_operator(head):
            split.append(token)
            continue
        middle = token.range.start + len(head)
        split.append(Token(TokenKind.OPERATOR, TextRange.new(token.range.start, middle), head))
        split.append(Token(TokenKind.OPERATOR, TextRange.new(middle, token.range.end), token.text[len(head) :]))
    return split


def _is_known_operator(text: str) -> bool:
    return text == "=" or text in INFIX_OPERATORS
