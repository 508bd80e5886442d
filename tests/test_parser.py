import pytest

from plumlang.ast import (
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
    NumberLiteral,
    Spanned,
)
from plumlang.diagnostics import LexError
from plumlang.lexer import Token, TokenKind, lex
from plumlang.parser import (
    ParseMode,
    Parser,
    ParserOptions,
    ParserProgress,
    RecoveryError,
    TokenSource,
    parse,
    parse_source,
    split_operator_runs,
)
from plumlang.parser.grammar import TOP_LEVEL_RECOVERY
from plumlang.text import ZERO_RANGE, TextRange
from tests._shared_cases import VALID_CASES, PlumCase, case_id


def _s(node: Expr) -> Spanned[Expr]:
    return Spanned(node, ZERO_RANGE)


def _num(value: float) -> Spanned[Expr]:
    return _s(NumberLiteral(value))


def _first(source: str) -> Expr:
    result = parse_source(source)
    assert result.errors == []
    return result.statements[0].node


def _codes(source: str, mode: ParseMode | None = None) -> list[str]:
    return [diagnostic.code for diagnostic in parse_source(source, mode=mode).diagnostics]


@pytest.mark.parametrize("case", VALID_CASES, ids=case_id)
def test_valid_cases_parse_cleanly_in_both_modes(case: PlumCase) -> None:
    recovered = parse_source(case.source)
    strict = parse_source(case.source, mode=ParseMode.STRICT)

    assert recovered.errors == []
    assert strict.errors == []
    assert recovered.statements == strict.statements
    assert recovered.statements


def test_parser_binding_powers() -> None:
    assert _first("1 + 2 * 3") == InfixOperation(
        _num(1),
        InfixOp.ADD,
        _s(InfixOperation(_num(2), InfixOp.MUL, _num(3))),
    )
    assert _first("1 ** 2..3") == InfixOperation(
        _num(1),
        InfixOp.POW,
        _s(InfixOperation(_num(2), InfixOp.RANGE, _num(3))),
    )
    assert _first("a or b and c") == InfixOperation(
        _s(Identifier("a")),
        InfixOp.OR,
        _s(InfixOperation(_s(Identifier("b")), InfixOp.AND, _s(Identifier("c")))),
    )


def test_parser_layers_fold_left() -> None:
    assert _first("1 - 2 - 3") == InfixOperation(
        _s(InfixOperation(_num(1), InfixOp.SUB, _num(2))),
        InfixOp.SUB,
        _num(3),
    )
    assert _first("1 < 2 == true") == InfixOperation(
        _s(InfixOperation(_num(1), InfixOp.LT, _num(2))),
        InfixOp.EQUALS,
        _s(BoolLiteral(True)),
    )


def test_parser_symbol_aliases_for_logic_operators() -> None:
    assert _first("a && b") == _first("a and b")
    assert _first("a || b") == _first("a or b")


def test_parser_not_clusters_and_index_chains() -> None:
    assert _first("!!x") == Not(_s(Not(_s(Identifier("x")))))
    assert _first("a[0][1]") == Index(_s(Index(_s(Identifier("a")), _num(0))), _num(1))
    assert _first("!a[0]") == Not(_s(Index(_s(Identifier("a")), _num(0))))


def test_parser_array_literal_allows_trailing_comma() -> None:
    assert _first("[1, 2,]") == ArrayLiteral((_num(1), _num(2)))
    assert _first("[]") == ArrayLiteral(())


def test_parser_spans_cover_operands_and_terminator() -> None:
    infix = parse_source("a + bb").statements[0]
    assignment = parse_source("x = 1 + 2;").statements[0]

    assert infix.span == TextRange(0, 6)
    assert assignment.span == TextRange(0, 10)
    assert isinstance(assignment.node, Assign)
    assert assignment.node.targets[0].span == TextRange(0, 1)
    assert assignment.node.value.span == TextRange(4, 9)


def test_parser_chained_assignment_is_one_statement() -> None:
    result = parse_source("a = b = c = 3;")

    assert len(result.statements) == 1
    node = result.statements[0].node
    assert isinstance(node, Assign)
    assert node.names == ("a", "b", "c")
    assert node.value == _num(3)


def test_parser_else_if_chain() -> None:
    node = _first("if a { 1; } else if b { 2; } else { 3; }")

    assert isinstance(node, Conditional)
    assert node.then_branch == _s(Block((_num(1),)))
    assert isinstance(node.else_branch.node, Conditional)
    assert node.else_branch.node.else_branch == _s(Block((_num(3),)))


def test_parser_assignment_statement_ends_at_its_semicolon() -> None:
    result = parse_source("a = 1;\n[1, 2][0];")

    assert result.errors == []
    assert len(result.statements) == 2
    assert isinstance(result.statements[0].node, Assign)
    assert result.statements[1].node == Index(_s(ArrayLiteral((_num(1), _num(2)))), _num(0))


def test_parser_conditional_statement_ends_at_its_closing_brace() -> None:
    result = parse_source("if true { 1; } else { 2; }\n[3][0];")

    assert result.errors == []
    assert len(result.statements) == 2
    assert isinstance(result.statements[0].node, Conditional)
    assert result.statements[1].node == Index(_s(ArrayLiteral((_num(3),))), _num(0))


def test_parser_statements_inside_block_end_at_assignment() -> None:
    node = _first("a = if true { b = 1; [b][0]; } else { 2; };")

    assert isinstance(node, Assign)
    conditional = node.value.node
    assert isinstance(conditional, Conditional)
    block = conditional.then_branch.node
    assert isinstance(block, Block)
    assert len(block.statements) == 2
    assert isinstance(block.statements[1].node, Index)


def test_parser_conditional_inside_expression_keeps_postfix_and_infix() -> None:
    node = _first("a = if true { [1]; } else { [2]; }[0] + 1;")

    assert isinstance(node, Assign)
    value = node.value.node
    assert isinstance(value, InfixOperation)
    assert isinstance(value.lhs.node, Index)
    assert isinstance(value.lhs.node.base.node, Conditional)


def test_parser_splits_operator_runs_ending_in_not() -> None:
    assert _first("a=!true;") == Assign((Spanned("a", ZERO_RANGE),), _s(Not(_s(BoolLiteral(True)))))
    assert _first("x = true==!false;") == Assign(
        (Spanned("x", ZERO_RANGE),),
        _s(InfixOperation(_s(BoolLiteral(True)), InfixOp.EQUALS, _s(Not(_s(BoolLiteral(False)))))),
    )
    assert _first("a&&!!b") == InfixOperation(
        _s(Identifier("a")),
        InfixOp.AND,
        _s(Not(_s(Not(_s(Identifier("b")))))),
    )


def test_split_operator_runs_keeps_ranges_contiguous() -> None:
    tokens = split_operator_runs(lex("a==!!b").tokens)

    assert [(token.text, token.range) for token in tokens[:4]] == [
        ("a", TextRange(0, 1)),
        ("==", TextRange(1, 3)),
        ("!!", TextRange(3, 5)),
        ("b", TextRange(5, 6)),
    ]
    assert [token.text for token in split_operator_runs(lex("a =< b").tokens)] == ["a", "=<", "b", ""]


def test_parser_reports_missing_semicolon_with_found_token() -> None:
    result = parse_source("a = 1 2;")

    assert len(result.errors) == 1
    assert result.errors[0].message == "Expected `;`, found `2`"
    assert result.errors[0].span == TextRange(6, 7)


def test_parser_recovers_malformed_group_as_error_node() -> None:
    result = parse_source("a = (1 2); b = 3;")

    assert [error.spec.code for error in result.errors] == ["PARSER_EXPECTED_TOKEN"]
    assert len(result.statements) == 2
    first = result.statements[0].node
    assert isinstance(first, Assign)
    assert isinstance(first.value.node, ErrorExpr)
    assert first.value.span == TextRange(4, 9)
    assert result.statements[1].node == Assign((Spanned("b", ZERO_RANGE),), _num(3))


def test_parser_recovers_statement_at_semicolon() -> None:
    result = parse_source("1 +; a = 2;")

    assert len(result.errors) == 1
    assert isinstance(result.statements[0].node, ErrorExpr)
    assert result.statements[0].span == TextRange(0, 4)
    assert isinstance(result.statements[1].node, Assign)


def test_parser_recovers_statement_inside_block() -> None:
    result = parse_source("a = if true { 1 +; 2; } else { 3; };")

    assert len(result.errors) == 1
    node = result.statements[0].node
    assert isinstance(node, Assign)
    conditional = node.value.node
    assert isinstance(conditional, Conditional)
    block = conditional.then_branch.node
    assert isinstance(block, Block)
    assert isinstance(block.statements[0].node, ErrorExpr)
    assert block.statements[1] == _num(2)


def test_parser_unclosed_array_reports_opening_bracket() -> None:
    result = parse_source("a = [1, 2;")

    unclosed = [error for error in result.errors if error.spec.code == "PARSER_UNCLOSED_DELIMITER"]
    assert len(unclosed) == 1
    assert unclosed[0].span == TextRange(4, 5)


def test_parser_unclosed_block() -> None:
    result = parse_source("a = if true { 1;")

    assert [error.spec.code for error in result.errors] == ["PARSER_UNCLOSED_DELIMITER"]
    assert result.errors[0].span == TextRange(12, 13)


def test_parser_empty_block_is_an_error() -> None:
    result = parse_source("a = if true { } else { 1; };")

    assert [error.message for error in result.errors] == ["Expected at least one statement in block"]
    node = result.statements[0].node
    assert isinstance(node, Assign)
    assert isinstance(node.value.node, Conditional)
    assert node.value.node.then_branch.node == Block((_s(ErrorExpr()),))


def test_parser_empty_program() -> None:
    assert _codes("") == ["PARSER_EMPTY_PROGRAM"]
    assert _codes("  // just a comment\n") == ["PARSER_EMPTY_PROGRAM"]


def test_parser_unknown_operator_and_invalid_number() -> None:
    assert _codes("a = 1 <> 2;") == ["PARSER_UNKNOWN_OPERATOR"]
    assert _codes("a = 1 =< 2;") == ["PARSER_UNKNOWN_OPERATOR"]
    assert _codes("a = ²;") == ["PARSER_INVALID_NUMBER"]


def test_strict_mode_stops_at_first_error() -> None:
    result = parse_source("a = (1 2); b = ;", mode=ParseMode.STRICT)

    assert result.statements == []
    assert len(result.errors) == 1
    assert result.options.stop_at_first_error is True


def test_recover_mode_collects_every_error() -> None:
    result = parse_source("a = (1 2); b = ;")

    assert len(result.errors) == 2
    assert result.has_errors is True


def test_parse_source_merges_lexer_errors_first() -> None:
    assert _codes('a = "x') == ["LEXER_UNTERMINATED_STRING", "PARSER_EXPECTED_TOKEN"]

    strict = parse_source('a = "x', mode=ParseMode.STRICT)
    assert strict.statements == []
    assert len(strict.errors) == 1
    assert isinstance(strict.errors[0], LexError)


def test_parse_rejects_options_and_mode_together() -> None:
    tokens = lex("a = 1;").tokens

    with pytest.raises(ValueError, match="Pass either options or mode, not both"):
        parse(tokens, ParserOptions(), mode=ParseMode.STRICT)


def test_parser_options_for_mode() -> None:
    strict = ParserOptions.for_mode(ParseMode.STRICT)
    recover = ParserOptions.for_mode(ParseMode.RECOVER)

    assert strict.recover_delimited_groups is False
    assert strict.recover_statements is False
    assert recover == ParserOptions()


def test_token_source_appends_missing_eof() -> None:
    result = parse([Token(TokenKind.IDENTIFIER, TextRange(0, 1), "a")])

    assert result.errors == []
    assert result.statements == [_s(Identifier("a"))]


def test_parser_progress_detects_stalls() -> None:
    parser = Parser(TokenSource(lex("a").tokens))
    progress = ParserProgress()

    progress.assert_progressing(parser)
    with pytest.raises(RuntimeError):
        progress.assert_progressing(parser)


def test_token_set_recovery_skips_nested_groups() -> None:
    parser = Parser(TokenSource(lex("x ( ; ) ; y").tokens))

    skipped, recovery_error = TOP_LEVEL_RECOVERY.recover(parser)

    assert recovery_error is None
    assert skipped == TextRange(0, 9)
    assert parser.current_token.text == "y"


def test_token_set_recovery_respects_options() -> None:
    options = ParserOptions(recover_statements=False)
    parser = Parser(TokenSource(lex("x ;").tokens), options=options)

    assert TOP_LEVEL_RECOVERY.recover(parser) == (None, RecoveryError.RECOVERY_DISABLED)

    at_end = Parser(TokenSource(lex("").tokens))
    assert TOP_LEVEL_RECOVERY.recover(at_end) == (None, RecoveryError.EOF)
