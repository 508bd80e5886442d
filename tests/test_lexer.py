from plumlang.lexer import Token, TokenKind, dump_tokens, lex
from plumlang.text import TextRange


def _kinds(source: str) -> list[TokenKind]:
    return [token.kind for token in lex(source).tokens]


def _texts(source: str) -> list[str]:
    return [token.text for token in lex(source).tokens if token.kind != TokenKind.EOF]


def test_lexer_assignment_tokens_and_ranges() -> None:
    result = lex("ab = 1;")

    assert result.errors == []
    assert result.tokens == [
        Token(TokenKind.IDENTIFIER, TextRange(0, 2), "ab"),
        Token(TokenKind.OPERATOR, TextRange(3, 4), "="),
        Token(TokenKind.NUMBER, TextRange(5, 6), "1"),
        Token(TokenKind.SEMICOLON, TextRange(6, 7), ";"),
        Token(TokenKind.EOF, TextRange(7, 7), ""),
    ]


def test_lexer_keywords_and_word_operators() -> None:
    assert _kinds("if else true false null") == [
        TokenKind.IF,
        TokenKind.ELSE,
        TokenKind.TRUE,
        TokenKind.FALSE,
        TokenKind.NULL,
        TokenKind.EOF,
    ]

    result = lex("x and y or z in w")
    operators = [token.text for token in result.tokens if token.kind == TokenKind.OPERATOR]
    assert operators == ["and", "or", "in"]


def test_lexer_identifiers_may_contain_keywords() -> None:
    assert _kinds("iffy android _x1") == [
        TokenKind.IDENTIFIER,
        TokenKind.IDENTIFIER,
        TokenKind.IDENTIFIER,
        TokenKind.EOF,
    ]


def test_lexer_number_forms() -> None:
    assert _texts("1 2.5 3e10 4.5E-3 6e+2") == ["1", "2.5", "3e10", "4.5E-3", "6e+2"]


def test_lexer_minus_is_a_sign_only_where_an_operand_cannot_end() -> None:
    assert _texts("1 -7") == ["1", "-", "7"]
    assert _texts("(-7)") == ["(", "-7", ")"]
    assert _texts("a = -7") == ["a", "=", "-7"]
    assert _texts("[1][0] -2") == ["[", "1", "]", "[", "0", "]", "-", "2"]


def test_lexer_operator_cluster_ends_before_a_negative_literal() -> None:
    assert _texts("x=-5") == ["x", "=", "-5"]
    assert _texts("3*-2") == ["3", "*", "-2"]
    assert _texts("1--2") == ["1", "-", "-2"]
    assert _texts("a -- b") == ["a", "--", "b"]


def test_lexer_ranges_do_not_swallow_number_dots() -> None:
    assert _texts("1..3") == ["1", "..", "3"]
    assert _texts("1..=3") == ["1", "..=", "3"]
    assert _texts("1.5..2") == ["1.5", "..", "2"]


def test_lexer_operator_clusters_are_maximal() -> None:
    assert _texts("a <= b != c ** d") == ["a", "<=", "b", "!=", "c", "**", "d"]
    assert _texts("a=!b") == ["a", "=!", "b"]
    assert _texts("!!x") == ["!!", "x"]


def test_lexer_comments_are_trivia() -> None:
    assert _texts("a // comment\n+ b") == ["a", "+", "b"]
    assert _texts("a +// comment\nb") == ["a", "+", "b"]
    assert _kinds("// only a comment") == [TokenKind.EOF]


def test_lexer_strings_with_both_quotes_and_escapes() -> None:
    result = lex("'single' \"dou\\\"ble\" \"a\\nb\\u0041\\/\"")

    assert result.errors == []
    assert _texts("'single' \"dou\\\"ble\" \"a\\nb\\u0041\\/\"") == ["single", 'dou"ble', "a\nbA/"]


def test_lexer_invalid_escape_keeps_the_character() -> None:
    result = lex('"a\\qb"')

    assert [error.spec.code for error in result.errors] == ["LEXER_INVALID_ESCAPE"]
    assert result.errors[0].span == TextRange(2, 4)
    assert result.tokens[0].text == "aqb"


def test_lexer_bad_unicode_escapes_substitute_replacement_character() -> None:
    surrogate = lex('"\\ud800"')
    short = lex('"\\u12"')

    assert [error.spec.code for error in surrogate.errors] == ["LEXER_INVALID_UNICODE"]
    assert surrogate.tokens[0].text == "\ufffd"
    assert [error.spec.code for error in short.errors] == ["LEXER_INVALID_ESCAPE"]
    assert short.tokens[0].text == "\ufffd"


def test_lexer_unterminated_string_spans_to_end_of_input() -> None:
    result = lex('a = "abc')

    assert [error.spec.code for error in result.errors] == ["LEXER_UNTERMINATED_STRING"]
    assert result.errors[0].span == TextRange(4, 8)
    assert result.tokens[-2] == Token(TokenKind.STRING, TextRange(4, 8), "abc")


def test_lexer_reports_a_run_of_unexpected_characters_once() -> None:
    result = lex("a @# b")

    assert result.has_errors is True
    assert len(result.errors) == 1
    assert result.errors[0].span == TextRange(2, 4)
    assert "`@#`" in result.errors[0].message
    assert _kinds("a @# b") == [TokenKind.IDENTIFIER, TokenKind.IDENTIFIER, TokenKind.EOF]


def test_lexer_eof_token_is_empty_at_end_of_source() -> None:
    result = lex("x   ")

    assert result.tokens[-1] == Token(TokenKind.EOF, TextRange(4, 4))


def test_lexer_diagnostics_are_flattened() -> None:
    result = lex("$")

    assert [diagnostic.code for diagnostic in result.diagnostics] == ["LEXER_UNEXPECTED_CHARACTER"]
    assert result.diagnostics[0].category == "lexer"


def test_dump_tokens_smoke(capsys) -> None:
    result = lex("a = $;")

    dump_tokens(result.tokens, result.errors)

    out = capsys.readouterr().out
    assert "IDENTIFIER" in out
    assert "SEMICOLON" in out
    assert "Errors:" in out
    assert "LEXER_UNEXPECTED_CHARACTER" in out
