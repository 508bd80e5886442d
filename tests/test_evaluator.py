import math
from types import MappingProxyType

import pytest

from plumlang.ast import Identifier, Spanned
from plumlang.diagnostics import OperandTypeError, TypeErrorContextKind, UndefinedReferenceError
from plumlang.parser import parse_source
from plumlang.runtime import (
    AssignValue,
    ErrorValue,
    NumberValue,
    SpannedValue,
    StringValue,
    display_value,
    evaluate,
    to_python,
)
from plumlang.runtime.evaluator import Evaluator
from plumlang.text import TextRange


def _eval(source: str, **env: float):
    parsed = parse_source(source)
    assert parsed.errors == []
    bindings = {name: SpannedValue(NumberValue(value)) for name, value in env.items()}
    return evaluate(parsed.statements[0], MappingProxyType(bindings))


def test_evaluate_reads_environment() -> None:
    outcome = _eval("x * 2 + y", x=4, y=1)

    assert outcome.errors == []
    assert outcome.value.value == NumberValue(9)
    assert outcome.value.span == TextRange(0, 9)


def test_evaluate_integer_arithmetic_is_exact() -> None:
    assert _eval("123456789 + 987654321").value.value == NumberValue(1111111110)
    assert _eval("3 ** 2").value.value == NumberValue(9)
    assert _eval("2 ** 0.5").value.value == NumberValue(math.sqrt(2))


def test_evaluate_division_by_zero() -> None:
    assert _eval("1 / 0").value.value == NumberValue(math.inf)
    assert _eval("-1 / 0").value.value == NumberValue(-math.inf)
    assert math.isnan(_eval("0 / 0").value.value.value)


def test_evaluate_accumulates_sibling_errors() -> None:
    outcome = _eval("[1 + true, !3, missing]")

    assert len(outcome.errors) == 3
    assert isinstance(outcome.errors[0], OperandTypeError)
    assert outcome.errors[1].context.kind == TypeErrorContextKind.NOT
    assert outcome.errors[2] == UndefinedReferenceError("missing", TextRange(15, 22), during_evaluation=True)
    assert outcome.value.is_error
    assert outcome.has_errors is True


def test_evaluate_failed_operand_does_not_add_a_second_error() -> None:
    outcome = _eval('3 * (x * "cool")', x=2.5)

    assert len(outcome.errors) == 1
    assert outcome.errors[0].context.kind == TypeErrorContextKind.STRING_MUL
    assert outcome.value.value == ErrorValue()


def test_evaluate_both_operands_of_a_failed_infix() -> None:
    outcome = _eval("(1 + true) + (2 + false)")

    assert len(outcome.errors) == 2


def test_evaluate_conditional_only_runs_the_chosen_branch() -> None:
    outcome = _eval("if x > 1 { 10; } else { 1 + true; }", x=2)

    assert outcome.errors == []
    assert outcome.value.value == NumberValue(10)


def test_evaluate_conditional_requires_bool() -> None:
    outcome = _eval('if "yes" { 1; } else { 2; }')

    assert len(outcome.errors) == 1
    assert outcome.errors[0].context.kind == TypeErrorContextKind.CONDITION
    assert outcome.errors[0].span == TextRange(3, 8)


def test_evaluate_block_value_is_its_last_statement() -> None:
    outcome = _eval("if true { 1; 2; x; } else { 0; }", x=7)

    assert outcome.value.value == NumberValue(7)


def test_evaluate_block_assignment_binds_for_later_statements() -> None:
    outcome = _eval("if true { w = x + 1; w * 2; } else { 0; }", x=2)

    assert outcome.errors == []
    assert outcome.value.value == NumberValue(6)


def test_evaluate_failed_block_assignment_fails_its_readers_quietly() -> None:
    outcome = _eval("if true { w = 1 + true; w * 2; } else { 0; }")

    assert len(outcome.errors) == 1
    assert isinstance(outcome.errors[0], OperandTypeError)
    assert outcome.value.is_error


def test_evaluate_block_bindings_do_not_leak_into_the_environment() -> None:
    env: dict[str, SpannedValue] = {}
    statement = parse_source("if true { w = 1; w; } else { 0; }").statements[0]

    outcome = evaluate(statement, env)

    assert outcome.value.value == NumberValue(1)
    assert env == {}


def test_evaluate_nested_assignment() -> None:
    outcome = _eval("(a = b = 'x';)")

    assert outcome.errors == []
    assert outcome.value.value == AssignValue(("a", "b"), StringValue("x"))
    assert display_value(outcome.value.value) == 'a = b = "x"'
    assert to_python(outcome.value.value) == {"a": "x", "b": "x"}


def test_evaluate_assignment_of_assignment_is_a_type_error() -> None:
    outcome = _eval("(a = (b = 1;);)")

    assert len(outcome.errors) == 1
    assert outcome.errors[0].context.kind == TypeErrorContextKind.ASSIGN_TO_ASSIGN


def test_evaluate_error_placeholder_fails_quietly() -> None:
    parsed = parse_source("[1, (2 3)]")

    outcome = evaluate(parsed.statements[0], {})

    assert len(parsed.errors) == 1
    assert outcome.errors == []
    assert outcome.value.is_error


def test_evaluator_rejects_unknown_nodes() -> None:
    evaluator = Evaluator({})

    with pytest.raises(TypeError):
        evaluator.evaluate(Spanned("bogus", TextRange(0, 1)))  # type: ignore[arg-type]


def test_evaluator_identifier_span_comes_from_reference() -> None:
    env = {"x": SpannedValue(NumberValue(1), TextRange(40, 41))}

    outcome = evaluate(Spanned(Identifier("x"), TextRange(2, 3)), env)

    assert outcome.value == SpannedValue(NumberValue(1), TextRange(2, 3))
    assert outcome.value.span == TextRange(2, 3)


def test_display_and_to_python() -> None:
    outcome = _eval("[1, 2.5, 'a', true, null, 1..=3]")

    assert display_value(outcome.value.value) == '[1, 2.5, "a", true, null, 1..=3]'
    assert to_python(outcome.value.value) == [1, 2.5, "a", True, None, (1, 3)]
    with pytest.raises(ValueError):
        to_python(ErrorValue())
