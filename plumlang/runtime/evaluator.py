"""Tree-walking evaluator.

Errors accumulate: every operand is evaluated even when a sibling failed, and
a failed sub-expression becomes the `ErrorValue` sentinel. A node with a
sentinel operand fails quietly, since its operand already reported why.
"""

from __future__ import annotations

from collections import ChainMap
from collections.abc import Mapping
from dataclasses import dataclass, field

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
    InfixOperation,
    Not,
    NullLiteral,
    NumberLiteral,
    Spanned,
    StringLiteral,
)
from plumlang.diagnostics import (
    Diagnostic,
    EvalError,
    OperandTypeError,
    PlumError,
    TypeErrorContext,
    TypeErrorContextKind,
    UndefinedReferenceError,
    has_errors,
)
from plumlang.runtime.indexing import index_value
from plumlang.runtime.operators import apply_infix, apply_not
from plumlang.runtime.value import (
    ArrayValue,
    AssignValue,
    BoolValue,
    ErrorValue,
    NullValue,
    NumberValue,
    SpannedValue,
    StringValue,
    Value,
    ValueType,
)
from plumlang.text import TextRange


@dataclass(frozen=True, slots=True)
class EvalOutcome:
    value: SpannedValue
    errors: list[EvalError] = field(default_factory=list)

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [error.to_diagnostic() for error in self.errors]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)


_NOT_BINDABLE = frozenset({ValueType.ASSIGN, ValueType.INT, ValueType.ERROR})


def assign_to_assign_error(value: SpannedValue) -> OperandTypeError:
    """A name cannot be bound to the value of another assignment."""
    return OperandTypeError(
        tuple(value_type for value_type in ValueType if value_type not in _NOT_BINDABLE),
        value,
        TypeErrorContext.of(TypeErrorContextKind.ASSIGN_TO_ASSIGN),
    )


class Evaluator:
    def __init__(self, env: Mapping[str, SpannedValue]) -> None:
        self._env = env
        self._errors: list[EvalError] = []

    @property
    def errors(self) -> list[EvalError]:
        return self._errors

    def evaluate(self, expr: Spanned[Expr]) -> SpannedValue:
        return SpannedValue(self._evaluate(expr.node, expr.span), expr.span)

    def _evaluate(self, node: Expr, span: TextRange) -> Value:
        match node:
            case NumberLiteral(number):
                return NumberValue(number)
            case StringLiteral(text):
                return StringValue(text)
            case BoolLiteral(flag):
                return BoolValue(flag)
            case NullLiteral():
                return NullValue()
            case ArrayLiteral(items):
                values = [self.evaluate(item) for item in items]
                if any(value.is_error for value in values):
                    return ErrorValue()
                return ArrayValue(tuple(values))
            case Identifier(name):
                bound = self._env.get(name)
                if bound is None:
                    return self._fail(UndefinedReferenceError(name, span, during_evaluation=True))
                return bound.value
            case Not(operand):
                value = self.evaluate(operand)
                if value.is_error:
                    return ErrorValue()
                return self._check(apply_not(value))
            case InfixOperation(lhs, op, rhs):
                left = self.evaluate(lhs)
                right = self.evaluate(rhs)
                if left.is_error or right.is_error:
                    return ErrorValue()
                return self._check(apply_infix(op, left, right))
            case Index(base, index):
                sequence = self.evaluate(base)
                position = self.evaluate(index)
                if sequence.is_error or position.is_error:
                    return ErrorValue()
                return self._check(index_value(sequence, position))
            case Block(statements):
                return self._evaluate_block(statements)
            case Conditional(condition, then_branch, else_branch):
                test = self.evaluate(condition)
                if test.is_error:
                    return ErrorValue()
                if not isinstance(test.value, BoolValue):
                    return self._fail(
                        OperandTypeError(
                            (ValueType.BOOL,),
                            test,
                            TypeErrorContext.of(TypeErrorContextKind.CONDITION),
                        )
                    )
                chosen = then_branch if test.value.value else else_branch
                return self.evaluate(chosen).value
            case Assign(targets, value):
                bound = self.evaluate(value)
                if bound.is_error:
                    return ErrorValue()
                if isinstance(bound.value, AssignValue):
                    return self._fail(assign_to_assign_error(bound))
                return AssignValue(tuple(target.node for target in targets), bound.value)
            case ErrorExpr():
                # parse errors were already reported for this node
                return ErrorValue()
            case _:
                raise TypeError(f"Unknown expression node: {node!r}")

    def _evaluate_block(self, statements: tuple[Spanned[Expr], ...]) -> Value:
        """Statements run in order; an assignment binds its names for the rest of the block."""
        outer = self._env
        scope: dict[str, SpannedValue] = {}
        self._env = ChainMap(scope, outer)
        try:
            values: list[SpannedValue] = []
            for statement in statements:
                value = self.evaluate(statement)
                values.append(value)
                if isinstance(statement.node, Assign):
                    # a failed binding stays visible as the sentinel so its readers fail quietly
                    bound = value.value.value if isinstance(value.value, AssignValue) else ErrorValue()
                    for name in statement.node.names:
                        scope[name] = SpannedValue(bound, statement.node.value.span)
        finally:
            self._env = outer

        if any(value.is_error for value in values):
            return ErrorValue()
        return values[-1].value

    def _check(self, result: Value | EvalError) -> Value:
        if isinstance(result, PlumError):
            return self._fail(result)
        return result

    def _fail(self, error: EvalError) -> ErrorValue:
        self._errors.append(error)
        return ErrorValue()


def evaluate(expr: Spanned[Expr], env: Mapping[str, SpannedValue]) -> EvalOutcome:
    """Evaluate one expression against a read-only environment."""
    evaluator = Evaluator(env)
    value = evaluator.evaluate(expr)
    return EvalOutcome(value=value, errors=list(evaluator.errors))
