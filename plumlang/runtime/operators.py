"""Operator semantics.

Every operator takes already-evaluated operands and returns either the
resulting value or the type error describing which operand was rejected.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import Final

from plumlang.ast import InfixOp
from plumlang.diagnostics import OperandTypeError, TypeErrorContext, TypeErrorContextKind
from plumlang.runtime.value import (
    ArrayValue,
    BoolValue,
    InclusiveRangeValue,
    NumberValue,
    RangeValue,
    SpannedValue,
    StringValue,
    Value,
    ValueType,
    is_integral,
)

type OperatorResult = Value | OperandTypeError
type InfixHandler = Callable[[InfixOp, SpannedValue, SpannedValue], OperatorResult]

# larger integral exponents overflow (or underflow) any float unless the base is -1, 0 or 1
_EXACT_POW_LIMIT: Final[int] = 1100

MAX_REPEATED_LENGTH: Final[int] = 1 << 24

EQUATABLE: Final[tuple[ValueType, ...]] = (
    ValueType.NUM,
    ValueType.STRING,
    ValueType.BOOL,
    ValueType.ARRAY,
)


def divide(lhs: float, rhs: float) -> float:
    """IEEE division: x/0 is a signed infinity and 0/0 is NaN."""
    if rhs == 0:
        if lhs == 0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)
    return lhs / rhs


def modulo(lhs: float, rhs: float) -> float:
    try:
        return math.fmod(lhs, rhs)
    except ValueError:
        return math.nan


def power(base: float, exponent: float) -> float:
    """Exact integer power when both operands are integral, float power otherwise."""
    if is_integral(base) and is_integral(exponent) and abs(exponent) <= _EXACT_POW_LIMIT:
        try:
            result = int(base) ** int(exponent)
        except ZeroDivisionError:
            return math.inf
        try:
            return float(result)
        except OverflowError:
            return math.inf if result > 0 else -math.inf
    try:
        return math.pow(base, exponent)
    except ValueError:
        return math.nan
    except OverflowError:
        negative_odd = base < 0 and is_integral(exponent) and int(exponent) % 2 == 1
        return -math.inf if negative_odd else math.inf


_ARITHMETIC: Final[dict[InfixOp, Callable[[float, float], float]]] = {
    InfixOp.ADD: lambda lhs, rhs: lhs + rhs,
    InfixOp.SUB: lambda lhs, rhs: lhs - rhs,
    InfixOp.DIV: divide,
    InfixOp.MOD: modulo,
    InfixOp.POW: power,
}

_COMPARISONS: Final[dict[InfixOp, Callable[[float, float], bool]]] = {
    InfixOp.LT: lambda lhs, rhs: lhs < rhs,
    InfixOp.GT: lambda lhs, rhs: lhs > rhs,
    InfixOp.LTE: lambda lhs, rhs: lhs <= rhs,
    InfixOp.GTE: lambda lhs, rhs: lhs >= rhs,
}


def _lhs_error(op: InfixOp, lhs: SpannedValue, *expected: ValueType) -> OperandTypeError:
    return OperandTypeError(expected, lhs, TypeErrorContext.infix_lhs(op))


def _rhs_error(op: InfixOp, lhs: SpannedValue, rhs: SpannedValue, *expected: ValueType) -> OperandTypeError:
    return OperandTypeError(expected, rhs, TypeErrorContext.infix_rhs(lhs.type, op))


def _arithmetic(op: InfixOp, lhs: SpannedValue, rhs: SpannedValue) -> OperatorResult:
    if not isinstance(lhs.value, NumberValue):
        return _lhs_error(op, lhs, ValueType.NUM)
    if not isinstance(rhs.value, NumberValue):
        return _rhs_error(op, lhs, rhs, ValueType.NUM)
    return NumberValue(_ARITHMETIC[op](lhs.value.value, rhs.value.value))


def _comparison(op: InfixOp, lhs: SpannedValue, rhs: SpannedValue) -> OperatorResult:
    if not isinstance(lhs.value, NumberValue):
        return _lhs_error(op, lhs, ValueType.NUM)
    if not isinstance(rhs.value, NumberValue):
        return _rhs_error(op, lhs, rhs, ValueType.NUM)
    return BoolValue(_COMPARISONS[op](lhs.value.value, rhs.value.value))


def _repeat(text: str, times: float, count: SpannedValue) -> OperatorResult:
    if not is_integral(times):
        return OperandTypeError((ValueType.INT,), count, TypeErrorContext.of(TypeErrorContextKind.STRING_MUL))
    repeats = abs(int(times))
    if len(text) * repeats > MAX_REPEATED_LENGTH:
        return OperandTypeError((ValueType.INT,), count, TypeErrorContext.of(TypeErrorContextKind.STRING_MUL_LENGTH))
    return StringValue(text * repeats)


def _multiply(op: InfixOp, lhs: SpannedValue, rhs: SpannedValue) -> OperatorResult:
    match lhs.value, rhs.value:
        case NumberValue(left), NumberValue(right):
            return NumberValue(left * right)
        case NumberValue(times), StringValue(text):
            return _repeat(text, times, lhs)
        case StringValue(text), NumberValue(times):
            return _repeat(text, times, rhs)
        case NumberValue(), _:
            return _rhs_error(op, lhs, rhs, ValueType.NUM, ValueType.STRING)
        case StringValue(), _:
            return _rhs_error(op, lhs, rhs, ValueType.NUM)
        case _:
            return _lhs_error(op, lhs, ValueType.NUM, ValueType.STRING)


def values_equal(lhs: Value, rhs: Value) -> bool:
    """Structural equality; array elements compare by value, never by span.

    Numbers compare as floats, so NaN is never equal to anything, itself included.
    """
    match lhs, rhs:
        case NumberValue(left), NumberValue(right):
            return left == right
        case ArrayValue(left), ArrayValue(right):
            return len(left) == len(right) and all(
                values_equal(item.value, other.value) for item, other in zip(left, right)
            )
        case _:
            return lhs == rhs


def _equality(op: InfixOp, lhs: SpannedValue, rhs: SpannedValue) -> OperatorResult:
    if lhs.type not in EQUATABLE:
        return _lhs_error(op, lhs, *EQUATABLE)
    if rhs.type != lhs.type:
        return _rhs_error(op, lhs, rhs, lhs.type)
    equal = values_equal(lhs.value, rhs.value)
    return BoolValue(equal if op == InfixOp.EQUALS else not equal)


def _logical(op: InfixOp, lhs: SpannedValue, rhs: SpannedValue) -> OperatorResult:
    if not isinstance(lhs.value, BoolValue):
        return _lhs_error(op, lhs, ValueType.BOOL)
    if not isinstance(rhs.value, BoolValue):
        return _rhs_error(op, lhs, rhs, ValueType.BOOL)
    if op == InfixOp.AND:
        return BoolValue(lhs.value.value and rhs.value.value)
    return BoolValue(lhs.value.value or rhs.value.value)


def _contains(op: InfixOp, lhs: SpannedValue, rhs: SpannedValue) -> OperatorResult:
    match rhs.value:
        case ArrayValue(items):
            return BoolValue(any(values_equal(item.value, lhs.value) for item in items))
        case StringValue(text):
            if not isinstance(lhs.value, StringValue):
                return OperandTypeError((ValueType.STRING,), lhs, TypeErrorContext.contains(rhs.type))
            return BoolValue(lhs.value.value in text)
        case _:
            return _rhs_error(op, lhs, rhs, ValueType.ARRAY, ValueType.STRING)


def _range_bound(bound: SpannedValue) -> int | OperandTypeError:
    context = TypeErrorContext.of(TypeErrorContextKind.RANGE)
    if not isinstance(bound.value, NumberValue):
        return OperandTypeError((ValueType.NUM,), bound, context)
    if not is_integral(bound.value.value):
        return OperandTypeError((ValueType.INT,), bound, context)
    return int(bound.value.value)


def _range(op: InfixOp, lhs: SpannedValue, rhs: SpannedValue) -> OperatorResult:
    start = _range_bound(lhs)
    if isinstance(start, OperandTypeError):
        return start
    end = _range_bound(rhs)
    if isinstance(end, OperandTypeError):
        return end
    if op == InfixOp.INCLUSIVE_RANGE:
        return InclusiveRangeValue(start, end)
    return RangeValue(start, end)


INFIX_HANDLERS: Final[dict[InfixOp, InfixHandler]] = {
    InfixOp.ADD: _arithmetic,
    InfixOp.SUB: _arithmetic,
    InfixOp.DIV: _arithmetic,
    InfixOp.MOD: _arithmetic,
    InfixOp.POW: _arithmetic,
    InfixOp.MUL: _multiply,
    InfixOp.LT: _comparison,
    InfixOp.GT: _comparison,
    InfixOp.LTE: _comparison,
    InfixOp.GTE: _comparison,
    InfixOp.EQUALS: _equality,
    InfixOp.NOT_EQUALS: _equality,
    InfixOp.AND: _logical,
    InfixOp.OR: _logical,
    InfixOp.IN: _contains,
    InfixOp.RANGE: _range,
    InfixOp.INCLUSIVE_RANGE: _range,
}


def apply_infix(op: InfixOp, lhs: SpannedValue, rhs: SpannedValue) -> OperatorResult:
    return INFIX_HANDLERS[op](op, lhs, rhs)


def apply_not(operand: SpannedValue) -> OperatorResult:
    if not isinstance(operand.value, BoolValue):
        return OperandTypeError((ValueType.BOOL,), operand, TypeErrorContext.of(TypeErrorContextKind.NOT))
    return BoolValue(not operand.value.value)
