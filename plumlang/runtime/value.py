"""Runtime values produced by the evaluator."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import StrEnum
from typing import ClassVar

from plumlang.ast.printer import format_number, quote_string
from plumlang.text import ZERO_RANGE, TextRange


class ValueType(StrEnum):
    NUM = "Num"
    INT = "Int"  # only ever appears in "expected" sets
    STRING = "String"
    BOOL = "Bool"
    ARRAY = "Array"
    RANGE = "Range"
    IRANGE = "IRange"
    ASSIGN = "Assign"
    NULL = "Null"
    ERROR = "[ERROR]"


@dataclass(frozen=True, slots=True)
class NumberValue:
    TYPE: ClassVar[ValueType] = ValueType.NUM

    value: float


@dataclass(frozen=True, slots=True)
class StringValue:
    TYPE: ClassVar[ValueType] = ValueType.STRING

    value: str


@dataclass(frozen=True, slots=True)
class BoolValue:
    TYPE: ClassVar[ValueType] = ValueType.BOOL

    value: bool


@dataclass(frozen=True, slots=True)
class ArrayValue:
    TYPE: ClassVar[ValueType] = ValueType.ARRAY

    items: tuple[SpannedValue, ...]


@dataclass(frozen=True, slots=True)
class RangeValue:
    """Exclusive range `start..end`."""

    TYPE: ClassVar[ValueType] = ValueType.RANGE

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class InclusiveRangeValue:
    """Inclusive range `start..=end`."""

    TYPE: ClassVar[ValueType] = ValueType.IRANGE

    start: int
    end: int


@dataclass(frozen=True, slots=True)
class AssignValue:
    """Result of evaluating an assignment expression that is not a top-level definition."""

    TYPE: ClassVar[ValueType] = ValueType.ASSIGN

    names: tuple[str, ...]
    value: Value


@dataclass(frozen=True, slots=True)
class NullValue:
    TYPE: ClassVar[ValueType] = ValueType.NULL


@dataclass(frozen=True, slots=True)
class ErrorValue:
    """Marks an operand whose evaluation already failed and reported its errors."""

    TYPE: ClassVar[ValueType] = ValueType.ERROR


type Value = (
    NumberValue
    | StringValue
    | BoolValue
    | ArrayValue
    | RangeValue
    | InclusiveRangeValue
    | AssignValue
    | NullValue
    | ErrorValue
)
type AnyRangeValue = RangeValue | InclusiveRangeValue


@dataclass(frozen=True, slots=True)
class SpannedValue:
    """A value and the span of the expression that produced it.

    Spans never take part in equality, so arrays compare element-wise by value.
    """

    value: Value
    span: TextRange = field(default=ZERO_RANGE, compare=False)

    @property
    def type(self) -> ValueType:
        return self.value.TYPE

    @property
    def is_error(self) -> bool:
        return isinstance(self.value, ErrorValue)


def is_integral(number: float) -> bool:
    return math.isfinite(number) and float(number).is_integer()


def display_value(value: Value) -> str:
    """Render a value the way it would be written in source."""
    match value:
        case NumberValue(number):
            return format_number(number)
        case StringValue(text):
            return quote_string(text)
        case BoolValue(flag):
            return "true" if flag else "false"
        case ArrayValue(items):
            return "[" + ", ".join(display_value(item.value) for item in items) + "]"
        case RangeValue(start, end):
            return f"{start}..{end}"
        case InclusiveRangeValue(start, end):
            return f"{start}..={end}"
        case AssignValue(names, inner):
            return " = ".join(names) + " = " + display_value(inner)
        case NullValue():
            return "null"
        case ErrorValue():
            return "[ERROR]"
        case _:
            raise TypeError(f"Unknown value: {value!r}")


def to_python(value: Value) -> object:
    """Convert a value to plain python data (floats, strs, bools, lists, tuples, None)."""
    match value:
        case NumberValue(number):
            return number
        case StringValue(text):
            return text
        case BoolValue(flag):
            return flag
        case ArrayValue(items):
            return [to_python(item.value) for item in items]
        case RangeValue(start, end) | InclusiveRangeValue(start, end):
            return (start, end)
        case AssignValue(names, inner):
            return {name: to_python(inner) for name in names}
        case NullValue():
            return None
        case ErrorValue():
            raise ValueError("Error sentinel has no python representation")
        case _:
            raise TypeError(f"Unknown value: {value!r}")
