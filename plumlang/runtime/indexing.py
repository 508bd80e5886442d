"""Element and range indexing of arrays and strings."""

from __future__ import annotations

from plumlang.diagnostics import (
    IndexOutOfBoundsError,
    OperandTypeError,
    RangeIndexError,
    TypeErrorContext,
    TypeErrorContextKind,
)
from plumlang.runtime.value import (
    AnyRangeValue,
    ArrayValue,
    InclusiveRangeValue,
    NumberValue,
    RangeValue,
    SpannedValue,
    StringValue,
    Value,
    ValueType,
    is_integral,
)

type IndexResult = Value | OperandTypeError | IndexOutOfBoundsError | RangeIndexError


def normalize_index(index: int, length: int) -> int | None:
    """Position of `index` in a sequence of `length`; negative indexes count from the end."""
    if index < 0:
        return length + index if length >= -index else None
    return index if length > index else None


def _normalize_exclusive_end(end: int, length: int) -> int | None:
    if end == length:
        return length
    return normalize_index(end, length)


def range_positions(range_value: AnyRangeValue, length: int) -> list[int] | None:
    """Positions selected by a range, or None when a bound is out of bounds.

    A start past the end reads backwards: `5..2` selects 5, 4, 3 and
    `5..=2` selects 5, 4, 3, 2.
    """
    inclusive = isinstance(range_value, InclusiveRangeValue)
    start = normalize_index(range_value.start, length)
    if inclusive:
        end = normalize_index(range_value.end, length)
    else:
        end = _normalize_exclusive_end(range_value.end, length)
    if start is None or end is None:
        return None

    if start <= end:
        return list(range(start, end + 1 if inclusive else end))
    return list(range(start, end - 1 if inclusive else end, -1))


def _length(value: ArrayValue | StringValue) -> int:
    if isinstance(value, ArrayValue):
        return len(value.items)
    return len(value.value)


def index_value(base: SpannedValue, index: SpannedValue) -> IndexResult:
    sequence = base.value
    if not isinstance(sequence, (ArrayValue, StringValue)):
        return OperandTypeError(
            (ValueType.ARRAY, ValueType.STRING),
            base,
            TypeErrorContext.of(TypeErrorContextKind.INDEX_OF),
        )

    length = _length(sequence)
    match index.value:
        case NumberValue(number):
            if not is_integral(number):
                return OperandTypeError((ValueType.INT,), index, TypeErrorContext.of(TypeErrorContextKind.INDEX))
            position = normalize_index(int(number), length)
            if position is None:
                return IndexOutOfBoundsError(int(number), length, base.span, index.span)
            if isinstance(sequence, ArrayValue):
                return sequence.items[position].value
            return StringValue(sequence.value[position])
        case RangeValue() | InclusiveRangeValue():
            positions = range_positions(index.value, length)
            if positions is None:
                return RangeIndexError(index.value, length, base.span, index.span)
            if isinstance(sequence, ArrayValue):
                return ArrayValue(tuple(sequence.items[position] for position in positions))
            return StringValue("".join(sequence.value[position] for position in positions))
        case _:
            return OperandTypeError(
                (ValueType.NUM, ValueType.RANGE, ValueType.IRANGE),
                index,
                TypeErrorContext.of(TypeErrorContextKind.INDEX),
            )
