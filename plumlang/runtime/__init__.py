"""Runtime values, operator semantics and the evaluator."""

from plumlang.runtime.evaluator import EvalOutcome, Evaluator, evaluate
from plumlang.runtime.indexing import index_value, normalize_index, range_positions
from plumlang.runtime.operators import (
    INFIX_HANDLERS,
    apply_infix,
    apply_not,
    divide,
    modulo,
    power,
    values_equal,
)
from plumlang.runtime.value import (
    AnyRangeValue,
    ArrayValue,
    AssignValue,
    BoolValue,
    ErrorValue,
    InclusiveRangeValue,
    NullValue,
    NumberValue,
    RangeValue,
    SpannedValue,
    StringValue,
    Value,
    ValueType,
    display_value,
    is_integral,
    to_python,
)

__all__ = [
    "INFIX_HANDLERS",
    "AnyRangeValue",
    "ArrayValue",
    "AssignValue",
    "BoolValue",
    "ErrorValue",
    "EvalOutcome",
    "Evaluator",
    "InclusiveRangeValue",
    "NullValue",
    "NumberValue",
    "RangeValue",
    "SpannedValue",
    "StringValue",
    "Value",
    "ValueType",
    "apply_infix",
    "apply_not",
    "display_value",
    "divide",
    "evaluate",
    "index_value",
    "is_integral",
    "modulo",
    "normalize_index",
    "power",
    "range_positions",
    "to_python",
    "values_equal",
]
