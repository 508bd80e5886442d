"""Structured error taxonomy shared by every pipeline stage.

Errors are plain immutable values: stages return them, they are never raised.
Each error knows its primary span, its user-facing taxonomy name and how to
flatten itself into a `Diagnostic`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

from plumlang.ast.model import InfixOp
from plumlang.diagnostics.codes import (
    EVAL_INDEX_OUT_OF_BOUNDS,
    EVAL_RANGE_OUT_OF_BOUNDS,
    EVAL_TYPE_ERROR,
    EVAL_UNDEFINED_REFERENCE,
    PARSER_UNEXPECTED_TOKEN,
    RESOLVE_CIRCULAR_DEPENDENCY,
    RESOLVE_REASSIGN,
    RESOLVE_UNDEFINED_REFERENCE,
    DiagnosticSpec,
)
from plumlang.diagnostics.diagnostic import Diagnostic
from plumlang.text import TextRange

if TYPE_CHECKING:
    from plumlang.runtime.value import AnyRangeValue, SpannedValue, ValueType


@dataclass(frozen=True, slots=True)
class PlumError(ABC):
    """Base of every user-facing error."""

    KIND: ClassVar[str] = "Error"

    @property
    @abstractmethod
    def span(self) -> TextRange: ...

    @property
    @abstractmethod
    def spec(self) -> DiagnosticSpec: ...

    @property
    @abstractmethod
    def message(self) -> str: ...

    @property
    def kind(self) -> str:
        return self.KIND

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic.from_spec(self.spec, self.span, self.message)


@dataclass(frozen=True, slots=True)
class LexError(PlumError):
    KIND: ClassVar[str] = "SyntaxError"

    detail: str
    range: TextRange
    code: DiagnosticSpec

    @property
    def span(self) -> TextRange:
        return self.range

    @property
    def spec(self) -> DiagnosticSpec:
        return self.code

    @property
    def message(self) -> str:
        return self.detail


@dataclass(frozen=True, slots=True)
class ParseError(PlumError):
    KIND: ClassVar[str] = "ParsingError"

    detail: str
    range: TextRange
    expected: tuple[str, ...] = ()
    found: str | None = None
    code: DiagnosticSpec = PARSER_UNEXPECTED_TOKEN

    @property
    def span(self) -> TextRange:
        return self.range

    @property
    def spec(self) -> DiagnosticSpec:
        return self.code

    @property
    def message(self) -> str:
        return self.detail


class TypeErrorContextKind(StrEnum):
    INFIX_LHS = "infix_lhs"
    INFIX_RHS = "infix_rhs"
    NOT = "not"
    STRING_MUL = "string_mul"
    STRING_MUL_LENGTH = "string_mul_length"
    INDEX = "index"
    INDEX_OF = "index_of"
    RANGE = "range"
    CONTAINS = "contains"
    CONDITION = "condition"
    ASSIGN_TO_ASSIGN = "assign_to_assign"


@dataclass(frozen=True, slots=True)
class TypeErrorContext:
    """Which operand/operator combination failed."""

    kind: TypeErrorContextKind
    op: InfixOp | None = None
    lhs: ValueType | None = None
    rhs: ValueType | None = None

    @staticmethod
    def infix_lhs(op: InfixOp) -> TypeErrorContext:
        # <lhs> is invalid for <op> in any use
        return TypeErrorContext(TypeErrorContextKind.INFIX_LHS, op=op)

    @staticmethod
    def infix_rhs(lhs: ValueType, op: InfixOp) -> TypeErrorContext:
        # <rhs> is invalid for <op> given <lhs>
        return TypeErrorContext(TypeErrorContextKind.INFIX_RHS, op=op, lhs=lhs)

    @staticmethod
    def contains(rhs: ValueType) -> TypeErrorContext:
        return TypeErrorContext(TypeErrorContextKind.CONTAINS, op=InfixOp.IN, rhs=rhs)

    @staticmethod
    def of(kind: TypeErrorContextKind) -> TypeErrorContext:
        return TypeErrorContext(kind)

    def describe(self, expected: str) -> str:
        match self.kind:
            case TypeErrorContextKind.INFIX_LHS:
                return f"Operator `{self.op}` only accepts operands of type {expected}"
            case TypeErrorContextKind.INFIX_RHS:
                return f"Operator `{self.op}` with a {self.lhs} on the left only accepts {expected} on the right"
            case TypeErrorContextKind.NOT:
                return f"Operator `!` only accepts operands of type {expected}"
            case TypeErrorContextKind.STRING_MUL:
                return "Strings can only be repeated a whole number of times"
            case TypeErrorContextKind.STRING_MUL_LENGTH:
                return "The repeated string would be longer than 16777216 characters"
            case TypeErrorContextKind.INDEX:
                return f"Indexes must be of type {expected}"
            case TypeErrorContextKind.INDEX_OF:
                return f"Only values of type {expected} can be indexed"
            case TypeErrorContextKind.RANGE:
                return f"Range bounds must be of type {expected}"
            case TypeErrorContextKind.CONTAINS:
                return f"Operator `in` with a {self.rhs} on the right only accepts {expected} on the left"
            case TypeErrorContextKind.CONDITION:
                return f"Conditions must be of type {expected}"
            case TypeErrorContextKind.ASSIGN_TO_ASSIGN:
                return "An assignment cannot be assigned to a name"


@dataclass(frozen=True, slots=True)
class OperandTypeError(PlumError):
    KIND: ClassVar[str] = "TypeError"

    expected: tuple[ValueType, ...]
    got: SpannedValue
    context: TypeErrorContext

    @property
    def span(self) -> TextRange:
        return self.got.span

    @property
    def spec(self) -> DiagnosticSpec:
        return EVAL_TYPE_ERROR

    @property
    def expected_text(self) -> str:
        if len(self.expected) == 1:
            return str(self.expected[0])
        return "[" + ", ".join(str(value_type) for value_type in self.expected) + "]"

    @property
    def note(self) -> str:
        return self.context.describe(self.expected_text)

    @property
    def message(self) -> str:
        return f"Expected {self.expected_text}, found {self.got.type}. {self.note}"


@dataclass(frozen=True, slots=True)
class IndexOutOfBoundsError(PlumError):
    KIND: ClassVar[str] = "IndexError"

    index: int
    length: int
    base_span: TextRange
    index_span: TextRange

    @property
    def span(self) -> TextRange:
        return self.base_span.cover(self.index_span)

    @property
    def spec(self) -> DiagnosticSpec:
        return EVAL_INDEX_OUT_OF_BOUNDS

    @property
    def last_valid_index(self) -> int | None:
        """Set when the index is exactly one past the end."""
        if self.index == self.length:
            return self.length - 1
        return None

    @property
    def message(self) -> str:
        return f"Index {self.index} is out of bounds for length {self.length}"


@dataclass(frozen=True, slots=True)
class RangeIndexError(PlumError):
    KIND: ClassVar[str] = "RangeIndexError"

    range: AnyRangeValue
    length: int
    base_span: TextRange
    index_span: TextRange

    @property
    def span(self) -> TextRange:
        return self.base_span.cover(self.index_span)

    @property
    def spec(self) -> DiagnosticSpec:
        return EVAL_RANGE_OUT_OF_BOUNDS

    @property
    def message(self) -> str:
        from plumlang.runtime.value import display_value

        return f"Range {display_value(self.range)} is out of bounds for length {self.length}"


@dataclass(frozen=True, slots=True)
class UndefinedReferenceError(PlumError):
    KIND: ClassVar[str] = "ReferenceError"

    name: str
    range: TextRange
    during_evaluation: bool = False

    @property
    def span(self) -> TextRange:
        return self.range

    @property
    def spec(self) -> DiagnosticSpec:
        return EVAL_UNDEFINED_REFERENCE if self.during_evaluation else RESOLVE_UNDEFINED_REFERENCE

    @property
    def message(self) -> str:
        return f"`{self.name}` is not defined"


@dataclass(frozen=True, slots=True)
class ReassignError(PlumError):
    KIND: ClassVar[str] = "ReassignError"

    name: str
    first_span: TextRange
    conflicting_span: TextRange

    @property
    def span(self) -> TextRange:
        return self.conflicting_span

    @property
    def spec(self) -> DiagnosticSpec:
        return RESOLVE_REASSIGN

    @property
    def message(self) -> str:
        return f"`{self.name}` is assigned more than once"


@dataclass(frozen=True, slots=True)
class CircularDependencyError(PlumError):
    KIND: ClassVar[str] = "RecursionError"

    chain: tuple[str, ...]
    range: TextRange

    @property
    def span(self) -> TextRange:
        return self.range

    @property
    def spec(self) -> DiagnosticSpec:
        return RESOLVE_CIRCULAR_DEPENDENCY

    @property
    def message(self) -> str:
        cycle = " -> ".join((*self.chain, self.chain[0]))
        return f"Circular dependency: {cycle}"


type EvalError = OperandTypeError | IndexOutOfBoundsError | RangeIndexError | UndefinedReferenceError
type ResolveError = ReassignError | UndefinedReferenceError | CircularDependencyError


def errors_to_diagnostics(errors: list[PlumError] | tuple[PlumError, ...]) -> list[Diagnostic]:
    return [error.to_diagnostic() for error in errors]
