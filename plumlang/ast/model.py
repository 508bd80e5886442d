"""AST data model for plum source."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Final, Generic, TypeVar

from plumlang.text import TextRange

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Spanned(Generic[T]):
    """A node paired with the source range it was parsed from.

    Spans never take part in equality.
    """

    node: T
    span: TextRange = field(compare=False)


class InfixOp(StrEnum):
    EQUALS = "=="
    NOT_EQUALS = "!="
    LT = "<"
    GT = ">"
    LTE = "<="
    GTE = ">="
    AND = "and"
    OR = "or"
    POW = "**"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    ADD = "+"
    SUB = "-"
    IN = "in"
    RANGE = ".."
    INCLUSIVE_RANGE = "..="

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def binding_power(self) -> int:
        return BINDING_POWERS[self]


BINDING_POWERS: Final[dict[InfixOp, int]] = {
    InfixOp.OR: 52,
    InfixOp.AND: 54,
    InfixOp.IN: 56,
    InfixOp.EQUALS: 58,
    InfixOp.NOT_EQUALS: 58,
    InfixOp.LT: 58,
    InfixOp.GT: 58,
    InfixOp.LTE: 58,
    InfixOp.GTE: 58,
    InfixOp.ADD: 60,
    InfixOp.SUB: 60,
    InfixOp.MUL: 62,
    InfixOp.DIV: 62,
    InfixOp.MOD: 62,
    InfixOp.POW: 64,
    InfixOp.RANGE: 66,
    InfixOp.INCLUSIVE_RANGE: 68,
}

MIN_BINDING_POWER: Final[int] = min(BINDING_POWERS.values())


@dataclass(frozen=True, slots=True)
class NumberLiteral:
    value: float


@dataclass(frozen=True, slots=True)
class StringLiteral:
    value: str


@dataclass(frozen=True, slots=True)
class BoolLiteral:
    value: bool


@dataclass(frozen=True, slots=True)
class NullLiteral:
    pass


@dataclass(frozen=True, slots=True)
class ArrayLiteral:
    items: tuple[Spanned[Expr], ...]


@dataclass(frozen=True, slots=True)
class Identifier:
    name: str


@dataclass(frozen=True, slots=True)
class Not:
    operand: Spanned[Expr]


@dataclass(frozen=True, slots=True)
class InfixOperation:
    lhs: Spanned[Expr]
    op: InfixOp
    rhs: Spanned[Expr]


@dataclass(frozen=True, slots=True)
class Index:
    base: Spanned[Expr]
    index: Spanned[Expr]


@dataclass(frozen=True, slots=True)
class Block:
    """Braced statement sequence; evaluates to its last statement."""

    statements: tuple[Spanned[Expr], ...]


@dataclass(frozen=True, slots=True)
class Conditional:
    """`if condition { ... } else { ... }`; `else_branch` is a Block or another Conditional."""

    condition: Spanned[Expr]
    then_branch: Spanned[Expr]
    else_branch: Spanned[Expr]


@dataclass(frozen=True, slots=True)
class Assign:
    """`a = b = value;` binds every target to the same value."""

    targets: tuple[Spanned[str], ...]
    value: Spanned[Expr]

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(target.node for target in self.targets)


@dataclass(frozen=True, slots=True)
class ErrorExpr:
    """Placeholder inserted by parser recovery."""


type Literal = NumberLiteral | StringLiteral | BoolLiteral | NullLiteral | ArrayLiteral
type Expr = (
    NumberLiteral
    | StringLiteral
    | BoolLiteral
    | NullLiteral
    | ArrayLiteral
    | Identifier
    | Not
    | InfixOperation
    | Index
    | Block
    | Conditional
    | Assign
    | ErrorExpr
)


def children(expr: Expr) -> tuple[Spanned[Expr], ...]:
    """Direct sub-expressions of a node, in source order."""
    match expr:
        case ArrayLiteral(items):
            return items
        case Not(operand):
            return (operand,)
        case InfixOperation(lhs, _, rhs):
            return (lhs, rhs)
        case Index(base, index):
            return (base, index)
        case Block(statements):
            return statements
        case Conditional(condition, then_branch, else_branch):
            return (condition, then_branch, else_branch)
        case Assign(_, value):
            return (value,)
        case NumberLiteral() | StringLiteral() | BoolLiteral() | NullLiteral() | Identifier() | ErrorExpr():
            return ()
        case _:
            raise TypeError(f"Unknown expression node: {expr!r}")


def contains_error(expr: Spanned[Expr]) -> bool:
    if isinstance(expr.node, ErrorExpr):
        return True
    return any(contains_error(child) for child in children(expr.node))


__all__ = [
    "BINDING_POWERS",
    "MIN_BINDING_POWER",
    "ArrayLiteral",
    "Assign",
    "Block",
    "BoolLiteral",
    "Conditional",
    "ErrorExpr",
    "Expr",
    "Identifier",
    "Index",
    "InfixOp",
    "InfixOperation",
    "Literal",
    "Not",
    "NullLiteral",
    "NumberLiteral",
    "Spanned",
    "StringLiteral",
    "children",
    "contains_error",
]
