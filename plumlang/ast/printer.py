"""Reconstruct source text from an AST."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Final

from plumlang.ast.model import (
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

_ESCAPES: Final[dict[str, str]] = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


def format_number(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    if number.is_integer():
        return str(int(number))
    return repr(number)


def quote_string(text: str) -> str:
    parts: list[str] = []
    for ch in text:
        escaped = _ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif ord(ch) < 0x20:
            parts.append(f"\\u{ord(ch):04x}")
        else:
            parts.append(ch)
    return '"' + "".join(parts) + '"'


def to_source(expr: Spanned[Expr]) -> str:
    """Source text for one expression, parenthesized only where precedence requires."""
    return _print(expr.node)


def statement_to_source(statement: Spanned[Expr]) -> str:
    text = to_source(statement)
    if _leads_with_conditional(statement.node):
        # unwrapped, the statement would end at the conditional's closing brace
        text = f"({text})"
    if _is_self_terminated(statement.node):
        return text
    return text + ";"


def program_to_source(statements: Sequence[Spanned[Expr]]) -> str:
    return "\n".join(statement_to_source(statement) for statement in statements)


def _is_self_terminated(node: Expr) -> bool:
    return isinstance(node, (Assign, Conditional))


def _leads_with_conditional(node: Expr) -> bool:
    match node:
        case InfixOperation(lhs, _, _):
            return isinstance(lhs.node, Conditional) or _leads_with_conditional(lhs.node)
        case Index(base, _):
            return isinstance(base.node, Conditional) or _leads_with_conditional(base.node)
        case _:
            return False


def _print(node: Expr) -> str:
    match node:
        case NumberLiteral(value):
            if math.isinf(value):
                # "inf" would read back as an identifier
                return "1e999" if value > 0 else "-1e999"
            return format_number(value)
        case StringLiteral(value):
            return quote_string(value)
        case BoolLiteral(value):
            return "true" if value else "false"
        case NullLiteral():
            return "null"
        case ArrayLiteral(items):
            return "[" + ", ".join(_operand(item) for item in items) + "]"
        case Identifier(name):
            return name
        case Not(operand):
            inner = _operand(operand)
            if isinstance(operand.node, InfixOperation):
                inner = f"({inner})"
            return "!" + inner
        case InfixOperation(lhs, op, rhs):
            lhs_text = _operand(lhs)
            rhs_text = _operand(rhs)
            if isinstance(lhs.node, InfixOperation) and lhs.node.op.binding_power < op.binding_power:
                lhs_text = f"({lhs_text})"
            # left-associative: an equal-power right operand needs parentheses
            if isinstance(rhs.node, InfixOperation) and rhs.node.op.binding_power <= op.binding_power:
                rhs_text = f"({rhs_text})"
            return f"{lhs_text} {op.symbol} {rhs_text}"
        case Index(base, index):
            base_text = _operand(base)
            if isinstance(base.node, (InfixOperation, Not)):
                base_text = f"({base_text})"
            return f"{base_text}[{_operand(index)}]"
        case Block(statements):
            body = " ".join(statement_to_source(statement) for statement in statements)
            return "{ " + body + " }"
        case Conditional(condition, then_branch, else_branch):
            return f"if {_operand(condition)} {_print(then_branch.node)} else {_print(else_branch.node)}"
        case Assign(targets, value):
            names = " = ".join(target.node for target in targets)
            return f"{names} = {_operand(value)};"
        case ErrorExpr():
            return "[ERROR]"
        case _:
            raise TypeError(f"Unknown expression node: {node!r}")


def _operand(expr: Spanned[Expr]) -> str:
    # an assignment nested inside another expression keeps its own `;`
    if isinstance(expr.node, Assign):
        return f"({_print(expr.node)})"
    return _print(expr.node)
