"""AST model and source reconstruction."""

from plumlang.ast.model import (
    BINDING_POWERS,
    MIN_BINDING_POWER,
    ArrayLiteral,
    Assign,
    Block,
    BoolLiteral,
    Conditional,
    ErrorExpr,
    Expr,
    Identifier,
    Index,
    InfixOp,
    InfixOperation,
    Literal,
    Not,
    NullLiteral,
    NumberLiteral,
    Spanned,
    StringLiteral,
    children,
    contains_error,
)
from plumlang.ast.printer import (
    format_number,
    program_to_source,
    quote_string,
    statement_to_source,
    to_source,
)

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
    "format_number",
    "program_to_source",
    "quote_string",
    "statement_to_source",
    "to_source",
]
