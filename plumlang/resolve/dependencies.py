"""Dependency collection and linearization of top-level definitions.

Definitions may reference names defined later in the source. `resolve` orders
them so every definition comes after the definitions it references, reporting
reassignments, references to unknown names and reference cycles.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from plumlang.ast import Assign, Block, Expr, Identifier, Spanned, children
from plumlang.diagnostics import (
    CircularDependencyError,
    Diagnostic,
    ReassignError,
    ResolveError,
    UndefinedReferenceError,
    has_errors,
)
from plumlang.text import TextRange

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Definition:
    """One top-level assignment; a chained assignment is a single definition."""

    names: tuple[str, ...]
    references: dict[str, TextRange]
    span: TextRange
    statement: Spanned[Expr]

    @property
    def assign(self) -> Assign:
        node = self.statement.node
        if not isinstance(node, Assign):
            raise TypeError(f"Definition statement is not an assignment: {node!r}")
        return node

    @property
    def value(self) -> Spanned[Expr]:
        return self.assign.value


@dataclass(slots=True)
class DependencyMap:
    """Arena of definitions plus a name -> arena index table."""

    definitions: list[Definition] = field(default_factory=list)
    index: dict[str, int] = field(default_factory=dict)

    def add(self, definition: Definition) -> int:
        position = len(self.definitions)
        self.definitions.append(definition)
        for name in definition.names:
            self.index[name] = position
        return position

    def lookup(self, name: str) -> Definition | None:
        position = self.index.get(name)
        if position is None:
            return None
        return self.definitions[position]


@dataclass(frozen=True, slots=True)
class ResolveResult:
    definitions: list[Definition]
    errors: list[ResolveError] = field(default_factory=list)

    @property
    def order(self) -> list[tuple[str, ...]]:
        return [definition.names for definition in self.definitions]

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [error.to_diagnostic() for error in self.errors]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)


def collect_references(expr: Spanned[Expr]) -> dict[str, TextRange]:
    """Free identifier references of an expression, keeping the first span of each name.

    Names assigned by an earlier statement of an enclosing block are local and
    are not collected.
    """
    references: dict[str, TextRange] = {}
    _collect(expr, references, frozenset())
    return references


def _collect(expr: Spanned[Expr], references: dict[str, TextRange], local: frozenset[str]) -> None:
    match expr.node:
        case Identifier(name):
            if name not in local:
                references.setdefault(name, expr.span)
        case Block(statements):
            scope = local
            for statement in statements:
                if isinstance(statement.node, Assign):
                    _collect(statement.node.value, references, scope)
                    scope = scope | frozenset(statement.node.names)
                else:
                    _collect(statement, references, scope)
        case node:
            for child in children(node):
                _collect(child, references, local)


def _check_block_bindings(
    expr: Spanned[Expr],
    bound: dict[str, TextRange],
    errors: list[ReassignError],
) -> None:
    """Block-local names may neither repeat nor shadow a name that is already bound."""
    match expr.node:
        case Block(statements):
            scope = dict(bound)
            for statement in statements:
                if not isinstance(statement.node, Assign):
                    _check_block_bindings(statement, scope, errors)
                    continue
                _check_block_bindings(statement.node.value, scope, errors)
                for target in statement.node.targets:
                    first = scope.get(target.node)
                    if first is not None:
                        errors.append(ReassignError(target.node, first, target.span))
                    else:
                        scope[target.node] = target.span
        case node:
            for child in children(node):
                _check_block_bindings(child, bound, errors)


def build_dependency_map(statements: Sequence[Spanned[Expr]]) -> tuple[DependencyMap, list[ReassignError]]:
    dependency_map = DependencyMap()
    first_spans: dict[str, TextRange] = {}
    errors: list[ReassignError] = []

    for statement in statements:
        node = statement.node
        if not isinstance(node, Assign):
            continue

        for target in node.targets:
            first = first_spans.get(target.node)
            if first is not None:
                errors.append(ReassignError(target.node, first, target.span))
            else:
                first_spans[target.node] = target.span

        dependency_map.add(
            Definition(
                names=node.names,
                references=collect_references(node.value),
                span=statement.span,
                statement=statement,
            )
        )

    for statement in statements:
        _check_block_bindings(statement, first_spans, errors)

    return dependency_map, errors


def resolve(statements: Sequence[Spanned[Expr]]) -> ResolveResult:
    dependency_map, reassign_errors = build_dependency_map(statements)
    if reassign_errors:
        logger.debug("resolution stopped by %d reassignments", len(reassign_errors))
        return ResolveResult(definitions=[], errors=list(reassign_errors))

    definitions = dependency_map.definitions
    resolved_names: set[str] = set()
    ordered: list[int] = []
    pending = list(range(len(definitions)))
    round_number = 0

    while pending:
        round_number += 1
        ready = [
            position
            for position in pending
            if all(name in resolved_names for name in definitions[position].references)
        ]
        if not ready:
            errors = _unresolvable(dependency_map, pending)
            logger.debug(
                "resolution stalled after %d rounds with %d pending definitions",
                round_number,
                len(pending),
            )
            return ResolveResult(definitions=[], errors=errors)

        for position in ready:
            ordered.append(position)
            resolved_names.update(definitions[position].names)
        ready_set = set(ready)
        pending = [position for position in pending if position not in ready_set]
        logger.debug("round %d resolved %d definitions", round_number, len(ready))

    return ResolveResult(definitions=[definitions[position] for position in ordered])


def _unresolvable(dependency_map: DependencyMap, pending: list[int]) -> list[ResolveError]:
    errors: list[ResolveError] = []
    for position in pending:
        for name, span in dependency_map.definitions[position].references.items():
            if name not in dependency_map.index:
                errors.append(UndefinedReferenceError(name, span))
    errors.extend(_find_cycles(dependency_map, pending))
    return errors


def _find_cycles(dependency_map: DependencyMap, pending: list[int]) -> list[CircularDependencyError]:
    """Depth-first search over the unresolved definitions, one error per distinct cycle."""
    unresolved = set(pending)
    finished: set[int] = set()
    seen_cycles: set[frozenset[int]] = set()
    cycles: list[CircularDependencyError] = []
    # (definition position, name it was reached through)
    stack: list[tuple[int, str]] = []

    def visit(position: int, entry_name: str) -> None:
        stack.append((position, entry_name))
        definition = dependency_map.definitions[position]
        for name in definition.references:
            target = dependency_map.index.get(name)
            if target is None or target not in unresolved or target in finished:
                continue
            on_stack = [index for index, (member, _) in enumerate(stack) if member == target]
            if on_stack:
                members = stack[on_stack[0] :]
                key = frozenset(member for member, _ in members)
                if key not in seen_cycles:
                    seen_cycles.add(key)
                    chain = (name, *(member_name for _, member_name in members[1:]))
                    cycles.append(
                        CircularDependencyError(chain, dependency_map.definitions[target].span)
                    )
                continue
            visit(target, name)
        stack.pop()
        finished.add(position)

    for position in pending:
        if position not in finished:
            visit(position, dependency_map.definitions[position].names[0])

    return cycles
