"""Unified entrypoints that chain lex, parse, resolve and evaluate."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from types import MappingProxyType

from plumlang.ast import Assign, Expr, Spanned
from plumlang.diagnostics import EvalError, ResolveError
from plumlang.lexer import lex
from plumlang.parser import ParseMode, ParserOptions, parse
from plumlang.pipeline.results import EvaluationResult, RunResult, Stage
from plumlang.resolve import collect_references, resolve
from plumlang.runtime import AssignValue, SpannedValue, Value, evaluate
from plumlang.runtime.evaluator import assign_to_assign_error

logger = logging.getLogger(__name__)


def resolve_and_evaluate(statements: Sequence[Spanned[Expr]]) -> EvaluationResult:
    """Order the definitions, then evaluate each once against the names bound so far.

    A definition that references a failed definition is skipped without a
    further error. Bare expression statements are evaluated last, in source order.
    """
    resolved = resolve(statements)
    if resolved.has_errors:
        return EvaluationResult(errors=list(resolved.errors), failed_stage=Stage.RESOLVE)

    env: dict[str, SpannedValue] = {}
    view = MappingProxyType(env)
    failed: set[str] = set()
    errors: list[ResolveError | EvalError] = []

    for definition in resolved.definitions:
        if failed.intersection(definition.references):
            failed.update(definition.names)
            continue

        outcome = evaluate(definition.value, view)
        if outcome.has_errors or outcome.value.is_error:
            errors.extend(outcome.errors)
            failed.update(definition.names)
            continue

        if isinstance(outcome.value.value, AssignValue):
            errors.append(assign_to_assign_error(outcome.value))
            failed.update(definition.names)
            continue

        for name in definition.names:
            env[name] = outcome.value

    expression_values: list[Value] = []
    for statement in statements:
        if isinstance(statement.node, Assign):
            continue
        if failed.intersection(collect_references(statement)):
            continue
        outcome = evaluate(statement, view)
        if outcome.has_errors or outcome.value.is_error:
            errors.extend(outcome.errors)
            continue
        expression_values.append(outcome.value.value)

    logger.debug(
        "evaluated %d definitions and %d expressions with %d errors",
        len(resolved.definitions),
        len(expression_values),
        len(errors),
    )
    return EvaluationResult(
        values={name: bound.value for name, bound in env.items()},
        expression_values=expression_values,
        order=resolved.order,
        errors=errors,
        failed_stage=Stage.EVALUATE if errors else None,
    )


def run_source(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: ParseMode | None = None,
) -> RunResult:
    """Run the whole pipeline over one source text, stopping at the first failing stage."""
    lexed = lex(text)
    if lexed.has_errors:
        logger.debug("pipeline stopped after lexing")
        return RunResult(source_text=text, lex=lexed, failed_stage=Stage.LEX)

    parsed = parse(lexed.tokens, options, mode=mode)
    if parsed.has_errors:
        logger.debug("pipeline stopped after parsing")
        return RunResult(source_text=text, lex=lexed, parse=parsed, failed_stage=Stage.PARSE)

    evaluation = resolve_and_evaluate(parsed.statements)
    return RunResult(
        source_text=text,
        lex=lexed,
        parse=parsed,
        evaluation=evaluation,
        failed_stage=evaluation.failed_stage,
    )
