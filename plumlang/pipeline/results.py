"""Pipeline run result carriers."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from plumlang.diagnostics import Diagnostic, EvalError, PlumError, ResolveError, has_errors
from plumlang.lexer import LexResult
from plumlang.parser import ParseResult
from plumlang.runtime import Value, to_python


class Stage(StrEnum):
    LEX = "lex"
    PARSE = "parse"
    RESOLVE = "resolve"
    EVALUATE = "evaluate"


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Values of every definition plus the values of bare expression statements."""

    values: dict[str, Value] = field(default_factory=dict)
    expression_values: list[Value] = field(default_factory=list)
    order: list[tuple[str, ...]] = field(default_factory=list)
    errors: list[ResolveError | EvalError] = field(default_factory=list)
    failed_stage: Stage | None = None

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [error.to_diagnostic() for error in self.errors]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    def to_python(self) -> dict[str, object]:
        return {name: to_python(value) for name, value in self.values.items()}


@dataclass(frozen=True, slots=True)
class RunResult:
    """Result of the whole pipeline; later stages are absent once a stage fails."""

    source_text: str
    lex: LexResult
    parse: ParseResult | None = None
    evaluation: EvaluationResult | None = None
    failed_stage: Stage | None = None

    @property
    def errors(self) -> list[PlumError]:
        if self.failed_stage is None:
            return []
        if self.failed_stage == Stage.LEX:
            return list(self.lex.errors)
        if self.failed_stage == Stage.PARSE and self.parse is not None:
            return list(self.parse.errors)
        if self.evaluation is not None:
            return list(self.evaluation.errors)
        return []

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [error.to_diagnostic() for error in self.errors]

    @property
    def has_errors(self) -> bool:
        return has_errors(self.diagnostics)

    @property
    def values(self) -> dict[str, Value]:
        if self.evaluation is None:
            return {}
        return self.evaluation.values
