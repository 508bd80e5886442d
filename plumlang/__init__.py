"""plumlang: a small expression language of out-of-order named definitions."""

from plumlang.ast import to_source
from plumlang.diagnostics import RenderOptions, print_errors, render_error
from plumlang.lexer import LexResult, lex
from plumlang.parser import ParseMode, ParseResult, ParserOptions, parse, parse_source
from plumlang.pipeline import EvaluationResult, RunResult, Stage, resolve_and_evaluate, run_source
from plumlang.resolve import ResolveResult, resolve
from plumlang.runtime import EvalOutcome, evaluate

__all__ = [
    "EvalOutcome",
    "EvaluationResult",
    "LexResult",
    "ParseMode",
    "ParseResult",
    "ParserOptions",
    "RenderOptions",
    "ResolveResult",
    "RunResult",
    "Stage",
    "evaluate",
    "lex",
    "parse",
    "parse_source",
    "print_errors",
    "render_error",
    "resolve",
    "resolve_and_evaluate",
    "run_source",
    "to_source",
]
