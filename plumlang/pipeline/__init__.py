"""Pipeline entrypoints and result carriers."""

from plumlang.pipeline.entrypoints import resolve_and_evaluate, run_source
from plumlang.pipeline.results import EvaluationResult, RunResult, Stage

__all__ = [
    "EvaluationResult",
    "RunResult",
    "Stage",
    "resolve_and_evaluate",
    "run_source",
]
