"""Dependency resolution of top-level definitions."""

from plumlang.resolve.dependencies import (
    Definition,
    DependencyMap,
    ResolveResult,
    build_dependency_map,
    collect_references,
    resolve,
)

__all__ = [
    "Definition",
    "DependencyMap",
    "ResolveResult",
    "build_dependency_map",
    "collect_references",
    "resolve",
]
