"""Render structured errors against their source text.

Reports look like::

    [EVAL_INDEX_OUT_OF_BOUNDS] Error: IndexError: Index out of bounds
     --> main.plum:1:11
      |
    1 | [1, 2, 3][3];
      | --------- This has length 3
      |           ^ This index is out of bounds
      |
      = note: the index of the last element is 2
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from rich.console import Console
from rich.style import Style
from rich.text import Text

from plumlang.diagnostics.errors import (
    CircularDependencyError,
    IndexOutOfBoundsError,
    OperandTypeError,
    PlumError,
    RangeIndexError,
    ReassignError,
    UndefinedReferenceError,
)
from plumlang.text import TextRange, line_bounds, line_col

STYLES = {
    "header": Style(color="red", bold=True),
    "code": Style(color="bright_black"),
    "location": Style(color="cyan"),
    "gutter": Style(color="bright_black"),
    "source": Style(),
    "primary": Style(color="red", bold=True),
    "secondary": Style(color="yellow"),
    "note": Style(color="bright_cyan"),
}


@dataclass(frozen=True, slots=True)
class RenderOptions:
    color: bool = True
    show_notes: bool = True


@dataclass(frozen=True, slots=True)
class Label:
    range: TextRange
    message: str
    primary: bool = True


@dataclass(frozen=True, slots=True)
class Report:
    """Renderer-independent view of one error."""

    code: str
    title: str
    labels: tuple[Label, ...]
    notes: tuple[str, ...] = ()


def build_report(error: PlumError) -> Report:
    spec = error.spec
    title = f"{error.kind}: {spec.message.rstrip('.')}"
    notes: list[str] = []

    match error:
        case OperandTypeError():
            labels = (Label(error.span, f"This is of type {error.got.type}"),)
            notes.append(error.note)
        case IndexOutOfBoundsError():
            labels = (
                Label(error.base_span, f"This has length {error.length}", primary=False),
                Label(error.index_span, "This index is out of bounds"),
            )
            if error.last_valid_index is not None:
                notes.append(f"the index of the last element is {error.last_valid_index}")
        case RangeIndexError():
            labels = (
                Label(error.base_span, f"This has length {error.length}", primary=False),
                Label(error.index_span, "This range is out of bounds"),
            )
            notes.append(error.message)
        case ReassignError():
            labels = (
                Label(error.first_span, f"`{error.name}` is first assigned here", primary=False),
                Label(error.conflicting_span, f"`{error.name}` is assigned again here"),
            )
        case CircularDependencyError():
            labels = (Label(error.span, f"`{error.chain[0]}` depends on itself"),)
            notes.append(error.message)
        case UndefinedReferenceError():
            labels = (Label(error.span, error.message),)
        case _:
            labels = (Label(error.span, error.message),)

    if spec.hint is not None:
        notes.append(spec.hint)
    return Report(code=spec.code, title=title, labels=labels, notes=tuple(notes))


def render_error(
    error: PlumError,
    source_file: str,
    source: str,
    offset: int = 0,
    *,
    options: RenderOptions | None = None,
) -> Text:
    """Render one error as styled text; `offset` shifts every span into `source`."""
    options = options or RenderOptions()
    report = build_report(error)
    labels = sorted(
        (Label(label.range.shift(offset), label.message, label.primary) for label in report.labels),
        key=lambda label: (label.range.start, label.range.end),
    )

    def style(name: str) -> Style:
        return STYLES[name] if options.color else Style()

    primary = next((label for label in labels if label.primary), labels[0])
    line, col = line_col(source, primary.range.start)
    lines = sorted({line_col(source, label.range.start)[0] for label in labels})
    gutter_width = len(str(lines[-1] + 1))
    pad = " " * gutter_width

    text = Text()
    text.append(f"[{report.code}] ", style=style("code"))
    text.append(f"Error: {report.title}\n", style=style("header"))
    text.append(f"{pad}--> ", style=style("gutter"))
    text.append(f"{source_file}:{line + 1}:{col + 1}\n", style=style("location"))
    text.append(f"{pad} |\n", style=style("gutter"))

    for line_index in lines:
        start, end = line_bounds(source, line_index)
        text.append(f"{line_index + 1:>{gutter_width}} | ", style=style("gutter"))
        text.append(source[start:end] + "\n", style=style("source"))
        for label in labels:
            if line_col(source, label.range.start)[0] != line_index:
                continue
            label_col = label.range.start - start
            # multi-line spans are underlined to the end of their first line
            width = max(1, min(label.range.end, end) - label.range.start)
            marker = "^" if label.primary else "-"
            text.append(f"{pad} | ", style=style("gutter"))
            text.append(" " * label_col)
            text.append(
                f"{marker * width} {label.message}\n",
                style=style("primary" if label.primary else "secondary"),
            )

    if options.show_notes and report.notes:
        text.append(f"{pad} |\n", style=style("gutter"))
        for note in report.notes:
            text.append(f"{pad} = ", style=style("gutter"))
            text.append(f"note: {note}\n", style=style("note"))

    text.rstrip()
    return text


def print_errors(
    errors: Iterable[PlumError],
    source_file: str,
    source: str,
    *,
    console: Console | None = None,
    options: RenderOptions | None = None,
) -> None:
    console = console or Console(stderr=True)
    for error in errors:
        console.print(render_error(error, source_file, source, options=options))
