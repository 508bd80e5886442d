"""Source text coordinates."""

from plumlang.text.text import ZERO_RANGE, TextRange, line_bounds, line_col, slice_text_range

__all__ = [
    "ZERO_RANGE",
    "TextRange",
    "line_bounds",
    "line_col",
    "slice_text_range",
]
