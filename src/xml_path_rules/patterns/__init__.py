"""Path patterns: compilation and registration.

Key Components:
    compile_pattern: Turns pattern text into an immutable Pattern
    PatternRegistry: Holds rules (pattern + handlers) in specificity order
    HandlerSpec: Open/close handlers and whitespace mode for one pattern
"""

from .compiler import (
    Pattern,
    Segment,
    SegmentKind,
    compile_pattern,
    is_valid_name,
)
from .registry import HandlerSpec, PatternRegistry, Rule

__all__ = [
    "Pattern",
    "Segment",
    "SegmentKind",
    "compile_pattern",
    "is_valid_name",
    "HandlerSpec",
    "PatternRegistry",
    "Rule",
]
