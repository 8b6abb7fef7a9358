"""
Models package for shortweave

Contains data structures and type definitions for the parsing pipeline.
"""

from .state import ProgramState, pipeline
from .shortcode import (
    ExpectedResult,
    HandlerResult,
    ShortcodeContext,
    ShortcodeEntry,
    ShortcodeOptions,
    UNKNOWN,
)
from .token import ErrorKind, MarkerKind, Placement, Token

__all__ = [
    "ProgramState",
    "pipeline",
    "ExpectedResult",
    "HandlerResult",
    "ShortcodeContext",
    "ShortcodeEntry",
    "ShortcodeOptions",
    "UNKNOWN",
    "ErrorKind",
    "MarkerKind",
    "Placement",
    "Token",
]
