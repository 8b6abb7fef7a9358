"""
Scanner and tree-repair data models

Type-safe structures produced by the tag scanner and consumed by the nesting
resolver, marker rewriter and block repair stages.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Dict, Optional


class MarkerKind(Enum):
    """
    How a token is represented after marker rewriting
    """
    INLINE = "span"              # inline placeholder element
    BLOCK = "div"                # block placeholder element
    LITERAL = "literal"          # error override, replaced by policy text
    UNRESOLVED = "unresolved"    # unregistered name, replaced per error policy
    PASSTHROUGH = "passthrough"  # legacy unregistered pair, left untouched

    @property
    def is_structural(self) -> bool:
        """True if the token becomes a placeholder element"""
        return self in (MarkerKind.INLINE, MarkerKind.BLOCK)


class Placement(Enum):
    """
    Where a replacement must land relative to its enclosing block element
    """
    INLINE = "inline"    # in place, no tree mutation
    BEFORE = "before"    # immediately before the block ancestor
    AFTER = "after"      # immediately after the block ancestor
    SPLIT = "split"      # between the two halves of the split block ancestor


class ErrorKind(Enum):
    """Recoverable and fatal error conditions raised while parsing"""
    UNRESOLVED_TAG = "unresolved-tag"
    UNEXPECTED_CLOSE = "unexpected-close"
    MISMATCHED_CLOSE = "mismatched-close"
    UNCLOSED_OPEN = "unclosed-open"
    HANDLER_UNKNOWN = "handler-unknown"
    INVALID_PLACEMENT = "invalid-placement"
    INVALID_TREE = "invalid-tree"


@dataclass
class Token:
    """
    A shortcode token found in source text

    Attributes:
        text: Exact source slice (e.g., '[note title="x"]')
        start: Offset of the first character in the source string
        end: Offset one past the last character
        open: Name if this is an opening (or self-closing) tag
        close: Name if this is a closing tag
        attributes: Parsed attributes in source order
        escaped: Token used doubled brackets and must not be substituted
        escaped_open: Leading bracket was doubled
        escaped_close: Trailing bracket was doubled
        index: Monotonic sequence index of the token in its source
        registered: Name has registration metadata
        has_start_and_end: Token takes part in an open/close pair
        marker_kind: Representation chosen by the scanner (or an error override)
        replacement: Policy-selected text when marker_kind is LITERAL
        counterpart: Index of the matching close/open token once paired

    Example:
        For source 'x [b]y[/b]':
        Token(text="[b]", start=2, end=5, open="b", close=None, index=0, ...)
        Token(text="[/b]", start=6, end=10, open=None, close="b", index=1, ...)
    """
    text: str
    start: int
    end: int
    open: Optional[str] = None
    close: Optional[str] = None
    attributes: Dict[str, str] = field(default_factory=dict)
    escaped: bool = False
    escaped_open: bool = False
    escaped_close: bool = False
    index: int = 0
    registered: bool = False
    has_start_and_end: bool = False
    marker_kind: MarkerKind = MarkerKind.INLINE
    replacement: Optional[str] = None
    counterpart: Optional[int] = None

    @property
    def name(self) -> str:
        return self.open if self.open else (self.close or "")

    @property
    def is_open(self) -> bool:
        return bool(self.open)

    @property
    def is_close(self) -> bool:
        return bool(self.close) and not self.open
