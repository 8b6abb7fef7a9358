"""
Shortcode registration and handler models

Defines the metadata a shortcode is registered with, the registry entry that
binds a name to its handler, and the values exchanged with handlers.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ExpectedResult(str, Enum):
    """
    Kind of markup a shortcode handler is expected to return

    Drives the placeholder element used while the tree is repaired:
    BLOCK gets a div placeholder, everything else a span.
    """
    TEXT = "text"        # plain text, no markup
    INLINE = "inline"    # phrasing content (<span>, <a>, ...)
    BLOCK = "block"      # flow content (<div>, <figure>, ...)
    MIXED = "mixed"      # either; editor <p> wrappers are still stripped


class ShortcodeOptions(BaseModel):
    """
    Optional metadata supplied when registering a shortcode

    Accepts snake_case field names as well as the camelCase spellings used in
    manifests (hasStartAndEnd, expectedResult).

    Attributes:
        has_start_and_end: Shortcode is written as an open/close pair
                           ([name]...[/name]) rather than a single tag
        expected_result: What the handler returns (text, inline, block, mixed)
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    has_start_and_end: bool = Field(default=False, alias="hasStartAndEnd")
    expected_result: ExpectedResult = Field(default=ExpectedResult.TEXT, alias="expectedResult")

    @property
    def is_blockish(self) -> bool:
        """True if editor paragraph wrappers around the tokens must be removed"""
        return self.expected_result in (ExpectedResult.BLOCK, ExpectedResult.MIXED)


@dataclass(frozen=True)
class HandlerResult:
    """
    Tagged outcome of a handler call

    Either a fragment of HTML (possibly empty) or "unknown", meaning the
    handler cannot produce output for the arguments it was given.

    Example:
        HandlerResult.fragment("<b>hi</b>")    # substitute markup
        UNKNOWN                                # route through the error policy
    """
    html: Optional[str] = None

    @property
    def unknown(self) -> bool:
        return self.html is None

    @classmethod
    def fragment(cls, html: str) -> "HandlerResult":
        return cls(html=html)

    @classmethod
    def coerce(cls, value: Any) -> "HandlerResult":
        """Normalize whatever a handler returned into a HandlerResult"""
        if isinstance(value, HandlerResult):
            return value
        if value is None:
            return cls(html="")
        return cls(html=str(value))


UNKNOWN = HandlerResult()


@dataclass
class ShortcodeContext:
    """
    Side-channel context passed to every handler call

    Attributes:
        parser: The ShortcodeParser running the substitution
        element: Placeholder element (body path) or the element owning the
                 attribute (attribute path); None during leftover cleanup
        attribute: Attribute name when substituting inside an attribute value
        html_allowed: False when the result lands in an attribute value
        block: Nearest block-level ancestor of the placeholder, None at the
               top level or outside the body path
    """
    parser: Any = None
    element: Any = None
    attribute: Optional[str] = None
    html_allowed: bool = True
    block: Any = None


Handler = Callable[[str, Dict[str, str], str, ShortcodeContext], Union[str, HandlerResult, None]]


@dataclass(frozen=True)
class ShortcodeEntry:
    """
    A registered shortcode

    Attributes:
        name: Shortcode name (case-sensitive)
        handler: Callable producing the replacement markup
        options: Registration metadata; None for legacy registrations that
                 predate metadata (treated as single inline shortcodes unless
                 a matching close tag immediately follows)
    """
    name: str
    handler: Handler
    options: Optional[ShortcodeOptions] = None

    @property
    def registered(self) -> bool:
        """True if the entry carries metadata"""
        return self.options is not None
