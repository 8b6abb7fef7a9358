"""
shortweave - Nested shortcode substitution for WYSIWYG HTML

Rewrites [shortcode] tags embedded in editor-produced HTML into the fragments
returned by registered handlers, repairing block/inline nesting on the way.
"""

__version__ = "1.0.0"

from .lib import (
    ShortcodeParser,
    ShortcodeRegistry,
    ShortcodeError,
    InvalidTreeError,
    ManifestError,
    element_wrap,
    template_render,
    manifest_load,
    LOG,
    state_connectToLogger,
)
from .models import ExpectedResult, HandlerResult, ShortcodeContext, ShortcodeOptions, UNKNOWN
from .config import AppSettings, ErrorBehavior

__all__ = [
    "ShortcodeParser",
    "ShortcodeRegistry",
    "ShortcodeError",
    "InvalidTreeError",
    "ManifestError",
    "element_wrap",
    "template_render",
    "manifest_load",
    "LOG",
    "state_connectToLogger",
    "ExpectedResult",
    "HandlerResult",
    "ShortcodeContext",
    "ShortcodeOptions",
    "UNKNOWN",
    "AppSettings",
    "ErrorBehavior",
    "__version__",
]
