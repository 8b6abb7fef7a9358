"""
shortweave - Nested shortcode substitution for WYSIWYG HTML

Rewrites [shortcode] tags into handler-provided HTML while keeping block and
inline content correctly nested.
"""

__version__ = "1.0.0"

from .parser import ShortcodeParser
from .registry import ShortcodeRegistry
from .errors import ShortcodeError, InvalidTreeError, ManifestError
from .handlers import element_wrap, template_render, manifest_load
from .log import LOG, state_connectToLogger

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
    "__version__",
]
