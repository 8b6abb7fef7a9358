"""
Exceptions raised by shortweave

Every error condition the parser can hit has an ErrorKind; in fail mode the
condition is raised as a ShortcodeError carrying that kind.
"""

from typing import Optional

from ..models.token import ErrorKind


class ShortcodeError(Exception):
    """Base class for all exceptions raised by shortweave"""

    def __init__(self, message: str, kind: Optional[ErrorKind] = None) -> None:
        super().__init__(message)
        self.kind = kind


class InvalidTreeError(ShortcodeError):
    """Raised when rewritten content cannot be loaded as an HTML tree"""

    def __init__(self, message: str) -> None:
        super().__init__(message, ErrorKind.INVALID_TREE)


class ManifestError(ShortcodeError):
    """Raised when a shortcode manifest cannot be loaded"""
    pass
