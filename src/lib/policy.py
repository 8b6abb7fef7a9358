"""
Error-behavior policy

Applies the configured ErrorBehavior (strip, warn, leave, fail) uniformly at
every recoverable error site: unresolved tags, structural nesting errors,
handlers that report "unknown", and invalid placements.
"""

import html
from typing import Optional

from ..config import AppSettings, ErrorBehavior
from ..models.token import ErrorKind, MarkerKind, Token
from .errors import ShortcodeError
from .log import LOG


class ErrorPolicy:
    """
    Maps an error condition to the text that replaces the offending shortcode

    Args:
        settings: Settings holding error_behavior and warning_template
    """

    def __init__(self, settings: AppSettings) -> None:
        self.settings = settings

    @property
    def behavior(self) -> ErrorBehavior:
        return self.settings.error_behavior

    def text_resolve(
        self,
        kind: ErrorKind,
        message: str,
        original: str,
        warning: Optional[str] = None,
        html_allowed: bool = True,
    ) -> str:
        """
        Decide the substitution text for an error

        Args:
            kind: Error condition being handled
            message: Human-readable description, used when failing
            original: Source text to keep in leave mode
            warning: Text shown inside the warning fragment (defaults to original)
            html_allowed: False when the result lands in an attribute value;
                          warn mode then keeps the original text

        Returns:
            Replacement text for the offending shortcode

        Raises:
            ShortcodeError: In fail mode
        """
        behavior = self.behavior
        LOG(f"{kind.value}: {message} -> {behavior.value}", level=2)

        if behavior is ErrorBehavior.FAIL:
            raise ShortcodeError(message, kind)
        if behavior is ErrorBehavior.STRIP:
            return ""
        if behavior is ErrorBehavior.WARN and html_allowed:
            shown = original if warning is None else warning
            return self.settings.warning_make(html.escape(shown, quote=False))
        return original

    def tokenError_handle(
        self, kind: ErrorKind, message: str, token: Token, html_allowed: bool = True
    ) -> None:
        """
        Turn a token into a literal carrying the policy-selected replacement

        Used by the nesting resolver, where the decision has to be recorded on
        the token and applied later by the marker rewriter.

        Raises:
            ShortcodeError: In fail mode
        """
        token.replacement = self.text_resolve(
            kind, message, token.text, warning=message, html_allowed=html_allowed
        )
        token.marker_kind = MarkerKind.LITERAL
