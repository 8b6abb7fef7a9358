"""
Content substitution

Calls the registered handler for a shortcode and splices its output into the
tree in place of the placeholder. Handlers that report UNKNOWN (or shortcodes
with no handler at all) are resolved through the error policy.
"""

from typing import Mapping, Optional

from bs4 import Tag

from ..models.shortcode import HandlerResult, ShortcodeContext, ShortcodeEntry
from ..models.token import ErrorKind, Token
from .policy import ErrorPolicy
from .tree import HTMLTree
from .log import LOG


class ContentSubstitution:
    """
    Produces replacement text for tokens and applies it to placeholders

    Args:
        entries: Registration table snapshot
        policy: Error policy for unknown handler results
    """

    def __init__(self, entries: Mapping[str, ShortcodeEntry], policy: ErrorPolicy) -> None:
        self.entries = entries
        self.policy = policy

    def handler_call(self, token: Token, content: str, context: ShortcodeContext) -> HandlerResult:
        """Invoke the handler for a token; no handler means UNKNOWN"""
        entry = self.entries.get(token.open)
        if entry is None:
            return HandlerResult()
        return HandlerResult.coerce(entry.handler(token.open, dict(token.attributes), content, context))

    def replacementText_get(
        self,
        token: Token,
        content: str,
        context: ShortcodeContext,
        close_text: Optional[str] = None,
    ) -> str:
        """
        Text to substitute for a shortcode

        Args:
            token: Opening token of the shortcode
            content: Inner content (already substituted), empty for single tags
            context: Side-channel context handed to the handler
            close_text: Source text of the closing token for paired shortcodes;
                        leave mode restores open + content + close

        Returns:
            Handler output, or the error policy's substitution

        Raises:
            ShortcodeError: If the handler reports UNKNOWN and the policy is fail
        """
        result = self.handler_call(token, content, context)
        if not result.unknown:
            return result.html

        original = token.text
        if close_text is not None:
            original = f"{token.text}{content}{close_text}"
        return self.policy.text_resolve(
            ErrorKind.HANDLER_UNKNOWN,
            f"Unknown shortcode tag {token.text}",
            original,
            warning=token.text,
            html_allowed=context.html_allowed,
        )

    def marker_replace(
        self,
        tree: HTMLTree,
        node: Tag,
        token: Token,
        context: ShortcodeContext,
        close_text: Optional[str] = None,
    ) -> None:
        """
        Replace a placeholder with its handler output

        The placeholder's children are serialized and passed to the handler as
        its content; the placeholder is removed whatever the outcome.
        """
        content = tree.innerHTML_get(node)
        replacement = self.replacementText_get(token, content, context, close_text)
        LOG(f"Substituting {token.text} -> {replacement!r}", level=3)
        tree.fragment_replace(node, replacement)
