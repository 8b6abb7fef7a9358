"""
Marker rewriter

Replaces each shortcode token's source span with a placeholder element so the
content can be loaded as a real HTML tree. Spans are replaced in reverse
source order so offsets of the tokens not yet visited stay valid.
"""

from typing import Iterable, List, Optional, Tuple

from ..config import AppSettings
from ..models.token import ErrorKind, MarkerKind, Token
from .policy import ErrorPolicy
from .log import LOG


Edit = Tuple[int, int, str]


def text_splice(text: str, edits: Iterable[Edit]) -> str:
    """
    Apply non-overlapping (start, end, replacement) edits to text

    Edits are applied from the last span to the first, so every span refers
    to offsets in the original text.

    Example:
        >>> text_splice("a[x]b[y]c", [(1, 4, "X"), (5, 8, "")])
        'aXbc'
    """
    pieces: List[str] = []
    tail = len(text)

    for start, end, replacement in sorted(edits, key=lambda edit: edit[0], reverse=True):
        pieces.append(text[end:tail])
        pieces.append(replacement)
        tail = start

    pieces.append(text[:tail])
    return "".join(reversed(pieces))


def escaped_unwrap(token: Token) -> str:
    """
    Remove exactly one layer of doubled brackets from an escaped token

    Example:
        '[[note]]' -> '[note]', '[[/note]]' -> '[/note]'
    """
    start = 1 if token.escaped_open else 0
    end = len(token.text) - 1 if token.escaped_close else len(token.text)
    return token.text[start:end]


class MarkerRewriter:
    """
    Produces text with placeholder elements in place of shortcode tokens

    Args:
        settings: Marker class and id attribute configuration
        policy: Error policy for unresolved tokens
    """

    def __init__(self, settings: AppSettings, policy: ErrorPolicy) -> None:
        self.settings = settings
        self.policy = policy

    def replacement_make(self, token: Token) -> Optional[str]:
        """
        Text replacing a token's span

        Returns:
            Replacement text, or None to leave the span untouched

        Raises:
            ShortcodeError: For an unresolved token when the policy is fail
        """
        if token.escaped:
            return escaped_unwrap(token)

        kind = token.marker_kind
        if kind is MarkerKind.PASSTHROUGH:
            return None
        if kind is MarkerKind.UNRESOLVED:
            return self.policy.text_resolve(
                ErrorKind.UNRESOLVED_TAG,
                f"Unknown shortcode tag {token.text}",
                token.text,
            )
        if kind is MarkerKind.LITERAL:
            return token.replacement

        if token.is_close:
            # Unpaired numeric closes stay as text
            if token.counterpart is None:
                return None
            return f"</{kind.value}>"
        return self.settings.marker_make(kind.value, token.index, paired=token.has_start_and_end)

    def markers_insert(self, content: str, tokens: List[Token]) -> str:
        """
        Replace every token span with its placeholder or substitution text

        Args:
            content: Source text the tokens were scanned from
            tokens: Finalized tokens (classified and resolved)

        Returns:
            Content ready to be loaded as an HTML tree
        """
        edits: List[Edit] = []
        for token in reversed(tokens):
            replacement = self.replacement_make(token)
            if replacement is None:
                continue
            edits.append((token.start, token.end, replacement))

        rewritten = text_splice(content, edits)
        LOG(f"Rewritten content: {rewritten!r}", level=3)
        return rewritten
