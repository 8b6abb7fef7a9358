"""
Nesting resolver

Establishes the order in which shortcodes are substituted so that every
shortcode nested inside another is processed before its parent.

Tokens are visited in source order with an explicit stack:
- a single (unpaired) open goes straight to the processing order
- a paired open is pushed
- a close must match the top of the stack; on a match the open is popped and
  appended, which is what puts children before parents

Structural errors (unexpected close, mismatched close, unclosed open) are
decided by the error policy and recorded on the offending token.
"""

from typing import Callable, List

from ..models.token import ErrorKind, Token
from .policy import ErrorPolicy
from .log import LOG


class NestingResolver:
    """
    Builds the depth-first processing order for a token list

    Args:
        policy: Error policy deciding the fate of structurally invalid tokens
        registered: Callable telling whether a name has a handler; a stray
                    close of an unknown name is plain text, not an error
        html_allowed: False when resolving an attribute value, where warn
                      mode cannot insert a warning fragment
    """

    def __init__(self, policy: ErrorPolicy, registered: Callable[[str], bool], html_allowed: bool = True) -> None:
        self.policy = policy
        self.registered = registered
        self.html_allowed = html_allowed

    def order_resolve(self, tokens: List[Token]) -> List[Token]:
        """
        Compute the processing order

        Args:
            tokens: Scanner output; error overrides are written back into it

        Returns:
            Opening tokens, children before parents, siblings in source order

        Raises:
            ShortcodeError: On a structural error when the policy is fail

        Example:
            For '[a]x[b]y[/b][/a][c]' with a and b paired:
            returns [b, a, c]
        """
        ordered: List[Token] = []
        stack: List[Token] = []

        for token in tokens:
            if token.escaped:
                continue

            if token.is_open:
                if token.has_start_and_end:
                    stack.append(token)
                else:
                    ordered.append(token)
                continue

            if not stack:
                # A lone close of an unknown name is just text that looks like one
                if self.registered(token.close):
                    self.policy.tokenError_handle(
                        ErrorKind.UNEXPECTED_CLOSE,
                        f"Unexpected closing shortcode {token.text}",
                        token,
                        html_allowed=self.html_allowed,
                    )
                continue

            top = stack[-1]
            if top.open != token.close:
                self.policy.tokenError_handle(
                    ErrorKind.MISMATCHED_CLOSE,
                    f"Mismatched closing shortcode {token.text}, expected [/{top.open}]",
                    token,
                    html_allowed=self.html_allowed,
                )
                continue

            stack.pop()
            top.counterpart = token.index
            token.counterpart = top.index
            ordered.append(top)

        for token in stack:
            self.policy.tokenError_handle(
                ErrorKind.UNCLOSED_OPEN,
                f"Shortcode {token.text} is never closed",
                token,
                html_allowed=self.html_allowed,
            )

        LOG(f"Processing order: {[t.index for t in ordered]}", level=3)
        return ordered
