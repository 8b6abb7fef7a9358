"""
Shortcodes inside attribute values

Attribute values have no child structure, so no placeholders or tree repair
are involved: the value is scanned and resolved like body text, then handler
output is spliced straight into the string, children before parents.
"""

from typing import Any, Dict, List, Tuple

from ..models.shortcode import ShortcodeContext
from ..models.token import ErrorKind, MarkerKind, Token
from .policy import ErrorPolicy
from .resolver import NestingResolver
from .rewriter import escaped_unwrap, text_splice
from .scanner import TagScanner
from .substitution import ContentSubstitution
from .tree import HTMLTree
from .log import LOG


Span = Tuple[int, int]


class AttributeSubstitution:
    """
    Substitutes shortcodes found in attribute values

    Args:
        scanner: Tag scanner bound to the registration snapshot
        resolver: Nesting resolver (configured with html_allowed=False)
        substitution: Handler invocation and unknown-result policy
        policy: Error policy for unresolved tokens
    """

    def __init__(
        self,
        scanner: TagScanner,
        resolver: NestingResolver,
        substitution: ContentSubstitution,
        policy: ErrorPolicy,
    ) -> None:
        self.scanner = scanner
        self.resolver = resolver
        self.substitution = substitution
        self.policy = policy

    def attributes_replace(self, tree: HTMLTree, parser: Any = None) -> int:
        """
        Substitute shortcodes in every attribute value of the tree

        Returns:
            Number of attribute values changed
        """
        changed = 0
        for element in tree.elements_withAttributes():
            for name, value in list(element.attrs.items()):
                if not isinstance(value, str) or "[" not in value or "]" not in value:
                    continue
                context = ShortcodeContext(parser=parser, element=element, attribute=name, html_allowed=False)
                replaced = self.value_substitute(value, context)
                if replaced != value:
                    element[name] = replaced
                    changed += 1
        LOG(f"Substituted shortcodes in {changed} attribute values", level=3)
        return changed

    def value_substitute(self, value: str, context: ShortcodeContext) -> str:
        """
        Substitute the shortcodes of a single attribute value

        Args:
            value: Raw attribute value
            context: Handler context (element and attribute name)

        Returns:
            Value with shortcodes replaced

        Example:
            With 'link' registered as a single shortcode returning '/page/3':
            'go to [link id=3]' -> 'go to /page/3'
        """
        tokens = self.scanner.tokens_scan(value)
        if not tokens:
            return value

        ordered = self.resolver.order_resolve(tokens)
        results: Dict[Span, str] = {}

        for token in tokens:
            if token.escaped:
                results[(token.start, token.end)] = escaped_unwrap(token)
            elif token.marker_kind is MarkerKind.LITERAL:
                results[(token.start, token.end)] = token.replacement
            elif token.marker_kind is MarkerKind.UNRESOLVED:
                results[(token.start, token.end)] = self.policy.text_resolve(
                    ErrorKind.UNRESOLVED_TAG,
                    f"Unknown shortcode tag {token.text}",
                    token.text,
                    html_allowed=False,
                )

        for token in ordered:
            if not token.marker_kind.is_structural:
                continue
            if token.counterpart is not None:
                close = tokens[token.counterpart]
                content = self.range_render(value, results, token.end, close.start)
                results[(token.start, close.end)] = self.substitution.replacementText_get(
                    token, content, context, close_text=close.text
                )
            else:
                results[(token.start, token.end)] = self.substitution.replacementText_get(token, "", context)

        return self.range_render(value, results, 0, len(value))

    def range_render(self, value: str, results: Dict[Span, str], start: int, end: int) -> str:
        """
        Render value[start:end] with the outermost resolved spans replaced

        Spans nested inside a replaced span are already part of its result.
        """
        edits: List[Tuple[int, int, str]] = []
        last_end = start
        for (span_start, span_end), text in sorted(results.items()):
            if span_start < last_end or span_end > end:
                continue
            edits.append((span_start - start, span_end - start, text))
            last_end = span_end
        return text_splice(value[start:end], edits)
