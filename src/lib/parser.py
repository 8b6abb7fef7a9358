"""
Shortcode parser for [shortcode] syntax in editor-produced HTML

Rewrites bracket shortcodes into the HTML fragments returned by their
registered handlers, keeping the surrounding markup structurally valid.

The parser operates in four stages:
1. Scanning: locate [name ...] / [/name] tokens in the source text
2. Ordering: pair open and close tokens with a stack so nested shortcodes are
   processed before the shortcodes enclosing them
3. Marker rewriting: replace each token with a placeholder element, so the
   content can be loaded as an HTML tree
4. Repair and substitution: for each placeholder in processing order, move it
   out of inline context if its placement requires it, then splice in the
   handler output

Key features:
- Nested shortcodes, including nested shortcodes of the same name
- Paragraph wrappers added by WYSIWYG editors around block shortcodes removed
- Block ancestors split around block-level replacements
- Shortcodes inside attribute values
- Escaping with doubled brackets ([[name]] for a literal [name])
- Uniform error policy (strip, warn, leave, fail)

Example:
    >>> parser = ShortcodeParser()
    >>> parser.register("b", lambda name, attrs, content, ctx: f"<b>{content}</b>",
    ...                 {"hasStartAndEnd": True, "expectedResult": "inline"})
    >>> parser.parse("<p>Some [b]bold[/b] text</p>")
    '<p>Some <b>bold</b> text</p>'
"""

import re
import threading
from typing import Any, Callable, ClassVar, Dict, List, Mapping, Optional, Union

from ..config import AppSettings, ErrorBehavior, appsettings
from ..models.shortcode import Handler, ShortcodeContext, ShortcodeEntry, ShortcodeOptions
from ..models.token import ErrorKind, Placement, Token
from .attributes import AttributeSubstitution
from .errors import InvalidTreeError
from .policy import ErrorPolicy
from .registry import ShortcodeRegistry
from .repair import BlockRepair
from .resolver import NestingResolver
from .rewriter import MarkerRewriter
from .scanner import TagScanner
from .substitution import ContentSubstitution
from .tree import HTMLTree
from .log import LOG


class ShortcodeParser:
    """
    Shortcode substitution engine

    Composes the scanner, resolver, rewriter, tree provider, repair and
    substitution stages. All per-call state lives inside parse(); the only
    state shared between calls is the registry.

    Args:
        registry: Registration table (a new empty one if not given)
        settings: Error behavior, marker and block element configuration
                  (the module-wide appsettings if not given)
        tree_factory: Callable building an HTMLTree from markup
    """

    _instances: ClassVar[Dict[str, "ShortcodeParser"]] = {}
    _instances_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        registry: Optional[ShortcodeRegistry] = None,
        settings: Optional[AppSettings] = None,
        tree_factory: Callable[[str], HTMLTree] = HTMLTree,
    ) -> None:
        self.registry = registry if registry is not None else ShortcodeRegistry()
        self.settings = settings if settings is not None else appsettings
        self.tree_factory = tree_factory
        self.repair = BlockRepair(self.settings)

    @classmethod
    def get(cls, identifier: str = "default") -> "ShortcodeParser":
        """
        Named parser shared across the process

        Lets application start-up code register handlers on a parser that
        request handling code later looks up by name.
        """
        with cls._instances_lock:
            if identifier not in cls._instances:
                cls._instances[identifier] = cls()
            return cls._instances[identifier]

    def register(
        self,
        name: str,
        handler: Handler,
        options: Union[ShortcodeOptions, Mapping[str, Any], None] = None,
    ) -> "ShortcodeParser":
        """Register a shortcode handler (see ShortcodeRegistry.register)"""
        self.registry.register(name, handler, options)
        return self

    def parse(self, content: str) -> str:
        """
        Substitute every shortcode in content

        Args:
            content: HTML (typically from a WYSIWYG editor) containing shortcodes

        Returns:
            Content with shortcodes replaced by handler output. Content with no
            shortcode syntax is returned unchanged.

        Raises:
            ShortcodeError: When the error behavior is fail and any shortcode
                            cannot be processed
        """
        if self.content_isFragment(content):
            LOG("Content is a template fragment, not parsed", level=2)
            return content

        entries = self.registry.snapshot()
        original = content
        content = self.blockWrappers_strip(content, entries)

        if not entries:
            return content
        if not content.strip() or "[" not in content:
            return content

        policy = ErrorPolicy(self.settings)
        scanner = TagScanner(entries)
        substitution = ContentSubstitution(entries, policy)

        tokens = scanner.tokens_scan(content)
        ordered = NestingResolver(policy, entries.__contains__).order_resolve(tokens)
        rewritten = MarkerRewriter(self.settings, policy).markers_insert(content, tokens)

        try:
            tree = self.tree_factory(rewritten)
        except InvalidTreeError:
            if self.settings.error_behavior is ErrorBehavior.FAIL:
                raise
            LOG("Rewritten content could not be parsed, returning input unchanged", level=1)
            return original

        attributes = AttributeSubstitution(
            scanner,
            NestingResolver(policy, entries.__contains__, html_allowed=False),
            substitution,
            policy,
        )
        changed = attributes.attributes_replace(tree, parser=self)
        if not tokens and not changed:
            return content

        self.markers_process(tree, tokens, ordered, substitution, policy)

        output = tree.serialize()
        return self.markers_cleanup(output, tokens, substitution)

    def markers_process(
        self,
        tree: HTMLTree,
        tokens: List[Token],
        ordered: List[Token],
        substitution: ContentSubstitution,
        policy: ErrorPolicy,
    ) -> None:
        """
        Repair and substitute each placeholder in processing order

        Args:
            tree: Parsed rewritten content
            tokens: All tokens, indexed by Token.index
            ordered: Processing order from the nesting resolver
            substitution: Handler invocation stage
            policy: Error policy for invalid placements
        """
        settings = self.settings

        for token in ordered:
            if not token.marker_kind.is_structural:
                continue

            node = tree.marker_find(token.marker_kind.value, settings.marker_class, settings.marker_id_attribute, token.index)
            if node is None:
                LOG(f"Placeholder for {token.text} not found in tree", level=2)
                continue

            block = self.repair.blockAncestor_find(tree, node)
            placement = self.repair.placement_classify(token.attributes)
            close_text = tokens[token.counterpart].text if token.counterpart is not None else None
            LOG(f"{token.text}: placement {placement.value}, block {block.name if block is not None else None}", level=3)

            # Top-level placeholders have nothing to split out of
            if block is None and placement is not Placement.INLINE and not tree.is_root(node.parent):
                inner = tree.innerHTML_get(node)
                original = token.text if close_text is None else f"{token.text}{inner}{close_text}"
                replacement = policy.text_resolve(
                    ErrorKind.INVALID_PLACEMENT,
                    f"No block container found for {token.text} with {placement.value} placement",
                    original,
                    warning=token.text,
                )
                tree.fragment_replace(node, replacement)
                continue

            if block is not None:
                self.repair.marker_relocate(tree, node, block, placement)

            context = ShortcodeContext(parser=self, element=node, block=block)
            substitution.marker_replace(tree, node, token, context, close_text)

    def markers_cleanup(self, output: str, tokens: List[Token], substitution: ContentSubstitution) -> str:
        """
        Substitute placeholders that survived as text

        The HTML parser keeps <script> bodies as raw text, so placeholders
        written there are never seen as elements. They are replaced here,
        innermost first.
        """
        cls = re.escape(self.settings.marker_class)
        id_attribute = re.escape(self.settings.marker_id_attribute)
        pattern = re.compile(
            rf'<(?P<kind>span|div) class="{cls}" {id_attribute}="(?P<index>\d+)"[^>]*>'
            rf'(?P<content>(?:(?!<(?:span|div) class="{cls}").)*?)</(?P=kind)>',
            re.DOTALL,
        )

        def marker_expand(match: "re.Match[str]") -> str:
            index = int(match.group("index"))
            if index >= len(tokens):
                return match.group("content")
            token = tokens[index]
            close_text = tokens[token.counterpart].text if token.counterpart is not None else None
            context = ShortcodeContext(parser=self)
            return substitution.replacementText_get(token, match.group("content"), context, close_text)

        for _ in range(len(tokens)):
            output, count = pattern.subn(marker_expand, output)
            if not count:
                break
        return output

    def content_isFragment(self, content: str) -> bool:
        """
        True if content holds table-row markup inside a <script> with no table

        Template fragments injected in script blocks would lose their orphaned
        <tr>/<td> elements in a tree round trip, so such content is not parsed.
        """
        start = content.find("<script")
        if start == -1:
            return False
        script = content[start:]

        end = script.find("</script>")
        if end == -1:
            return False
        script = script[:end + len("</script>")]

        if "<table" in script:
            return False
        return "<tr" in script or "<td" in script

    def blockWrappers_strip(self, content: str, entries: Mapping[str, ShortcodeEntry]) -> str:
        """
        Remove editor <p> wrappers around block-level shortcode tokens

        Editors wrap a shortcode typed on its own line in <p>...</p>. For
        shortcodes returning block (or mixed) content that paragraph would end
        up around the block, so a <p> holding nothing but the token is removed.

        Example:
            '<p>[note]</p>text<p>[/note]</p>' -> '[note]text[/note]'
        """
        for name, entry in entries.items():
            if entry.options is None or not entry.options.is_blockish:
                continue

            quoted = re.escape(name)
            content = re.sub(rf"<p>(\[{quoted}(?:[\s,][^\]]*)?\])</p>", r"\1", content)
            if entry.options.has_start_and_end:
                content = re.sub(rf"<p>(\[/{quoted}\])</p>", r"\1", content)

        return content
