"""
Tag scanner for [shortcode] syntax

Lexes raw text into an ordered list of shortcode tokens with their source
spans, attributes and open/close classification, then classifies each token
against the registration table.

The scanner operates in two passes:
1. Scanning: regex scan for open, close and escaped tags, skipping HTML tags
   so that shortcodes inside attribute values are left for the attribute path
2. Legacy pairing: a token with no registration metadata that is immediately
   followed by its own close tag is treated as an open/close pair

Example:
    >>> scanner = TagScanner({})
    >>> [t.text for t in scanner.tokens_scan('<p>[a x="1"]b[/a]</p>')]
    ['[a x="1"]', '[/a]']
"""

import re
from typing import Dict, List, Mapping

from ..models.shortcode import ExpectedResult, ShortcodeEntry
from ..models.token import MarkerKind, Token
from .log import LOG


TAG_PATTERN = re.compile(
    r"""
    # HTML tag, ignored
    <(?P<element>(?:"[^"]*"['"]*|'[^']*'['"]*|[^'">])+)>
    |
    # Opening tag: [name attr="v" ...] or [name /], optionally [[escaped]]
    (?P<oesc>\[?)
    \[
        (?P<open>\w+)
        (?P<attrs>(?:[\s,][^\]]*?)?)
        /?
    \]
    (?P<cesc1>\]?)
    |
    # Closing tag: [/name], optionally [[/escaped]]
    (?P<cesc0>\[?)
    \[/
        (?P<close>\w+)
    \]
    (?P<cesc2>\]?)
    """,
    re.VERBOSE | re.ASCII,
)

ATTRIBUTE_PATTERN = re.compile(
    r"""
    (?P<name>[^\s/'"=,\]]+)
    \s*=\s*
    (?:
        '(?P<single>[^']*)'
      | "(?P<double>[^"]*)"
      | (?P<bare>[^\s,'"\]]+)
    )
    """,
    re.VERBOSE,
)

SEPARATOR_PATTERN = re.compile(r"[\s,/]*")


class TagScanner:
    """
    Scanner producing classified shortcode tokens

    Args:
        entries: Registration table snapshot (name -> ShortcodeEntry)
    """

    def __init__(self, entries: Mapping[str, ShortcodeEntry]) -> None:
        self.entries = entries

    def tokens_scan(self, content: str) -> List[Token]:
        """
        Scan content for shortcode tokens

        Args:
            content: Raw text (HTML with embedded shortcodes, or an attribute value)

        Returns:
            Tokens in source order, classified and legacy-paired.
            Plain text and HTML tags produce no tokens.
        """
        tokens: List[Token] = []

        for match in TAG_PATTERN.finditer(content):
            if match.group("element") is not None:
                continue

            is_open = match.group("open") is not None
            if is_open:
                escaped_open = bool(match.group("oesc"))
                escaped_close = bool(match.group("cesc1"))
            else:
                escaped_open = bool(match.group("cesc0"))
                escaped_close = bool(match.group("cesc2"))

            token = Token(
                text=match.group(0),
                start=match.start(),
                end=match.end(),
                open=match.group("open"),
                close=match.group("close"),
                attributes=self.attributes_parse(match.group("attrs") or "") if is_open else {},
                escaped=escaped_open or escaped_close,
                escaped_open=escaped_open,
                escaped_close=escaped_close,
                index=len(tokens),
            )
            self.token_classify(token)
            tokens.append(token)

        self.legacyPairs_resolve(tokens)

        LOG(f"Scanned {len(tokens)} shortcode tokens", level=3)
        return tokens

    def attributes_parse(self, text: str) -> Dict[str, str]:
        """
        Parse the attribute section of an opening tag

        Supports name="value", name='value' and name=value, separated by
        whitespace or commas. Malformed input yields no attributes at all.

        Args:
            text: Everything between the tag name and the closing bracket

        Returns:
            Attribute mapping in source order

        Example:
            >>> TagScanner({}).attributes_parse(' id="3", class=left')
            {'id': '3', 'class': 'left'}
            >>> TagScanner({}).attributes_parse(' id="3" oops')
            {}
        """
        attributes: Dict[str, str] = {}
        pos = 0

        while True:
            pos = SEPARATOR_PATTERN.match(text, pos).end()
            if pos >= len(text):
                break

            match = ATTRIBUTE_PATTERN.match(text, pos)
            if not match:
                LOG(f"Malformed shortcode attributes: {text!r}", level=3)
                return {}

            value = match.group("double")
            if value is None:
                value = match.group("single")
            if value is None:
                value = match.group("bare")
            attributes[match.group("name")] = value
            pos = match.end()

        return attributes

    def token_classify(self, token: Token) -> None:
        """
        Set registered, has_start_and_end and marker_kind from the registry

        Registered shortcodes take their metadata; a block expected result gets
        a block placeholder, anything else an inline one. Known handlers without
        metadata (legacy registrations) and numeric names are inline. Any other
        unknown name is unresolved.
        """
        entry = self.entries.get(token.name)

        if entry is not None and entry.options is not None:
            token.registered = True
            token.has_start_and_end = entry.options.has_start_and_end
            if entry.options.expected_result is ExpectedResult.BLOCK:
                token.marker_kind = MarkerKind.BLOCK
            else:
                token.marker_kind = MarkerKind.INLINE
            return

        token.registered = False
        token.has_start_and_end = False
        if entry is not None or token.name.isdigit():
            token.marker_kind = MarkerKind.INLINE
        else:
            token.marker_kind = MarkerKind.UNRESOLVED

    def legacyPairs_resolve(self, tokens: List[Token]) -> None:
        """
        Pair tokens without metadata by one-token lookahead

        Legacy shortcodes have no metadata saying whether they take a close
        tag. If the very next token closes the same name, both are treated as
        a pair. Unresolved pairs are passed through untouched.
        """
        for i, token in enumerate(tokens[:-1]):
            if token.registered or token.escaped or not token.is_open:
                continue

            following = tokens[i + 1]
            if following.escaped or following.close != token.open:
                continue

            token.has_start_and_end = True
            following.has_start_and_end = True

            if token.marker_kind is MarkerKind.UNRESOLVED:
                token.marker_kind = MarkerKind.PASSTHROUGH
                following.marker_kind = MarkerKind.PASSTHROUGH
