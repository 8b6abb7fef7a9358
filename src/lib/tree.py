"""
HTML tree provider

Thin wrapper over BeautifulSoup (html.parser backend) exposing the handful of
operations the repair and substitution stages need: find a placeholder, read
its inner HTML, move it, split its ancestors, splice a fragment in its place
and serialize the result.

html.parser keeps the nesting it is given (it does not apply HTML5 implied
end tags), so the block/inline repairs are done explicitly by the caller.
"""

from typing import List, Optional

from bs4 import BeautifulSoup, ParserRejectedMarkup, Tag
from bs4.dammit import EntitySubstitution
from bs4.element import PageElement
from bs4.formatter import HTMLFormatter

from .errors import InvalidTreeError


class SourceOrderFormatter(HTMLFormatter):
    """
    HTML formatter that keeps attributes in source order

    The stock formatters sort attributes alphabetically, which would reorder
    attributes in handler output and untouched content alike.
    """

    def __init__(self) -> None:
        super().__init__(
            entity_substitution=EntitySubstitution.substitute_xml,
            void_element_close_prefix=None,
        )

    def attributes(self, tag):
        if tag.attrs is None:
            return []
        return list(tag.attrs.items())


FORMATTER = SourceOrderFormatter()


def soup_make(content: str) -> BeautifulSoup:
    """
    Parse markup into a BeautifulSoup document

    Raises:
        InvalidTreeError: If the parser rejects the markup
    """
    try:
        return BeautifulSoup(content, "html.parser", multi_valued_attributes=None)
    except ParserRejectedMarkup as e:
        raise InvalidTreeError(f"Couldn't decode HTML when processing shortcodes: {e}") from e


class HTMLTree:
    """
    A parsed document addressed through placeholder identifiers

    Args:
        content: Markup to parse (rewritten content with placeholders)

    Raises:
        InvalidTreeError: If the markup cannot be parsed
    """

    def __init__(self, content: str) -> None:
        self.soup = soup_make(content)

    def marker_find(self, kind: str, css_class: str, id_attribute: str, index: int) -> Optional[Tag]:
        """Locate the placeholder element for a token index"""
        return self.soup.find(kind, attrs={"class": css_class, id_attribute: str(index)})

    def elements_withAttributes(self) -> List[Tag]:
        """All elements in document order"""
        return [tag for tag in self.soup.find_all(True) if tag.attrs]

    def is_root(self, node: Optional[PageElement]) -> bool:
        return node is None or node is self.soup

    def innerHTML_get(self, node: Tag) -> str:
        """Serialized children of a node"""
        return node.decode_contents(formatter=FORMATTER)

    def node_moveBefore(self, node: Tag, anchor: Tag) -> None:
        anchor.insert_before(node.extract())

    def node_moveAfter(self, node: Tag, anchor: Tag) -> None:
        anchor.insert_after(node.extract())

    def node_cloneShallow(self, node: Tag) -> Tag:
        """
        New element with the same name and a copy of the attributes, no children
        """
        return self.soup.new_tag(node.name, attrs=dict(node.attrs))

    def siblings_moveInto(self, start: PageElement, target: Tag) -> None:
        """Move every sibling following start, in order, to the end of target"""
        while start.next_sibling is not None:
            target.append(start.next_sibling.extract())

    def fragment_replace(self, node: Tag, html: str) -> None:
        """
        Replace node with the top-level nodes of an HTML fragment

        Args:
            node: Element to replace (removed even if html is empty)
            html: Replacement markup

        Raises:
            InvalidTreeError: If the fragment cannot be parsed
        """
        anchor: PageElement = node
        if html:
            fragment = soup_make(html)
            for child in list(fragment.contents):
                anchor.insert_after(child.extract())
                anchor = child
        node.decompose()

    def serialize(self) -> str:
        return self.soup.decode(formatter=FORMATTER)
