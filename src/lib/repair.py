"""
Block-context repair

WYSIWYG editors wrap everything in paragraphs, so a shortcode producing block
content frequently sits inside a <p> (or inside inline elements inside a <p>).
Before a placeholder is substituted it is moved to a structurally valid home,
chosen from its location/class attribute:

    left, right        -> BEFORE: just before the enclosing block
    center, leftAlone  -> SPLIT:  the enclosing block is split around it
    anything else      -> INLINE: left where it is

AFTER (just after the enclosing block) is supported by marker_relocate() but
no attribute value maps to it.
"""

from typing import Dict, Optional

from bs4 import Tag

from ..config import AppSettings
from ..models.token import Placement
from .tree import HTMLTree
from .log import LOG


class BlockRepair:
    """
    Moves placeholders out of inline context according to their placement

    Args:
        settings: Block element set, marker configuration and placement values
    """

    def __init__(self, settings: AppSettings) -> None:
        self.settings = settings
        self.block_elements = frozenset(name.lower() for name in settings.block_level_elements)

    def placement_classify(self, attributes: Dict[str, str]) -> Placement:
        """
        Derive the placement of a shortcode from its attributes

        The location attribute wins over class; with neither the shortcode is
        inline.

        Example:
            >>> BlockRepair(AppSettings()).placement_classify({"class": "center"})
            <Placement.SPLIT: 'split'>
        """
        value = attributes.get("location") or attributes.get("class")
        if not value:
            return Placement.INLINE
        if value in self.settings.before_classes:
            return Placement.BEFORE
        if value in self.settings.split_classes:
            return Placement.SPLIT
        return Placement.INLINE

    def blockAncestor_find(self, tree: HTMLTree, node: Tag) -> Optional[Tag]:
        """
        Nearest ancestor whose element name is block-level

        Returns:
            The ancestor element, or None if the document root is reached first
        """
        parent = node.parent
        while not tree.is_root(parent):
            if parent.name and parent.name.lower() in self.block_elements:
                return parent
            parent = parent.parent
        return None

    def marker_is(self, node: Tag) -> bool:
        return node.get("class") == self.settings.marker_class and self.settings.marker_id_attribute in node.attrs

    def marker_relocate(self, tree: HTMLTree, node: Tag, block: Tag, placement: Placement) -> None:
        """
        Mutate the tree so the placeholder sits in a compliant location

        For SPLIT, every element between the placeholder and the block
        container is duplicated: content before the placeholder stays in the
        original chain, content after it moves to the duplicate chain. Thus

            <p>A<span>B<marker/>C</span>D</p>

        becomes

            <p>A<span>B</span></p><marker/><p><span>C</span>D</p>

        Args:
            tree: Document being repaired
            node: Placeholder element
            block: Block ancestor found by blockAncestor_find()
            placement: Required placement
        """
        if placement is Placement.INLINE:
            return

        if self.marker_is(block):
            # Nested inside another shortcode; its handler decides the structure
            LOG(f"Placeholder {node.get(self.settings.marker_id_attribute)} is inside another placeholder, not moved", level=3)
            return

        if placement is Placement.BEFORE:
            tree.node_moveBefore(node, block)
        elif placement is Placement.AFTER:
            tree.node_moveAfter(node, block)
        elif placement is Placement.SPLIT:
            at = node
            splitee = node.parent
            while splitee is not block.parent:
                splitter = tree.node_cloneShallow(splitee)
                splitee.insert_after(splitter)
                tree.siblings_moveInto(at, splitter)
                at = splitee
                splitee = splitee.parent
            tree.node_moveAfter(node, block)
