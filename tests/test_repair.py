"""
Block-context repair tests

Tests placement classification, block ancestor lookup and the BEFORE, AFTER
and SPLIT relocations on a parsed tree.
"""

import pytest

from shortweave.config import AppSettings
from shortweave.lib.repair import BlockRepair
from shortweave.lib.tree import HTMLTree
from shortweave.models.token import Placement


MARKER = '<div class="shortcode-marker" data-tagid="0"></div>'


def relocate(markup, placement):
    tree = HTMLTree(markup)
    repair = BlockRepair(AppSettings())
    node = tree.marker_find("div", "shortcode-marker", "data-tagid", 0)
    block = repair.blockAncestor_find(tree, node)
    repair.marker_relocate(tree, node, block, placement)
    return tree.serialize()


class TestPlacementClassify:
    """Test location/class to placement mapping"""

    @pytest.mark.parametrize(
        "attributes, expected",
        [
            ({}, Placement.INLINE),
            ({"location": "left"}, Placement.BEFORE),
            ({"class": "right"}, Placement.BEFORE),
            ({"class": "center"}, Placement.SPLIT),
            ({"location": "leftAlone"}, Placement.SPLIT),
            ({"class": "wide"}, Placement.INLINE),
            ({"location": "center", "class": "left"}, Placement.SPLIT),
        ],
    )
    def test_classify(self, attributes, expected):
        """Location wins over class, unknown values are inline"""
        assert BlockRepair(AppSettings()).placement_classify(attributes) is expected

    def test_custom_values(self):
        """Placement values come from settings"""
        repair = BlockRepair(AppSettings(split_classes=("full",)))

        assert repair.placement_classify({"class": "full"}) is Placement.SPLIT
        assert repair.placement_classify({"class": "center"}) is Placement.INLINE


class TestBlockAncestor:
    """Test nearest block ancestor lookup"""

    def test_through_inline_elements(self):
        """Inline ancestors are skipped"""
        tree = HTMLTree(f"<p>A<em><b>{MARKER}</b></em></p>")
        node = tree.marker_find("div", "shortcode-marker", "data-tagid", 0)

        block = BlockRepair(AppSettings()).blockAncestor_find(tree, node)
        assert block.name == "p"

    def test_root_has_no_block(self):
        """A top-level placeholder has no block ancestor"""
        tree = HTMLTree(f"text{MARKER}")
        node = tree.marker_find("div", "shortcode-marker", "data-tagid", 0)

        assert BlockRepair(AppSettings()).blockAncestor_find(tree, node) is None

    def test_inline_only_ancestors(self):
        """Inline ancestors up to the root give no block"""
        tree = HTMLTree(f"<span><em>{MARKER}</em></span>")
        node = tree.marker_find("div", "shortcode-marker", "data-tagid", 0)

        assert BlockRepair(AppSettings()).blockAncestor_find(tree, node) is None


class TestRelocation:
    """Test tree mutations per placement"""

    def test_inline_does_nothing(self):
        """Inline placement leaves the placeholder in place"""
        assert relocate(f"<p>A{MARKER}B</p>", Placement.INLINE) == f"<p>A{MARKER}B</p>"

    def test_before(self):
        """Before moves the placeholder in front of its block"""
        assert relocate(f"<p>A{MARKER}B</p>", Placement.BEFORE) == f"{MARKER}<p>AB</p>"

    def test_after(self):
        """After moves the placeholder behind its block"""
        assert relocate(f"<p>A{MARKER}B</p>", Placement.AFTER) == f"<p>AB</p>{MARKER}"

    def test_split_through_inline(self):
        """Split duplicates every element between placeholder and block"""
        assert relocate(f"<p>A<span>B{MARKER}C</span>D</p>", Placement.SPLIT) == (
            f"<p>A<span>B</span></p>{MARKER}<p><span>C</span>D</p>"
        )

    def test_split_copies_attributes(self):
        """Duplicated elements keep their attributes"""
        assert relocate(f'<p class="lead">A{MARKER}B</p>', Placement.SPLIT) == (
            f'<p class="lead">A</p>{MARKER}<p class="lead">B</p>'
        )

    def test_split_at_end_keeps_empty_duplicate(self):
        """An empty duplicate is kept"""
        assert relocate(f"<p>A{MARKER}</p>", Placement.SPLIT) == f"<p>A</p>{MARKER}<p></p>"

    def test_split_list(self):
        """Non-block ancestors such as li are split too"""
        assert relocate(f"<ul><li>x {MARKER} y</li></ul>", Placement.SPLIT) == (
            f"<ul><li>x </li></ul>{MARKER}<ul><li> y</li></ul>"
        )

    def test_surrounding_content_untouched(self):
        """Siblings of the block are not moved"""
        assert relocate(f"<h1>T</h1><p>A{MARKER}B</p><p>Z</p>", Placement.SPLIT) == (
            f"<h1>T</h1><p>A</p>{MARKER}<p>B</p><p>Z</p>"
        )

    def test_inside_another_placeholder(self):
        """A placeholder inside a block placeholder is not moved"""
        markup = (
            '<div class="shortcode-marker" data-tagid="1">x'
            f"{MARKER}y</div>"
        )
        assert relocate(markup, Placement.SPLIT) == markup
