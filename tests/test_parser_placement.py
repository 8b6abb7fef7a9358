"""
Block placement tests

Tests block-level shortcodes written inside paragraphs: moved before the
paragraph, split out of it, or left inline.
"""

from shortweave.lib.parser import ShortcodeParser


def figure(name, attributes, content, context):
    return "<figure>F</figure>"


def parser_make():
    parser = ShortcodeParser()
    parser.register("figure", figure, {"expectedResult": "block"})
    parser.register("img", figure, {"expectedResult": "block"})
    return parser


class TestPlacement:
    """Test relocation through the full parse"""

    def test_split_through_inline(self):
        """Centered shortcodes split the paragraph and its inline chain"""
        content = '<p>A<em>B[img class="center"]C</em>D</p>'
        assert parser_make().parse(content) == "<p>A<em>B</em></p><figure>F</figure><p><em>C</em>D</p>"

    def test_split_left_alone(self):
        """leftAlone splits too"""
        content = '<p>before [figure location="leftAlone"] after</p>'
        assert parser_make().parse(content) == "<p>before </p><figure>F</figure><p> after</p>"

    def test_before(self):
        """Left and right shortcodes move in front of the paragraph"""
        content = '<p>Text [figure class="left"] more</p>'
        assert parser_make().parse(content) == "<figure>F</figure><p>Text  more</p>"

    def test_location_overrides_class(self):
        """location wins over class"""
        content = '<p>Text [figure location="right" class="center"] more</p>'
        assert parser_make().parse(content) == "<figure>F</figure><p>Text  more</p>"

    def test_no_placement_stays_inline(self):
        """Without location or class nothing moves"""
        assert parser_make().parse("<p>a[figure]b</p>") == "<p>a<figure>F</figure>b</p>"

    def test_split_list_item(self):
        """Lists are split around the shortcode"""
        content = '<ul><li>x [figure class="center"] y</li></ul>'
        assert parser_make().parse(content) == "<ul><li>x </li></ul><figure>F</figure><ul><li> y</li></ul>"

    def test_several_blocks_in_one_paragraph(self):
        """Each placeholder is relocated in turn"""
        content = '<p>a[figure class="left"]b[figure class="right"]c</p>'
        assert parser_make().parse(content) == "<figure>F</figure><figure>F</figure><p>abc</p>"

    def test_surrounding_markup_preserved(self):
        """Attributes of the split block survive on both halves"""
        content = '<h2 id="t">Title</h2><p class="lead">x[figure class="center"]y</p>'
        assert parser_make().parse(content) == (
            '<h2 id="t">Title</h2><p class="lead">x</p><figure>F</figure><p class="lead">y</p>'
        )


class TestTopLevelPlacement:
    """Test block placements with no enclosing element"""

    def test_wrapped_alone_in_paragraph(self):
        """A lone shortcode in its own paragraph replaces the paragraph"""
        assert parser_make().parse('<p>[figure class="center"]</p>') == "<figure>F</figure>"

    def test_document_root(self):
        """Top-level shortcodes are substituted where they stand"""
        assert parser_make().parse('x[figure class="left"]y') == "x<figure>F</figure>y"

    def test_handler_sees_block(self):
        """Handlers receive the block ancestor found for the placeholder"""
        seen = []

        def record(name, attributes, content, context):
            seen.append(context.block)
            return "<i>r</i>"

        parser = parser_make()
        parser.register("rec", record, {"expectedResult": "inline"})
        parser.parse("<div><p>a[rec]b</p></div>[rec]")

        assert seen[0].name == "p"
        assert seen[1] is None
