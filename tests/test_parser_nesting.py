"""
Nested shortcode tests

Tests shortcodes inside shortcodes, including same-name nesting, legacy
shortcodes mixed with registered ones and editor paragraph wrappers around
nested blocks.
"""

from shortweave.lib.parser import ShortcodeParser


def block_nested(name, attributes, content, context):
    return f"<div>{content}</div>"


def block_second(name, attributes, content, context):
    return f"<div>#2{content}</div>"


def inline_single(name, attributes, content, context):
    return "<span>testinlinesingle</span>"


def legacy(name, attributes, content, context):
    return "<span>legacy</span>"


def parser_make():
    parser = ShortcodeParser()
    parser.register("testblocknested", block_nested, {"hasStartAndEnd": True, "expectedResult": "block"})
    parser.register("testblocksecond", block_second, {"hasStartAndEnd": True, "expectedResult": "block"})
    parser.register("testinlinesingle", inline_single, {"hasStartAndEnd": False, "expectedResult": "inline"})
    parser.register("legacy_shortcode", legacy)
    return parser


class TestBlockShortcodes:
    """Test block shortcodes with and without editor wrappers"""

    def test_no_shortcode(self):
        """Markup without shortcodes is untouched"""
        assert parser_make().parse("<p>test</p>") == "<p>test</p>"

    def test_block_pair(self):
        """A block pair wraps its content"""
        assert parser_make().parse("[testblocknested]test[/testblocknested]") == "<div>test</div>"

    def test_block_pair_in_editor_paragraphs(self):
        """Paragraphs holding only the tags are removed"""
        content = "<p>[testblocknested]</p>\ntest<p>[/testblocknested]</p>"
        assert parser_make().parse(content) == "<div>\ntest</div>"

    def test_block_pair_with_attributes_in_editor_paragraphs(self):
        """Wrapper removal also applies to tags with attributes"""
        content = '<p>[testblocknested title="foo"]</p>\ntest<p>[/testblocknested]</p>'
        assert parser_make().parse(content) == "<div>\ntest</div>"

    def test_inline_single_keeps_paragraph(self):
        """An inline single shortcode stays inside its paragraph"""
        assert parser_make().parse("<p>[testinlinesingle]</p>") == "<p><span>testinlinesingle</span></p>"


class TestNesting:
    """Test nested shortcodes"""

    def test_block_in_block(self):
        """The inner shortcode output becomes part of the outer content"""
        content = "[testblocknested]before[testblocksecond]foo[/testblocksecond]after[/testblocknested]"
        assert parser_make().parse(content) == "<div>before<div>#2foo</div>after</div>"

    def test_inline_and_block_in_block(self):
        """Mixed nested children are all substituted first"""
        content = (
            "[testblocknested]before[testinlinesingle]after1"
            "[testblocksecond]foo[/testblocksecond]after2[/testblocknested]"
        )
        assert parser_make().parse(content) == (
            "<div>before<span>testinlinesingle</span>after1<div>#2foo</div>after2</div>"
        )

    def test_legacy_in_block(self):
        """Legacy shortcodes nest like registered single ones"""
        content = (
            "[testblocknested]before[legacy_shortcode]after1"
            "[testblocksecond]foo[/testblocksecond]after2[/testblocknested]"
        )
        assert parser_make().parse(content) == (
            "<div>before<span>legacy</span>after1<div>#2foo</div>after2</div>"
        )

    def test_same_name_nesting(self):
        """A shortcode nested in one of the same name"""
        content = "[testblocknested]a[testblocknested]b[/testblocknested]c[/testblocknested]"
        assert parser_make().parse(content) == "<div>a<div>b</div>c</div>"

    def test_child_content_reaches_parent(self):
        """The parent handler sees the child's output, not its source"""
        seen = []

        def record(name, attributes, content, context):
            seen.append((name, content))
            return f"<{name}>{content}</{name}>"

        parser = ShortcodeParser()
        parser.register("a", record, {"hasStartAndEnd": True, "expectedResult": "inline"})
        parser.register("b", record, {"hasStartAndEnd": True, "expectedResult": "inline"})

        assert parser.parse("[a]before[b]x[/b]after[/a]") == "<a>before<b>x</b>after</a>"
        assert seen == [("b", "x"), ("a", "before<b>x</b>after")]

    def test_legacy_pair(self):
        """A legacy shortcode immediately followed by its close is a pair"""
        parser = ShortcodeParser()
        parser.register("up", lambda name, attrs, content, ctx: content.upper())
        assert parser.parse("<p>[up]shout[/up]</p>") == "<p>SHOUT</p>"

    def test_siblings_in_block(self):
        """Sibling children keep their order"""
        content = (
            "[testblocknested][testinlinesingle][testblocksecond]x[/testblocksecond]"
            "[testinlinesingle][/testblocknested]"
        )
        assert parser_make().parse(content) == (
            "<div><span>testinlinesingle</span><div>#2x</div><span>testinlinesingle</span></div>"
        )
