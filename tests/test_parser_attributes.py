"""
Attribute value tests

Tests shortcodes written inside HTML attribute values, which are substituted
as plain strings with no placeholders or tree repair.
"""

import pytest

from shortweave.config import AppSettings, ErrorBehavior
from shortweave.lib.errors import ShortcodeError
from shortweave.lib.parser import ShortcodeParser
from shortweave.models.shortcode import UNKNOWN


def link(name, attributes, content, context):
    return f"/page/{attributes.get('id', '')}"


def upper(name, attributes, content, context):
    return content.upper()


def star(name, attributes, content, context):
    return "<i>*</i>"


def parser_make(behavior=ErrorBehavior.LEAVE):
    parser = ShortcodeParser(settings=AppSettings(error_behavior=behavior))
    parser.register("link", link, {"expectedResult": "text"})
    parser.register("up", upper, {"hasStartAndEnd": True, "expectedResult": "text"})
    parser.register("icon", star, {"expectedResult": "inline"})
    parser.register("maybe", lambda *args: UNKNOWN, {"expectedResult": "text"})
    return parser


class TestAttributeValues:
    """Test substitution inside attribute values"""

    def test_single(self):
        """A single shortcode is replaced in the value"""
        assert parser_make().parse('<a href="[link id=3]">x</a>') == '<a href="/page/3">x</a>'

    def test_text_around_shortcode(self):
        """Surrounding text in the value is kept"""
        out = parser_make().parse('<a title="go to [link id=3] now">x</a>')
        assert out == '<a title="go to /page/3 now">x</a>'

    def test_nested_pairs(self):
        """Pairs nest inside a value, children first"""
        out = parser_make().parse('<img alt="[up]a [up]b[/up][/up]">')
        assert out == '<img alt="A B">'

    def test_several_attributes(self):
        """Every attribute of every element is visited"""
        out = parser_make().parse('<a href="[link id=1]" title="[link id=2]">x</a><img src="[link id=3]">')
        assert out == '<a href="/page/1" title="/page/2">x</a><img src="/page/3">'

    def test_body_and_attribute(self):
        """Body and attribute shortcodes in the same content"""
        out = parser_make().parse('<p title="[link id=1]">[icon]</p>')
        assert out == '<p title="/page/1"><i>*</i></p>'

    def test_escaped(self):
        """Escapes are unwrapped in values too"""
        assert parser_make().parse('<a title="[[link]]">x</a>') == '<a title="[link]">x</a>'

    def test_context(self):
        """Handlers learn which element and attribute they are in"""
        seen = []

        def record(name, attributes, content, context):
            seen.append(context)
            return "v"

        parser = ShortcodeParser()
        parser.register("rec", record, {"expectedResult": "text"})
        parser.parse('<a href="[rec]">x</a>')

        assert seen[0].attribute == "href"
        assert seen[0].element.name == "a"
        assert not seen[0].html_allowed
        assert seen[0].parser is parser


class TestAttributeErrors:
    """Test the error policy inside attribute values"""

    def test_unknown_leave(self):
        """Leave keeps the value"""
        content = '<a title="[mystery]">x</a>'
        assert parser_make().parse(content) == content

    def test_unknown_warn_keeps_text(self):
        """No warning markup can go into a value"""
        content = '<a title="[mystery]">x</a>'
        assert parser_make(ErrorBehavior.WARN).parse(content) == content

    def test_unknown_strip(self):
        """Strip empties the shortcode text"""
        assert parser_make(ErrorBehavior.STRIP).parse('<a title="[mystery]">x</a>') == '<a title="">x</a>'

    def test_handler_unknown_warn(self):
        """A handler reporting unknown under warn keeps the tag text"""
        content = '<a title="[maybe]">x</a>'
        assert parser_make(ErrorBehavior.WARN).parse(content) == content

    def test_unclosed_strip(self):
        """Structural errors are resolved in values too"""
        assert parser_make(ErrorBehavior.STRIP).parse('<a title="a[up]b">x</a>') == '<a title="ab">x</a>'

    def test_fail(self):
        """Fail raises from an attribute value"""
        with pytest.raises(ShortcodeError):
            parser_make(ErrorBehavior.FAIL).parse('<a title="[mystery]">x</a>')
