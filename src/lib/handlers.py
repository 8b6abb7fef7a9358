"""
Reusable shortcode handlers and the registration manifest

Handler factories cover the common cases (wrap the content in an element,
fill a template) so shortcodes can be declared in a YAML manifest without
writing Python. Custom handlers are referenced as "package.module:callable".

Manifest format:

    shortcodes:
      note:
        wrap: aside
        class: note
        hasStartAndEnd: true
        expectedResult: block
      year:
        template: "2026"
      ref:
        template: '<a href="/p/{{ id }}">{{ content }}</a>'
        hasStartAndEnd: true
        expectedResult: inline
      gallery:
        handler: mysite.shortcodes:gallery
        expectedResult: block
"""

import html
import importlib
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from jinja2 import Environment, TemplateSyntaxError
from markupsafe import Markup
from pydantic import ValidationError

from ..models.shortcode import Handler, ShortcodeContext, ShortcodeOptions
from .errors import ManifestError
from .registry import ShortcodeRegistry
from .log import LOG


OPTION_KEYS = {"hasStartAndEnd", "has_start_and_end", "expectedResult", "expected_result"}


def element_wrap(tag: str, css_class: Optional[str] = None) -> Handler:
    """
    Create a handler wrapping the shortcode content in an element

    Shortcode attributes become HTML attributes of the element (a class given
    here comes first).

    Args:
        tag: Element name (e.g., "aside", "strong")
        css_class: Optional class attribute for the element

    Returns:
        Handler producing <tag ...>content</tag>

    Example:
        [note id="n1"]Hi[/note] with element_wrap("aside", "note")
        -> <aside class="note" id="n1">Hi</aside>
    """
    def handler(name: str, attributes: Dict[str, str], content: str, context: ShortcodeContext) -> str:
        attrs = {}
        if css_class:
            attrs["class"] = css_class
        for key, value in attributes.items():
            attrs.setdefault(key, value)
        rendered = "".join(f' {key}="{html.escape(value)}"' for key, value in attrs.items())
        return f"<{tag}{rendered}>{content}</{tag}>"

    return handler


TEMPLATE_ENVIRONMENT = Environment(autoescape=True)


def template_render(template: str) -> Handler:
    """
    Create a handler rendering a Jinja2 template

    Available variables are the shortcode attributes plus name and content.
    Attribute values are escaped; content is already HTML and is inserted as
    is. Missing variables render as an empty string.

    Raises:
        TemplateSyntaxError: If the template cannot be compiled

    Example:
        template_render('<a href="/p/{{ id }}">{{ content }}</a>')
    """
    compiled = TEMPLATE_ENVIRONMENT.from_string(template)

    def handler(name: str, attributes: Dict[str, str], content: str, context: ShortcodeContext) -> str:
        return compiled.render({**attributes, "name": name, "content": Markup(content)})

    return handler


def handler_import(reference: str) -> Handler:
    """
    Import a handler from a "package.module:callable" reference

    Raises:
        ManifestError: If the reference is malformed, cannot be imported or
                       does not name a callable
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise ManifestError(f"Handler reference '{reference}' must look like 'package.module:callable'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ManifestError(f"Cannot import handler module '{module_name}': {e}") from e

    handler = getattr(module, attribute, None)
    if not callable(handler):
        raise ManifestError(f"'{reference}' is not a callable handler")
    return handler


def entry_handlerMake(name: str, spec: Mapping[str, Any]) -> Handler:
    """Build the handler for one manifest entry"""
    if "handler" in spec:
        return handler_import(str(spec["handler"]))
    if "wrap" in spec:
        return element_wrap(str(spec["wrap"]), spec.get("class"))
    if "template" in spec:
        try:
            return template_render(str(spec["template"]))
        except TemplateSyntaxError as e:
            raise ManifestError(f"Invalid template for shortcode '{name}': {e}") from e
    raise ManifestError(f"Shortcode '{name}' needs one of handler, wrap or template")


def manifest_load(source: Union[str, Path], registry: ShortcodeRegistry) -> int:
    """
    Register every shortcode declared in a YAML manifest

    Entries without hasStartAndEnd/expectedResult are registered without
    metadata (legacy shortcodes).

    Args:
        source: Path to the manifest file
        registry: Registry to add the shortcodes to

    Returns:
        Number of shortcodes registered

    Raises:
        ManifestError: If the file cannot be read or an entry is invalid
    """
    path = Path(source)
    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML in manifest {path}: {e}") from e

    if document is None:
        document = {}
    if not isinstance(document, dict) or not isinstance(document.get("shortcodes", {}), dict):
        raise ManifestError(f"Manifest {path} must contain a 'shortcodes' mapping")

    shortcodes = document.get("shortcodes") or {}
    for name, spec in shortcodes.items():
        if not isinstance(spec, dict):
            raise ManifestError(f"Shortcode '{name}' must be a mapping")

        handler = entry_handlerMake(name, spec)

        options: Optional[ShortcodeOptions] = None
        if OPTION_KEYS & spec.keys():
            try:
                options = ShortcodeOptions.model_validate(spec)
            except ValidationError as e:
                raise ManifestError(f"Invalid options for shortcode '{name}': {e}") from e

        registry.register(str(name), handler, options)

    LOG(f"Loaded {len(shortcodes)} shortcodes from {path}", level=2)
    return len(shortcodes)
