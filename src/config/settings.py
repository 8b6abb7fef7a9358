"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use SHORTWEAVE_ prefix (e.g., SHORTWEAVE_ERROR_BEHAVIOR=warn).

Settings can also be loaded from a .env file in the project root.
"""

from enum import Enum
from typing import Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ErrorBehavior(str, Enum):
    """
    What to substitute when a shortcode cannot be processed

    STRIP removes the offending text, WARN substitutes a visible warning
    fragment, LEAVE keeps the original source text and FAIL aborts the parse.
    """
    STRIP = "strip"
    WARN = "warn"
    LEAVE = "leave"
    FAIL = "fail"


DEFAULT_BLOCK_ELEMENTS: Tuple[str, ...] = (
    "address",
    "article",
    "aside",
    "audio",
    "blockquote",
    "canvas",
    "dd",
    "div",
    "dl",
    "fieldset",
    "figcaption",
    "figure",
    "footer",
    "form",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
    "header",
    "hgroup",
    "ol",
    "output",
    "p",
    "pre",
    "section",
    "table",
    "ul",
)


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use SHORTWEAVE_ prefix. Instances are frozen so a
    parser can hold one for its whole lifetime; build variants with
    model_copy(update={...}).

    Examples:
        SHORTWEAVE_ERROR_BEHAVIOR=leave
        SHORTWEAVE_MARKER_CLASS=my-marker
        SHORTWEAVE_DEBUG_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="SHORTWEAVE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
    )

    # Error handling
    error_behavior: ErrorBehavior = Field(
        default=ErrorBehavior.LEAVE,
        description="What to do with shortcodes that cannot be processed (strip, warn, leave, fail)",
    )

    warning_template: str = Field(
        default='<strong class="warning">{message}</strong>',
        description="HTML fragment substituted in warn mode; {message} is the escaped offending text",
    )

    # Marker configuration
    marker_class: str = Field(
        default="shortcode-marker",
        description="CSS class carried by placeholder elements while the tree is being repaired",
    )

    marker_id_attribute: str = Field(
        default="data-tagid",
        description="Attribute linking a placeholder element back to its token",
    )

    # Tree repair configuration
    block_level_elements: Tuple[str, ...] = Field(
        default=DEFAULT_BLOCK_ELEMENTS,
        description="Element names treated as block containers during tree repair",
    )

    split_classes: Tuple[str, ...] = Field(
        default=("center", "leftAlone"),
        description="location/class values that split the enclosing block around the shortcode",
    )

    before_classes: Tuple[str, ...] = Field(
        default=("left", "right"),
        description="location/class values that move the shortcode before its enclosing block",
    )

    # Debug configuration
    debug_mode: bool = Field(
        default=False,
        description="Trace every pipeline stage through the logger",
    )

    def marker_make(self, kind: str, index: int, paired: bool) -> str:
        """
        Generate placeholder markup for a token.

        Args:
            kind: Element name of the placeholder ("span" or "div")
            index: Token sequence index, stored in the id attribute
            paired: True if the token has a closing counterpart that will
                    emit the closing tag itself

        Returns:
            Opening placeholder tag, followed by its closing tag unless paired

        Example:
            >>> settings = AppSettings()
            >>> settings.marker_make("span", 3, paired=False)
            '<span class="shortcode-marker" data-tagid="3"></span>'
        """
        opening = f'<{kind} class="{self.marker_class}" {self.marker_id_attribute}="{index}">'
        if paired:
            return opening
        return f"{opening}</{kind}>"

    def warning_make(self, message: str) -> str:
        """Render the warn-mode fragment for an (already escaped) message"""
        return self.warning_template.format(message=message)


# Singleton instance - import this in your code
appsettings = AppSettings()
