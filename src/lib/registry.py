"""
Shortcode registration table

Maps shortcode names to their handlers and optional metadata. The table is
process-lifetime state: it is filled during application start-up and only
read while content is being parsed.
"""

import threading
from typing import Any, Dict, Mapping, Optional, Union

from ..models.shortcode import ShortcodeEntry, ShortcodeOptions, Handler
from .log import LOG


class ShortcodeRegistry:
    """
    Registry of shortcode handlers and metadata

    Registration replaces the entry mapping copy-on-write under a lock, so a
    parse running in another thread always reads a complete snapshot.

    Example:
        >>> registry = ShortcodeRegistry()
        >>> _ = registry.register("year", lambda name, attrs, content, ctx: "2026")
        >>> registry.registered("year")
        True
    """

    def __init__(self) -> None:
        """Initialize an empty registry"""
        self.entries: Dict[str, ShortcodeEntry] = {}
        self._lock = threading.Lock()

    def register(
        self,
        name: str,
        handler: Handler,
        options: Union[ShortcodeOptions, Mapping[str, Any], None] = None,
    ) -> "ShortcodeRegistry":
        """
        Register a shortcode handler

        A handler that is not callable is ignored. Registering a name again
        replaces the previous handler and metadata.

        Args:
            name: Shortcode name
            handler: Callable (name, attributes, content, context) -> str | HandlerResult
            options: Metadata (ShortcodeOptions or a mapping such as
                     {"hasStartAndEnd": True, "expectedResult": "block"}).
                     None registers a legacy shortcode without metadata.

        Returns:
            The registry, for chaining
        """
        if not callable(handler):
            LOG(f"Ignoring registration of '{name}': handler is not callable", level=2)
            return self

        if options is not None and not isinstance(options, ShortcodeOptions):
            options = ShortcodeOptions.model_validate(dict(options))

        entry = ShortcodeEntry(name=name, handler=handler, options=options)
        with self._lock:
            self.entries = {**self.entries, name: entry}
        LOG(f"Registered shortcode '{name}' ({'legacy' if options is None else options.expected_result.value})", level=3)
        return self

    def unregister(self, name: str) -> None:
        """Remove a shortcode; unknown names are ignored"""
        with self._lock:
            if name in self.entries:
                entries = dict(self.entries)
                del entries[name]
                self.entries = entries

    def get(self, name: str) -> Optional[ShortcodeEntry]:
        """Get the entry for a name, or None if not registered"""
        return self.entries.get(name)

    def registered(self, name: str) -> bool:
        """True if a handler exists for the name (with or without metadata)"""
        return name in self.entries

    def snapshot(self) -> Dict[str, ShortcodeEntry]:
        """The current entry mapping; never mutated after it is published"""
        return self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, name: object) -> bool:
        return name in self.entries
