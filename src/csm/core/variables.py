"""
Variable-definition store.

Definitions accumulate across compile calls within one build. The store is
insertion-ordered so the `:root` block, and with it the bundle, is
reproducible between runs. Redefining a name replaces its value and keeps
its original position.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from . import ir

logger = logging.getLogger(__name__)


class VariableStore:
    """Ordered name -> VariableDefinition mapping."""

    def __init__(self, definitions: Iterable[ir.VariableDefinition] = ()):
        self._definitions: dict[str, ir.VariableDefinition] = {}
        self.update(definitions)

    def define(self, definition: ir.VariableDefinition) -> None:
        previous = self._definitions.get(definition.name)
        if previous is not None and previous.value != definition.value:
            logger.debug(
                "Variable --%s redefined: %s -> %s",
                definition.name,
                previous.value,
                definition.value,
            )
        self._definitions[definition.name] = definition

    def update(self, definitions: Iterable[ir.VariableDefinition]) -> None:
        for definition in definitions:
            self.define(definition)

    def get(self, name: str) -> ir.VariableDefinition | None:
        return self._definitions.get(name)

    def clear(self) -> None:
        self._definitions.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[ir.VariableDefinition]:
        return iter(self._definitions.values())

    def __len__(self) -> int:
        return len(self._definitions)

    def to_css(self) -> str:
        """
        Render all definitions as one `:root` block.

        Returns:
            e.g. `:root { --red: #EE0F0F; --danger: var(--red); }`
        """
        if not self._definitions:
            return ":root {}"
        body = " ".join(definition.to_css() for definition in self)
        return f":root {{ {body} }}"
