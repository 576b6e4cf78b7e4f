"""
Recipe compiler.

Expands a recipe's variants into the full cartesian product of choices:

    variants = [visual=solid,outline  size=sm,lg]
    rows = [
        (visual=solid,   size=sm),
        (visual=solid,   size=lg),
        (visual=outline, size=sm),
        (visual=outline, size=lg),
    ]

Each row merges `base` with the chosen RuleSets by appending, so a property
declared by both base and a choice appears twice in the row's CSS, base
first. The cascade makes the later declaration win.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from . import ir
from .errors import SelectorArityError, UnknownVariantChoiceError

logger = logging.getLogger(__name__)

Row = list[tuple[str, ir.RuleSet]]


def variant_rows(spec: ir.RecipeSpec) -> list[Row]:
    """
    Expand variants into rows of `(choice_name, rules)`, one pair per variant.

    Rows and choices follow declaration order.
    """
    rows: list[Row] = [[]]
    for variant in spec.variants:
        rows = [
            [*row, (choice.name, choice.rules)]
            for row in rows
            for choice in variant.choices
        ]
    return rows


def recipe_class_name(recipe_name: str, selector: tuple[str, ...]) -> str:
    return f"{recipe_name}__{'_'.join(selector)}"


def compile_row(spec: ir.RecipeSpec, row: Row) -> ir.DispatchEntry:
    """Merge base and chosen rules for one row and render its class."""
    selector = tuple(name for name, _ in row)
    merged = spec.base
    for _, rules in row:
        merged = merged.merge(rules)

    class_name = recipe_class_name(spec.name, selector)
    body = "\n".join(rule.to_css() for rule in merged)
    css = f".{class_name} {{\n{body}\n}}"
    return ir.DispatchEntry(selector=selector, class_name=class_name, css=css)


class DispatchTable(Mapping[tuple[str, ...], ir.DispatchEntry]):
    """
    Read-only selector -> DispatchEntry mapping for a compiled recipe.

    Iteration follows row order. Lookups never fall back to defaults: a
    selector must name one declared choice for every variant.
    """

    def __init__(self, spec: ir.RecipeSpec, entries: list[ir.DispatchEntry]):
        self.spec = spec
        self._entries: dict[tuple[str, ...], ir.DispatchEntry] = {
            entry.selector: entry for entry in entries
        }

    @property
    def name(self) -> str:
        return self.spec.name

    def __getitem__(self, selector: tuple[str, ...]) -> ir.DispatchEntry:
        return self.select(*selector)

    def __iter__(self) -> Iterator[tuple[str, ...]]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, selector: object) -> bool:
        return selector in self._entries

    def get(self, selector, default=None):  # type: ignore[override]
        return self._entries.get(selector, default)

    def select(self, *choices: str) -> ir.DispatchEntry:
        """
        Look up the entry for one choice per variant, in variant order.

        Raises:
            SelectorArityError: Wrong number of choices (including an omitted variant)
            UnknownVariantChoiceError: A choice its variant does not declare
        """
        selector = tuple(choices)
        variants = self.spec.variants
        if len(selector) != len(variants):
            raise SelectorArityError(
                f"recipe `{self.name}` expects {len(variants)} choice(s) "
                f"({', '.join(self.spec.variant_names())}), got {len(selector)}: {selector!r}",
                selector,
            )

        for variant, choice in zip(variants, selector, strict=True):
            if variant.get_choice(choice) is None:
                raise UnknownVariantChoiceError(
                    f"recipe `{self.name}` has no choice `{choice}` for variant "
                    f"`{variant.name}` (expected one of: {', '.join(variant.choice_names())})",
                    selector,
                )

        return self._entries[selector]

    def entries(self) -> list[ir.DispatchEntry]:
        return list(self._entries.values())

    def css(self) -> str:
        """CSS of every row, in row order."""
        return "\n".join(entry.css for entry in self._entries.values())


def compile_recipe(spec: ir.RecipeSpec) -> DispatchTable:
    """Compile a recipe into its dispatch table."""
    entries = [compile_row(spec, row) for row in variant_rows(spec)]
    logger.debug("Compiled recipe %s into %d dispatch entries", spec.name, len(entries))
    return DispatchTable(spec, entries)
