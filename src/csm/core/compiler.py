"""
Public compile operations.

Each call runs to completion (parse -> synthesize -> fragment write ->
bundle rebuild) before returning, and any failure aborts the call with a
CsmError. Nothing is retried.
"""

from __future__ import annotations

import logging

from . import ir
from .context import BuildContext
from .dsl_parser_impl import (
    parse_declarations,
    parse_invocation,
    parse_recipe,
    parse_variable_defs,
)
from .errors import DuplicatePropertyError
from .lexer import Token
from .recipe import DispatchTable
from .recipe import compile_recipe as _compile_table
from .synth import class_name, fragment_css

logger = logging.getLogger(__name__)


def _as_rule_set(decls: ir.RuleSet | str | list[Token], source_name: str) -> ir.RuleSet:
    if isinstance(decls, ir.RuleSet):
        duplicates = decls.duplicate_properties()
        if duplicates:
            raise DuplicatePropertyError(
                f"duplicate rule for property `{duplicates[0]}`",
                property_name=duplicates[0],
            )
        return decls
    return parse_declarations(decls, source_name)


def compile_declarations(
    ctx: BuildContext,
    fragment_id: str,
    decls: ir.RuleSet | str | list[Token],
) -> list[str]:
    """
    Compile a declaration set into atomic classes.

    Side effects: fragment `fragment_id` is overwritten with the set's CSS
    and the bundle is rebuilt.

    Args:
        ctx: Started build context
        fragment_id: Invocation key naming the fragment
        decls: DSL text, tokens, or an already parsed RuleSet

    Returns:
        Class names in declaration order
    """
    ctx.require_started()
    rules = _as_rule_set(decls, f"<{fragment_id}>")

    ctx.store.write(fragment_id, fragment_css(rules))
    ctx.rebuild()

    names = [class_name(rule) for rule in rules]
    logger.debug("Compiled %s -> %s", fragment_id, " ".join(names))
    return names


def compile_invocation(ctx: BuildContext, source: str | list[Token]) -> list[str]:
    """Compile the `id, decl, decl, ...` form."""
    ctx.require_started()
    fragment_id, rules = parse_invocation(source)
    return compile_declarations(ctx, fragment_id, rules)


def compile_variable_defs(
    ctx: BuildContext,
    defs: list[ir.VariableDefinition] | str | list[Token],
) -> None:
    """
    Add variable definitions to the build.

    Side effects: the context's variable store is updated (last write per
    name wins), the reserved variables fragment is overwritten with the
    whole store's `:root` block, and the bundle is rebuilt.
    """
    ctx.require_started()
    if isinstance(defs, str) or (defs and isinstance(defs[0], Token)):
        definitions = parse_variable_defs(defs)  # type: ignore[arg-type]
    else:
        definitions = list(defs)  # type: ignore[arg-type]

    ctx.variables.update(definitions)
    ctx.store.write_variable_block(ctx.variables.to_css())
    ctx.rebuild()


def compile_recipe(
    spec: ir.RecipeSpec | str, ctx: BuildContext | None = None
) -> DispatchTable:
    """
    Compile a recipe into its dispatch table.

    Pure unless `ctx` is given; then every row's CSS is written to the
    fragment named after the recipe and the bundle is rebuilt.
    """
    if isinstance(spec, str):
        spec = parse_recipe(spec)
    table = _compile_table(spec)
    if ctx is not None:
        ctx.require_started()
        ctx.store.write(spec.name, table.css())
        ctx.rebuild()
    return table
