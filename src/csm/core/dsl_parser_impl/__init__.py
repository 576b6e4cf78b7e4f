"""
CSM DSL Parser Package.

The parser is built from mixins, one per construct:

- RuleParserMixin: flat declaration sets (`display: flex, width: 5rem`)
- VariableParserMixin: `:root` variable definitions (`red: #EE0F0F, danger: $red`)
- RecipeParserMixin: recipes with base, variants and defaults

Every entry point accepts either DSL text or an already tokenized list and
fails fast: any error aborts the whole declaration set.

Usage:
    from csm.core.dsl_parser_impl import parse_declarations

    rules = parse_declarations("display: flex, width: 5rem")
"""

from __future__ import annotations

from .. import ir
from ..lexer import DEFAULT_SOURCE, Token, TokenType, tokenize
from .base import BaseParser
from .recipe import RecipeParserMixin
from .rules import RuleParserMixin
from .variables import VariableParserMixin


class Parser(
    BaseParser,
    RuleParserMixin,
    VariableParserMixin,
    RecipeParserMixin,
):
    """Complete CSM DSL parser."""

    def expect_end(self) -> None:
        """Require that all tokens were consumed."""
        self.expect(TokenType.EOF)


def _make_parser(source: str | list[Token], source_name: str) -> Parser:
    if isinstance(source, str):
        return Parser(tokenize(source, source_name), source_name, source)
    return Parser(list(source), source_name)


def parse_declarations(source: str | list[Token], source_name: str = DEFAULT_SOURCE) -> ir.RuleSet:
    """
    Parse a declaration set.

    Raises:
        ParseError: UnexpectedTokenError, DuplicatePropertyError, MissingColonError,
            MissingVariableIdentifierError or InvalidNumericLiteralError
    """
    parser = _make_parser(source, source_name)
    rules = parser.parse_rule_set()
    parser.expect_end()
    return rules


def parse_invocation(
    source: str | list[Token], source_name: str = DEFAULT_SOURCE
) -> tuple[str, ir.RuleSet]:
    """
    Parse the `id, decl, decl, ...` invocation form.

    Returns:
        Tuple of (fragment_id, rules)
    """
    parser = _make_parser(source, source_name)
    fragment_id = parser.expect(TokenType.IDENTIFIER).value
    parser.expect(TokenType.COMMA)
    rules = parser.parse_rule_set()
    parser.expect_end()
    return fragment_id, rules


def parse_variable_defs(
    source: str | list[Token], source_name: str = "<variables>"
) -> list[ir.VariableDefinition]:
    """Parse variable definitions in source order."""
    parser = _make_parser(source, source_name)
    definitions = parser.parse_variable_defs()
    parser.expect_end()
    return definitions


def parse_recipe(source: str | list[Token], source_name: str = "<recipe>") -> ir.RecipeSpec:
    """Parse a recipe declaration."""
    parser = _make_parser(source, source_name)
    recipe = parser.parse_recipe()
    parser.expect_end()
    return recipe


__all__ = [
    "Parser",
    "parse_declarations",
    "parse_invocation",
    "parse_recipe",
    "parse_variable_defs",
]
