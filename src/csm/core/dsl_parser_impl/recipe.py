"""
Recipe parser mixin for the CSM DSL.

DSL Syntax:

    button,
    base: {
        display: flex,
    },
    variants: {
        visual: {
            solid: { background-color: $danger, color: white },
            outline: { border-width: 1px, border-color: $danger },
        },
        size: {
            sm: { padding: 4, font-size: 12px },
            lg: { padding: 8, font-size: 24px },
        },
    },
    default: { visual: solid, size: sm },
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..errors import DuplicateChoiceError, ParseError
from ..lexer import TokenType

_SECTIONS = ("base", "variants", "default")


class RecipeParserMixin:
    """Parser mixin for recipe declarations."""

    if TYPE_CHECKING:
        advance: Any
        current_token: Any
        error: Any
        expect: Any
        match: Any
        skip_comma: Any
        parse_rule_set: Any

    def parse_recipe(self) -> ir.RecipeSpec:
        """
        Parse a complete recipe.

        Grammar:
            recipe := NAME ',' section (',' section)* ','?
            section := 'base' ':' block
                     | 'variants' ':' '{' variant (',' variant)* '}'
                     | 'default' ':' (IDENT | '{' defaults '}')

        Raises:
            ParseError: On unknown/duplicate sections or a missing base
        """
        name_token = self.expect(TokenType.IDENTIFIER)
        name = name_token.value
        self.skip_comma()

        base: ir.RuleSet | None = None
        variants: list[ir.VariantSpec] = []
        defaults: list[tuple[str, str]] = []
        seen_sections: set[str] = set()

        while not self.match(TokenType.EOF):
            if self.skip_comma():
                continue

            section = self.current_token()
            if section.type != TokenType.IDENTIFIER or section.value not in _SECTIONS:
                raise self.error(
                    f"expected base, variants, or default, got: `{section.value}`",
                    section,
                    error_class=ParseError,
                )
            if section.value in seen_sections:
                raise self.error(
                    f"duplicate `{section.value}` section in recipe `{name}`",
                    section,
                    error_class=ParseError,
                )
            seen_sections.add(section.value)
            self.advance()
            self.expect(TokenType.COLON)

            if section.value == "base":
                base = self.parse_block()
            elif section.value == "variants":
                variants = self.parse_variants()
            else:
                defaults = self.parse_defaults()

        if base is None:
            raise self.error(
                f"recipe `{name}` requires a `base` section",
                name_token,
                error_class=ParseError,
            )

        return ir.RecipeSpec(
            name=name,
            base=base,
            variants=tuple(variants),
            defaults=tuple(defaults),
        )

    def parse_block(self) -> ir.RuleSet:
        """Parse `{ decls }`."""
        self.expect(TokenType.LBRACE)
        rules = self.parse_rule_set(in_block=True)
        self.expect(TokenType.RBRACE)
        return rules

    def parse_variants(self) -> list[ir.VariantSpec]:
        """Parse `{ variant, ... }` in declaration order."""
        self.expect(TokenType.LBRACE)
        variants: list[ir.VariantSpec] = []
        names: set[str] = set()

        while not self.match(TokenType.RBRACE):
            token = self.current_token()
            variant = self.parse_variant()
            if variant.name in names:
                raise self.error(
                    f"duplicate variant `{variant.name}`",
                    token,
                    error_class=DuplicateChoiceError,
                )
            names.add(variant.name)
            variants.append(variant)
            self.skip_comma()

        self.expect(TokenType.RBRACE)
        return variants

    def parse_variant(self) -> ir.VariantSpec:
        """
        Parse one variant.

        Grammar:
            variant := NAME ':' '{' choice (',' choice)* ','? '}'
            choice := NAME ':' '{' decls '}'
        """
        name_token = self.expect(TokenType.IDENTIFIER)
        self.expect(TokenType.COLON)
        self.expect(TokenType.LBRACE)

        choices: list[ir.VariantChoice] = []
        names: set[str] = set()
        while not self.match(TokenType.RBRACE):
            choice_token = self.expect(TokenType.IDENTIFIER)
            if choice_token.value in names:
                raise self.error(
                    f"duplicate choice `{choice_token.value}` in variant `{name_token.value}`",
                    choice_token,
                    error_class=DuplicateChoiceError,
                )
            names.add(choice_token.value)
            self.expect(TokenType.COLON)
            rules = self.parse_block()
            choices.append(ir.VariantChoice(name=choice_token.value, rules=rules))
            self.skip_comma()

        self.expect(TokenType.RBRACE)

        if not choices:
            raise self.error(
                f"variant `{name_token.value}` must declare at least one choice",
                name_token,
                error_class=ParseError,
            )
        return ir.VariantSpec(name=name_token.value, choices=tuple(choices))

    def parse_defaults(self) -> list[tuple[str, str]]:
        """
        Parse the default section.

        `default: sm` and `default: { sm }` record `("default", "sm")`;
        `default: { size: sm, ... }` records one pair per variant.
        """
        if self.match(TokenType.IDENTIFIER):
            return [("default", self.advance().value)]

        self.expect(TokenType.LBRACE)
        defaults: list[tuple[str, str]] = []
        while not self.match(TokenType.RBRACE):
            key = self.expect(TokenType.IDENTIFIER).value
            if self.match(TokenType.COLON):
                self.advance()
                defaults.append((key, self.expect(TokenType.IDENTIFIER).value))
            else:
                defaults.append(("default", key))
            self.skip_comma()
        self.expect(TokenType.RBRACE)
        return defaults
