"""
Declaration parser mixin for the CSM DSL.

Parses flat property/value declaration sets.

DSL Syntax:

    display: flex,
    align-items: center,
    flex: 0 0 auto,
    width: 5rem,
    background-color: $danger,
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from .. import ir
from ..errors import (
    DuplicatePropertyError,
    InvalidNumericLiteralError,
    MissingColonError,
    MissingVariableIdentifierError,
)
from ..lexer import Token, TokenType

_NUMBER_RE = re.compile(r"(?P<digits>[0-9]+)(?P<unit>[A-Za-z]+)?")

# 0x10, 0o17, 0b101
_RADIX_PREFIX_RE = re.compile(r"0[xob]", re.IGNORECASE)

# Tokens that close a value list
_VALUE_TERMINATORS = (TokenType.COMMA, TokenType.RBRACE, TokenType.EOF)


class RuleParserMixin:
    """Parser mixin for declaration sets."""

    if TYPE_CHECKING:
        advance: Any
        current_token: Any
        error: Any
        expect: Any
        match: Any
        skip_comma: Any

    def parse_rule_set(self, *, in_block: bool = False) -> ir.RuleSet:
        """
        Parse declarations until end of input (or the closing `}` of a block).

        Grammar:
            decls := decl (',' decl)* ','?

        Raises:
            DuplicatePropertyError: If a property is declared twice
        """
        rules: list[ir.Rule] = []
        seen: set[str] = set()

        while not self.match(TokenType.EOF) and not (in_block and self.match(TokenType.RBRACE)):
            start = self.current_token()
            rule = self.parse_rule()
            if rule.prop in seen:
                raise self.error(
                    f"duplicate rule for property `{rule.prop}`",
                    start,
                    error_class=DuplicatePropertyError,
                    property_name=rule.prop,
                )
            seen.add(rule.prop)
            rules.append(rule)

        return ir.RuleSet(rules=tuple(rules))

    def parse_property_name(self) -> str:
        """
        Parse a run of identifiers and hyphens terminated by `:`.

        The colon itself is consumed.
        """
        name = ""
        while not self.match(TokenType.COLON):
            token = self.current_token()
            if token.type == TokenType.IDENTIFIER:
                name += self.advance().value
            elif token.type == TokenType.MINUS:
                self.advance()
                name += "-"
            elif token.type in _VALUE_TERMINATORS and name:
                raise self.error(
                    f"expected `:` after property `{name}`",
                    token,
                    error_class=MissingColonError,
                    property_name=name,
                )
            else:
                raise self.error(
                    f"error parsing property name, expected identifier or `-`, got "
                    f"{_token_text(token)}",
                    token,
                    property_name=name or None,
                )

        if not name:
            raise self.error("expected a property name before `:`")

        self.expect(TokenType.COLON, property_name=name)
        return name

    def parse_rule(self) -> ir.Rule:
        """
        Parse one declaration and its trailing comma.

        Grammar:
            decl := property ':' value_list
            value_list := '$' IDENT | (IDENT | NUMBER)*
        """
        prop = self.parse_property_name()

        if self.match(TokenType.DOLLAR):
            reference = self.parse_variable_reference(prop)
            if not self.match(*_VALUE_TERMINATORS):
                raise self.error(
                    f"a `$` reference must be the only value of `{prop}`, got "
                    f"{_token_text(self.current_token())}",
                    property_name=prop,
                )
            values: list[ir.ValueAtom] = [reference]
        else:
            values = []
            while not self.match(*_VALUE_TERMINATORS):
                token = self.current_token()
                if token.type == TokenType.IDENTIFIER:
                    values.append(ir.Identifier(text=self.advance().value))
                elif token.type == TokenType.NUMBER:
                    values.append(self.parse_numeric_literal(prop))
                else:
                    raise self.error(
                        f"error parsing value for prop: {prop}, got {_token_text(token)}",
                        token,
                        property_name=prop,
                    )

        self.skip_comma()
        return ir.Rule(prop=prop, values=tuple(values))

    def parse_variable_reference(self, prop: str) -> ir.VariableReference:
        """Parse `$ident`."""
        self.expect(TokenType.DOLLAR, property_name=prop)
        token = self.current_token()
        if token.type != TokenType.IDENTIFIER:
            raise self.error(
                f"expected identifier after `$`, found {_token_text(token)}",
                token,
                error_class=MissingVariableIdentifierError,
                property_name=prop,
            )
        return ir.VariableReference(name=self.advance().value)

    def parse_numeric_literal(self, prop: str) -> ir.NumericLiteral:
        """Parse an unsigned integer literal with optional unit suffix."""
        token = self.expect(TokenType.NUMBER, property_name=prop)
        if _RADIX_PREFIX_RE.match(token.value):
            raise self.error(
                f"invalid numeric literal `{token.value}` for prop: {prop} "
                "(only base-10 integers are supported)",
                token,
                error_class=InvalidNumericLiteralError,
                property_name=prop,
            )

        # The unit becomes part of a class name, so it is letters only: no `%`, no `_`
        match = _NUMBER_RE.fullmatch(token.value)
        if match is None:
            raise self.error(
                f"invalid numeric literal `{token.value}` for prop: {prop} "
                "(expected an unsigned base-10 integer with an optional alphabetic unit)",
                token,
                error_class=InvalidNumericLiteralError,
                property_name=prop,
            )

        magnitude = int(match.group("digits"))
        if magnitude > ir.U32_MAX:
            raise self.error(
                f"numeric literal `{token.value}` for prop: {prop} is out of range",
                token,
                error_class=InvalidNumericLiteralError,
                property_name=prop,
            )

        return ir.NumericLiteral(magnitude=magnitude, unit=match.group("unit") or "")


def _token_text(token: Token) -> str:
    if token.type == TokenType.EOF:
        return "end of input"
    return f"`{token.value}`"
