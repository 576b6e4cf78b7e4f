"""
Variable-definition parser mixin for the CSM DSL.

DSL Syntax:

    // tokens
    red: #EE0F0F,

    // semantic tokens
    danger: $red,
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .. import ir
from ..lexer import TokenType


class VariableParserMixin:
    """Parser mixin for `:root` custom property definitions."""

    if TYPE_CHECKING:
        advance: Any
        current_token: Any
        error: Any
        match: Any
        skip_comma: Any
        parse_property_name: Any
        parse_variable_reference: Any

    def parse_variable_defs(self) -> list[ir.VariableDefinition]:
        """
        Parse definitions until end of input.

        Grammar:
            defs := def (',' def)* ','?

        Repeated names are all returned in order; the store applies
        last-write-wins.
        """
        definitions: list[ir.VariableDefinition] = []
        while not self.match(TokenType.EOF):
            definitions.append(self.parse_variable_def())
        return definitions

    def parse_variable_def(self) -> ir.VariableDefinition:
        """
        Parse one definition and its trailing comma.

        Grammar:
            def := (IDENT | '-')+ ':' ( '$' IDENT | ('#' IDENT)+ )
        """
        name = self.parse_property_name()

        if self.match(TokenType.DOLLAR):
            reference = self.parse_variable_reference(name)
            value = reference.rendered
        else:
            pieces: list[str] = []
            while not self.match(TokenType.COMMA, TokenType.EOF):
                pieces.append(self.parse_hash_piece(name))
            if not pieces:
                raise self.error(
                    f"expected `$` reference or `#` value for variable `{name}`",
                    property_name=name,
                )
            value = "".join(pieces)

        if not self.match(TokenType.COMMA, TokenType.EOF):
            raise self.error(
                f"unexpected value after variable `{name}`",
                property_name=name,
            )
        self.skip_comma()
        return ir.VariableDefinition(name=name, value=value)

    def parse_hash_piece(self, name: str) -> str:
        """Parse `#ident`; hex runs starting with a digit lex as numbers and are accepted too."""
        if not self.match(TokenType.HASH):
            raise self.error(
                f"expected `#` in value of variable `{name}`",
                property_name=name,
            )
        self.advance()

        token = self.current_token()
        if token.type not in (TokenType.IDENTIFIER, TokenType.NUMBER):
            raise self.error(
                f"expected identifier after `#` in value of variable `{name}`",
                token,
                property_name=name,
            )
        return "#" + self.advance().value
