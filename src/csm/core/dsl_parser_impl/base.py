"""
Base parser class for the CSM DSL.

Provides common token manipulation and utility methods used by all parser mixins.
"""

from ..errors import ParseError, UnexpectedTokenError, make_parse_error, source_line
from ..lexer import Token, TokenType


class BaseParser:
    """
    Base parser class with token manipulation utilities.

    This class provides the foundation for recursive descent parsing,
    including token navigation, matching, and error generation.
    """

    def __init__(self, tokens: list[Token], source: str, text: str | None = None):
        """
        Initialize parser.

        Args:
            tokens: List of tokens from lexer (must end with EOF)
            source: Source name (for error reporting)
            text: Source text the tokens came from; errors quote the offending line
        """
        if not tokens or tokens[-1].type != TokenType.EOF:
            last = tokens[-1] if tokens else None
            tokens = [
                *tokens,
                Token(TokenType.EOF, "", last.line if last else 1, last.column if last else 1),
            ]
        self.tokens = tokens
        self.source = source
        self.text = text
        self.pos = 0

    def current_token(self) -> Token:
        """Get current token."""
        if self.pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[self.pos]

    def peek_token(self, offset: int = 1) -> Token:
        """Peek ahead at token."""
        pos = self.pos + offset
        if pos >= len(self.tokens):
            return self.tokens[-1]  # Return EOF
        return self.tokens[pos]

    def advance(self) -> Token:
        """Consume and return current token."""
        token = self.current_token()
        if token.type != TokenType.EOF:
            self.pos += 1
        return token

    def match(self, *token_types: TokenType) -> bool:
        """Check if current token matches any of the given types."""
        return self.current_token().type in token_types

    def at_end(self) -> bool:
        return self.match(TokenType.EOF)

    def error(
        self,
        message: str,
        token: Token | None = None,
        *,
        error_class: type[ParseError] = UnexpectedTokenError,
        property_name: str | None = None,
    ) -> ParseError:
        """Build a ParseError located at `token` (default: the current token)."""
        token = token or self.current_token()
        return make_parse_error(
            message,
            self.source,
            token.line,
            token.column,
            error_class=error_class,
            property_name=property_name,
            snippet=source_line(self.text, token.line),
        )

    def expect(self, token_type: TokenType, *, property_name: str | None = None) -> Token:
        """
        Expect a specific token type and consume it.

        Raises:
            UnexpectedTokenError: If token doesn't match
        """
        token = self.current_token()
        if token.type != token_type:
            raise self.error(
                f"Expected {_describe(token_type)}, got {_describe_token(token)}",
                token,
                property_name=property_name,
            )
        return self.advance()

    def skip_comma(self) -> bool:
        """Consume an optional `,` separator."""
        if self.match(TokenType.COMMA):
            self.advance()
            return True
        return False


def _describe(token_type: TokenType) -> str:
    if token_type == TokenType.IDENTIFIER:
        return "identifier"
    if token_type == TokenType.NUMBER:
        return "number"
    if token_type == TokenType.EOF:
        return "end of input"
    return f"`{token_type.value}`"


def _describe_token(token: Token) -> str:
    if token.type == TokenType.EOF:
        return "end of input"
    return f"`{token.value}`"
