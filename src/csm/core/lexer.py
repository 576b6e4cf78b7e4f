"""
Lexer/Tokenizer for the CSM style DSL.

Converts declaration, variable-definition and recipe text into a flat stream
of tokens with source location tracking. Whitespace and newlines carry no
meaning: `align - items` and `align-items` lex to the same tokens.
"""

from dataclasses import dataclass
from enum import Enum

from .errors import UnexpectedTokenError, make_parse_error, source_line

DEFAULT_SOURCE = "<declarations>"


class TokenType(Enum):
    """Token types in the CSM DSL."""

    IDENTIFIER = "IDENTIFIER"
    NUMBER = "NUMBER"

    COLON = ":"
    COMMA = ","
    DOLLAR = "$"
    HASH = "#"
    MINUS = "-"
    LBRACE = "{"
    RBRACE = "}"

    EOF = "EOF"


_PUNCTUATION: dict[str, TokenType] = {
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    "$": TokenType.DOLLAR,
    "#": TokenType.HASH,
    "-": TokenType.MINUS,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
}


@dataclass
class Token:
    """
    A single token in the DSL.

    Attributes:
        type: Type of token
        value: Source text of the token (a NUMBER keeps its unit suffix)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """

    type: TokenType
    value: str
    line: int
    column: int

    def __repr__(self) -> str:
        return f"Token({self.type.value}, {self.value!r}, {self.line}:{self.column})"


class Lexer:
    """Lexer for the CSM DSL."""

    def __init__(self, text: str, source: str = DEFAULT_SOURCE):
        """
        Initialize lexer.

        Args:
            text: Source text to tokenize
            source: Source name (for error reporting)
        """
        self.text = text
        self.source = source
        self.pos = 0
        self.line = 1
        self.column = 1
        self.tokens: list[Token] = []

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            if self.text[self.pos] == "\n":
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def skip_whitespace(self) -> None:
        """Skip whitespace characters, newlines included."""
        while (ch := self.current_char()) is not None and ch.isspace():
            self.advance()

    def skip_comment(self) -> bool:
        """Skip a `//` line comment or `/* */` block comment. Returns True if one was skipped."""
        if self.current_char() != "/":
            return False

        if self.peek_char() == "/":
            while self.current_char() and self.current_char() != "\n":
                self.advance()
            return True

        if self.peek_char() == "*":
            start_line = self.line
            start_col = self.column
            self.advance()
            self.advance()
            while self.current_char() is not None:
                if self.current_char() == "*" and self.peek_char() == "/":
                    self.advance()
                    self.advance()
                    return True
                self.advance()
            raise make_parse_error(
                "Unterminated block comment",
                self.source,
                start_line,
                start_col,
                error_class=UnexpectedTokenError,
                snippet=source_line(self.text, start_line),
            )

        return False

    def read_number(self) -> str:
        """
        Read a number with its optional unit suffix.

        Decimal points, `_` and `%` are consumed so that `1.5rem`, `1_000` and
        `50%` reach the parser as one token and are rejected there as a whole.
        """
        chars = []
        current = self.current_char()
        while current and (current.isdigit() or current == "."):
            chars.append(current)
            self.advance()
            current = self.current_char()

        # Unit suffix (5rem, 12px) or a hex run such as 0F0F0F
        while current and (current.isalnum() or current in ("_", "%")):
            chars.append(current)
            self.advance()
            current = self.current_char()

        return "".join(chars)

    def read_identifier(self) -> str:
        """Read an identifier."""
        chars = []
        current = self.current_char()
        while current and (current.isalnum() or current == "_"):
            chars.append(current)
            self.advance()
            current = self.current_char()
        return "".join(chars)

    def tokenize(self) -> list[Token]:
        """
        Tokenize the entire source text.

        Returns:
            List of tokens ending with EOF

        Raises:
            UnexpectedTokenError: If a character cannot start any token
        """
        while True:
            self.skip_whitespace()
            if self.skip_comment():
                continue

            ch = self.current_char()
            if ch is None:
                break

            token_line = self.line
            token_col = self.column

            if ch.isdigit():
                value = self.read_number()
                self.tokens.append(Token(TokenType.NUMBER, value, token_line, token_col))

            elif ch.isalpha() or ch == "_":
                value = self.read_identifier()
                self.tokens.append(Token(TokenType.IDENTIFIER, value, token_line, token_col))

            elif ch in _PUNCTUATION:
                self.advance()
                self.tokens.append(Token(_PUNCTUATION[ch], ch, token_line, token_col))

            else:
                raise make_parse_error(
                    f"Unexpected character: {ch!r}",
                    self.source,
                    token_line,
                    token_col,
                    error_class=UnexpectedTokenError,
                    snippet=source_line(self.text, token_line),
                )

        self.tokens.append(Token(TokenType.EOF, "", self.line, self.column))
        return self.tokens


def tokenize(text: str, source: str = DEFAULT_SOURCE) -> list[Token]:
    """
    Convenience function to tokenize DSL text.

    Args:
        text: Source text
        source: Source name used in error messages

    Returns:
        List of tokens
    """
    lexer = Lexer(text, source)
    return lexer.tokenize()
