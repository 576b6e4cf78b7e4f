"""
Error types for CSM parsing, recipe lookup, fragment storage and bundling.

Every error is fatal to the compile call that raised it. Errors carry enough
context (property name, fragment id, selector, source location) to diagnose
the failing declaration without re-running the build.
"""

from dataclasses import dataclass
from typing import Optional


class CsmError(Exception):
    """Base exception for all CSM errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


# =============================================================================
# Parse errors
# =============================================================================


class ParseError(CsmError):
    """
    Raised when a declaration, variable-definition or recipe block cannot be parsed.

    Parsing is fail-fast: the whole declaration set is rejected, no partial
    RuleSet is ever returned.
    """

    def __init__(
        self,
        message: str,
        context: Optional["ErrorContext"] = None,
        property_name: str | None = None,
    ):
        self.property_name = property_name
        super().__init__(message, context)


class UnexpectedTokenError(ParseError):
    """A token that is neither identifier, hyphen, number nor the expected delimiter."""

    pass


class DuplicatePropertyError(ParseError):
    """A second rule for the same property inside one declaration set."""

    pass


class MissingColonError(ParseError):
    """A property-name run that is not terminated by `:`."""

    pass


class MissingVariableIdentifierError(ParseError):
    """A `$` that is not followed by an identifier."""

    pass


class InvalidNumericLiteralError(ParseError):
    """A numeric literal that is not an unsigned 32-bit integer."""

    pass


class DuplicateChoiceError(ParseError):
    """Two choices (or two variants) with the same name inside one recipe."""

    pass


# =============================================================================
# Recipe lookup errors
# =============================================================================


class VariantLookupError(CsmError, LookupError):
    """
    Raised when a selector tuple does not address a dispatch-table row.

    No fallback row is synthesized, even when the recipe declared defaults.
    """

    def __init__(self, message: str, selector: tuple[str, ...] = ()):
        self.selector = selector
        super().__init__(message)


class UnknownVariantChoiceError(VariantLookupError):
    """A selector names a choice that its variant does not declare."""

    pass


class SelectorArityError(VariantLookupError):
    """A selector has more or fewer choices than the recipe has variants."""

    pass


# =============================================================================
# Storage errors
# =============================================================================


class StoreError(CsmError):
    """
    Raised when the fragment store or bundle artifact cannot be accessed.

    Examples:
    - Output directory cannot be created
    - Fragment file cannot be read
    - Bundle file cannot be written
    """

    def __init__(self, message: str, fragment_id: str | None = None):
        self.fragment_id = fragment_id
        super().__init__(message)


class CannotCreateStoreError(StoreError):
    pass


class FragmentReadError(StoreError):
    pass


class FragmentWriteError(StoreError):
    pass


class BundleWriteError(StoreError):
    pass


class InvalidFragmentIdError(StoreError):
    """A fragment id that is not a plain `[A-Za-z0-9_-]+` name, or is reserved."""

    pass


# =============================================================================
# Bundling errors
# =============================================================================


class BundleError(CsmError):
    """Raised when fragments cannot be assembled into a bundle."""

    pass


class ImportResolutionError(BundleError):
    pass


class MinifyError(BundleError):
    pass


# =============================================================================
# Build lifecycle / configuration
# =============================================================================


class BuildContextError(CsmError):
    """Raised when a compile call is made outside a started build context."""

    pass


class ConfigError(CsmError):
    """Raised when csm.toml or the environment holds invalid settings."""

    pass


@dataclass
class ErrorContext:
    """
    Source location of an error.

    Attributes:
        source: Name of the DSL source (file path or invocation label)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source line shown under the location
    """

    source: str
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "<declarations>:1:12"
        """
        location = f"{self.source}:{self.line}:{self.column}"
        if self.snippet is None:
            return location
        marker = " " * (self.column - 1) + "^"
        return f"{location}\n    {self.snippet}\n    {marker}"


def source_line(text: str | None, line: int) -> str | None:
    """Return line `line` (1-indexed) of `text`, or None when unavailable."""
    if text is None:
        return None
    lines = text.splitlines()
    if 1 <= line <= len(lines):
        return lines[line - 1]
    return None


def make_parse_error(
    message: str,
    source: str,
    line: int,
    column: int,
    *,
    error_class: type[ParseError] = ParseError,
    property_name: str | None = None,
    snippet: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError (or subclass) with context.

    Args:
        message: Error description
        source: Source name
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        error_class: Concrete ParseError subclass to raise
        property_name: Property name under construction, if any
        snippet: Optional source line

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(source=source, line=line, column=column, snippet=snippet)
    return error_class(message, context, property_name=property_name)
