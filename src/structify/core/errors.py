"""
Error types for structify parsing, configuration, and transformation.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .ir.location import SourceLocation


class StructifyError(Exception):
    """Base exception for all structify errors."""

    def __init__(self, message: str, context: ErrorContext | None = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(StructifyError):
    """
    Raised when declaration source text cannot be parsed.

    Examples:
    - Unbalanced brackets in an attribute
    - Missing enum name or body
    - A discriminant that is not a valid expression
    """

    pass


class ConfigError(StructifyError):
    """
    Raised when a structify configuration file is invalid.

    Examples:
    - Unknown configuration key
    - Value of the wrong type
    - Unsupported duplicate-variant policy
    """

    pass


class TransformError(StructifyError):
    """
    Raised when a declaration cannot be transformed.

    All transformation diagnostics are terminal: the first one aborts the
    whole transformation and no partial fragment is produced.
    """

    pass


class UnsupportedAttribute(TransformError):
    """
    An attribute outside repr/derive/cfg on the declaration, or any
    non-cfg attribute on a variant.
    """

    pass


class UnsupportedCapability(TransformError):
    """A derive name outside the fixed capability vocabulary."""

    def __init__(self, name: str, context: ErrorContext | None = None):
        self.name = name
        super().__init__(f"unsupported derive: {name}", context)


class ConflictingRepresentation(TransformError):
    """More than one backing type hint, or a misplaced transparent hint."""

    pass


class UnsupportedVariantShape(TransformError):
    """A variant that carries data instead of being a bare symbol."""

    pass


class DuplicateVariant(TransformError):
    """A variant name declared twice (only raised under the strict policy)."""

    def __init__(self, name: str, context: ErrorContext | None = None):
        self.name = name
        super().__init__(f"duplicate variant: {name}", context)


class ReservedVariantName(TransformError):
    """A variant name that collides with a member of the generated wrapper."""

    def __init__(self, name: str, context: ErrorContext | None = None):
        self.name = name
        super().__init__(
            f"variant name {name} is reserved by the generated wrapper", context
        )


class DiscriminantOutOfRange(TransformError):
    """A discriminant whose value does not fit the backing type."""

    def __init__(
        self, name: str, value: int, backing: str, context: ErrorContext | None = None
    ):
        self.name = name
        self.value = value
        self.backing = backing
        super().__init__(
            f"discriminant of {name} is out of range for {backing}: {value}", context
        )


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file where error occurred
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source snippet showing the error location
    """

    file: Path
    line: int
    column: int
    snippet: str | None = None

    @classmethod
    def from_location(cls, location: SourceLocation | None) -> ErrorContext | None:
        """Build a context from an IR source location, if there is one."""
        if location is None:
            return None
        return cls(file=Path(location.file), line=location.line, column=location.column)

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "colors.rs:10:5"
        """
        location = f"{self.file}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format the offending line with a line number and error marker."""
        if not self.snippet:
            return ""

        prefix = f"{self.line:4d} | "
        marker = " " * (len(prefix) + self.column - 1) + "^^^"
        return f"{prefix}{self.snippet}\n{marker}"


def make_parse_error(
    message: str,
    file: Path,
    line: int,
    column: int,
    snippet: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source line

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return ParseError(message, context)
