"""
Error types raised by the conversion pipeline.

Every error the core raises derives from RdfTabularError so the command-line
front end can report any failure with a single handler.
"""

from enum import Enum
from typing import Optional


class RdfTabularError(Exception):
    """Base class for all conversion errors."""


class ConfigurationError(RdfTabularError):
    """Raised for an unknown dialect or an invalid encoder setting."""


class InputNotFoundError(RdfTabularError):
    """Raised when no input files could be resolved."""


class SinkError(RdfTabularError):
    """Raised when the output cannot be written, flushed or closed."""


class _LocatedError(RdfTabularError):
    """An error that can point at a line of a source file."""

    def __init__(self, message: str, source: Optional[str] = None,
                 line_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.source = source
        self.line_number = line_number

    @property
    def location(self) -> str:
        """Human-readable location, e.g. ``data.nt:12``."""
        parts = []
        if self.source is not None:
            parts.append(str(self.source))
        if self.line_number is not None:
            parts.append(f"line {self.line_number}" if not parts else str(self.line_number))
        return ':'.join(parts)

    def __str__(self) -> str:
        location = self.location
        if location:
            return f"{location}: {self.message}"
        return self.message


class EncodingError(_LocatedError):
    """Raised when an input line is not valid UTF-8."""


class ScanErrorKind(Enum):
    """Why a statement line could not be split into terms."""
    UNTERMINATED_LITERAL = "unterminated literal"
    UNTERMINATED_IRI = "unterminated IRI"
    MISSING_TERMINATOR = "missing terminator"
    TOO_FEW_TERMS = "too few terms"
    MALFORMED_LINE = "malformed line"


class ScanError(_LocatedError):
    """Raised for a statement line that cannot be tokenized."""

    def __init__(self, kind: ScanErrorKind, message: str,
                 column: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.kind = kind
        self.column = column

    def __str__(self) -> str:
        text = f"{self.kind.value}: {self.message}"
        if self.column is not None:
            text += f" (column {self.column + 1})"
        location = self.location
        if location:
            return f"{location}: {text}"
        return text


class CorruptInputError(_LocatedError):
    """Raised when compressed input is truncated or damaged."""
