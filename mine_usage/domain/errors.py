"""
Error handling using Result[T, Error] pattern.

Expected failures (unknown site, exhausted water allowance, bad input, a
failed save) are returned as values so every caller has to look at both
outcomes. Corrupt persisted data is the exception: it raises ParseError,
because there is no sensible partial state to hand back.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar, Generic, Optional

logger = logging.getLogger(__name__)


class ErrorCode(Enum):
    """Error codes for categorizing failures."""

    UNKNOWN_SITE = "UNKNOWN_SITE"
    LIMIT_EXCEEDED = "LIMIT_EXCEEDED"
    INVALID = "INVALID"
    IO = "IO"


@dataclass
class AppError:
    """Application error with code, message, and context."""

    code: ErrorCode
    message: str
    context: Optional[dict] = None

    def __str__(self):
        ctx = f" | {self.context}" if self.context else ""
        return f"{self.code.value}: {self.message}{ctx}"


class ParseError(ValueError):
    """Raised when a line of the usage file cannot be read back."""

    def __init__(self, message: str, line: Optional[str] = None, line_number: Optional[int] = None):
        self.reason = message
        self.line = line
        self.line_number = line_number

        if line_number is not None:
            message = f"line {line_number}: {message}"
        if line is not None:
            message = f"{message} ({line!r})"

        super().__init__(message)


T = TypeVar('T')
E = TypeVar('E', bound=AppError)


@dataclass
class Result(Generic[T, E]):
    """
    Result type for functional error handling.

    A Result is either Ok(value) or Err(error), never both.

    Examples:
        result = registry.record_usage("Rosemont", 500, 2, "2024-01-01")
        if result.is_ok:
            record = result.value
        else:
            show(result.error)
    """

    value: Optional[T] = None
    error: Optional[E] = None
    _is_ok: bool = True  # Track state explicitly to handle Ok(None)

    @classmethod
    def Ok(cls, value: T) -> 'Result[T, AppError]':
        """Create a successful result."""
        return Result(value=value, _is_ok=True)

    @classmethod
    def Err(cls, error: AppError) -> 'Result[T, AppError]':
        """Create an error result."""
        return Result(error=error, _is_ok=False)

    @property
    def is_ok(self) -> bool:
        """True if result is Ok."""
        return self._is_ok and self.error is None

    @property
    def is_err(self) -> bool:
        """True if result is Err."""
        return not self._is_ok or self.error is not None

    def unwrap(self) -> T:
        """
        Get the value or raise if this is an error.
        Use only when you're certain result is Ok.
        """
        if self.is_err:
            raise RuntimeError(str(self.error))
        return self.value

    def unwrap_err(self) -> E:
        """Get the error or raise if Ok. Mostly useful in tests."""
        if self.is_ok:
            raise RuntimeError("Result is Ok, not Err")
        return self.error


# Convenience aliases
Ok = Result.Ok
Err = Result.Err
