"""
Result type for consistent error handling across services.

Services return success/failure states instead of raising, so a caller (UI,
CLI) can show a user-facing message from ``error`` and branch on
``error_code`` without parsing text. Batch operations such as match
settlement return one Result per item.

Usage:
    # Returning success
    return Result.ok(bet)   # Result with value
    return Result.ok()      # Result without value (for void operations)

    # Returning failure
    return Result.fail("Not enough coins", code=error_codes.INSUFFICIENT_FUNDS)

    # Checking results
    if result.success:
        print(result.value)
    else:
        print(f"Error ({result.error_code}): {result.error}")
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    A simple result type for service method return values.

    Attributes:
        success: Whether the operation succeeded
        value: The return value if successful (None if failed or void operation)
        error: Human-readable error message if failed (None if successful)
        error_code: Error code from services.error_codes for programmatic handling
    """

    success: bool
    value: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def ok(cls, value: T | None = None) -> "Result[T]":
        """Create a successful result with an optional value."""
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, error: str, code: str | None = None) -> "Result[T]":
        """Create a failed result with an error message and optional error code."""
        return cls(success=False, error=error, error_code=code)

    def __bool__(self) -> bool:
        """Allow using Result in boolean context: if result: ..."""
        return self.success

    def unwrap(self) -> T:
        """
        Get the value, raising ValueError if the result is a failure.

        Raises:
            ValueError: If the result is a failure
        """
        if not self.success:
            raise ValueError(f"Cannot unwrap failed result: {self.error}")
        return self.value  # type: ignore

    def unwrap_or(self, default: T) -> T:
        """Get the value or a default if the result is a failure."""
        return self.value if self.success else default  # type: ignore

    def map(self, fn: Callable[[T], "Result[U]"]) -> "Result[U]":
        """
        Chain operations on successful results.

        If this result is successful, applies fn to the value and returns its result.
        If this result is a failure, returns this failure unchanged.
        """
        if not self.success:
            return self  # type: ignore[return-value]
        return fn(self.value)  # type: ignore[arg-type]

    @staticmethod
    def partition(results: Iterable["Result[T]"]) -> tuple[list[T], list["Result[T]"]]:
        """Split per-item results into successful values and failed results."""
        values: list[T] = []
        failures: list[Result[T]] = []
        for result in results:
            if result.success:
                values.append(result.value)  # type: ignore[arg-type]
            else:
                failures.append(result)
        return values, failures
