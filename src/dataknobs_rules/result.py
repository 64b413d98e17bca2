"""Validation result types with accumulating error semantics.

A result is either ``Valid(value)`` or ``Invalid(errors)``. ``Invalid`` always
carries at least one message, and messages keep the order in which they were
produced.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .exceptions import RuleViolationError

T = TypeVar("T")
U = TypeVar("U")


class ValidationResult(ABC, Generic[T]):
    """Outcome of running a rule: either ``Valid`` or ``Invalid``.

    Both variants expose ``valid`` and ``errors`` so callers can inspect a
    result without type checks, and both allow ``if result:`` usage.
    """

    valid: bool

    @property
    @abstractmethod
    def errors(self) -> tuple[str, ...]:
        """Error messages, empty for a valid result."""
        pass

    def __bool__(self) -> bool:
        """Allow 'if result:' usage to check validity."""
        return self.valid

    @staticmethod
    def success(value: T) -> Valid[T]:
        """Create a successful validation result.

        Args:
            value: The validated value

        Returns:
            Valid result holding the value
        """
        return Valid(value)

    @staticmethod
    def failure(errors: str | Sequence[str]) -> Invalid[Any]:
        """Create a failed validation result.

        Args:
            errors: A single message or a non-empty sequence of messages

        Returns:
            Invalid result holding the messages
        """
        if isinstance(errors, str):
            errors = (errors,)
        return Invalid(errors)

    @staticmethod
    def condition(ok: bool, error: str, value: T) -> ValidationResult[T]:
        """Succeed with ``value`` when ``ok`` holds, otherwise fail with ``error``."""
        return Valid(value) if ok else Invalid((error,))

    @abstractmethod
    def map(self, f: Callable[[T], U]) -> ValidationResult[U]:
        """Transform the value of a valid result; invalid results pass through."""
        pass

    @abstractmethod
    def and_then(self, f: Callable[[T], ValidationResult[U]]) -> ValidationResult[U]:
        """Bind ``f`` across the value of a valid result; invalid results pass through."""
        pass

    @abstractmethod
    def value_or(self, default: T) -> T:
        """Return the validated value, or ``default`` when invalid."""
        pass

    @abstractmethod
    def ensure_valid(self) -> T:
        """Return the validated value or raise ``RuleViolationError``."""
        pass


@dataclass(frozen=True)
class Valid(ValidationResult[T]):
    """Successful result carrying the validated value."""

    value: T

    valid = True

    @property
    def errors(self) -> tuple[str, ...]:
        return ()

    def map(self, f: Callable[[T], U]) -> ValidationResult[U]:
        return Valid(f(self.value))

    def and_then(self, f: Callable[[T], ValidationResult[U]]) -> ValidationResult[U]:
        return f(self.value)

    def value_or(self, default: T) -> T:
        return self.value

    def ensure_valid(self) -> T:
        return self.value


@dataclass(frozen=True, init=False)
class Invalid(ValidationResult[T]):
    """Failed result carrying one or more error messages."""

    _errors: tuple[str, ...]

    valid = False
    __match_args__ = ("errors",)

    def __init__(self, errors: str | Sequence[str]):
        # A bare string is one message, not a sequence of characters
        errors = (errors,) if isinstance(errors, str) else tuple(errors)
        if not errors:
            raise ValueError("Invalid requires at least one error message")
        object.__setattr__(self, "_errors", errors)

    @property
    def errors(self) -> tuple[str, ...]:
        return self._errors

    def __repr__(self) -> str:
        return f"Invalid({list(self._errors)!r})"

    def map(self, f: Callable[[T], U]) -> ValidationResult[U]:
        return self  # type: ignore[return-value]

    def and_then(self, f: Callable[[T], ValidationResult[U]]) -> ValidationResult[U]:
        return self  # type: ignore[return-value]

    def value_or(self, default: T) -> T:
        return default

    def ensure_valid(self) -> T:
        raise RuleViolationError(self._errors)


def accumulate(*results: ValidationResult[Any]) -> ValidationResult[tuple[Any, ...]]:
    """Combine results, keeping every error.

    Args:
        *results: Results to combine, in order

    Returns:
        ``Valid`` of the tuple of values when every result is valid, otherwise
        ``Invalid`` with the error lists of all failing results concatenated
        left to right
    """
    errors: list[str] = []
    for result in results:
        if not result.valid:
            errors.extend(result.errors)
    if errors:
        return Invalid(errors)
    return Valid(tuple(result.value for result in results))  # type: ignore[attr-defined]
