"""Leaf rules with consistent, composable behavior.

Every leaf rule attributes its message to the label it is run with, so the
same rule value can be reused for any field:

    required.run("", FieldLabel.EMAIL)      # Invalid(['EMAIL can not be empty.'])
    required.run("", FieldLabel.LASTNAME)   # Invalid(['LASTNAME can not be empty.'])
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import Any, TypeVar

from .labels import FieldLabel
from .result import ValidationResult
from .rule import ValidationRule

A = TypeVar("A")
B = TypeVar("B")

_INTEGER_PATTERN = re.compile(r"[+-]?[0-9]+")


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _required(value: str | None, label: FieldLabel) -> ValidationResult[str]:
    return ValidationResult.condition(
        not _is_blank(value), f"{label.display} can not be empty.", value
    )


required: ValidationRule[str | None, str] = ValidationRule(_required)
"""Checks that the input string is present and not blank."""


def not_null() -> ValidationRule[Any, Any]:
    """Checks that the input is not None."""
    return ValidationRule(
        lambda value, label: ValidationResult.condition(
            value is not None, f"{label.display} can not be null.", value
        )
    )


def max_length(max: int) -> ValidationRule[str, str]:
    """Validates the maximum length of a string input.

    Args:
        max: Maximum length (inclusive)

    Raises:
        ValueError: If max is negative
    """
    if max < 0:
        raise ValueError(f"max length cannot be negative: {max}")
    return ValidationRule(
        lambda value, label: ValidationResult.condition(
            len(value) <= max,
            f"{label.display} has exceed max length of {max} characters.",
            value,
        )
    )


def containing(search: str) -> ValidationRule[str, str]:
    """Checks that the input string contains ``search``."""
    return ValidationRule(
        lambda value, label: ValidationResult.condition(
            search in value, f"{label.display} should contain {search}.", value
        )
    )


def _is_integer(value: str, label: FieldLabel) -> ValidationResult[int]:
    # int() alone would also accept surrounding whitespace and digit separators
    if _INTEGER_PATTERN.fullmatch(value):
        return ValidationResult.success(int(value))
    return ValidationResult.failure(f"{label.display} must be an integer.")


is_integer: ValidationRule[str, int] = ValidationRule(_is_integer)
"""Parses the input string as an integer."""


def between(min: int, max: int) -> ValidationRule[int, int]:
    """Checks that the input integer lies in ``[min, max]``.

    Raises:
        ValueError: If min is greater than max
    """
    if min > max:
        raise ValueError(f"min ({min}) cannot be greater than max ({max})")
    return ValidationRule(
        lambda value, label: ValidationResult.condition(
            min <= value <= max,
            f"{label.display} must be between {min} and {max} .",
            value,
        )
    )


def identity() -> ValidationRule[A, A]:
    """Rule that succeeds with its input unchanged."""
    return ValidationRule(lambda value, _label: ValidationResult.success(value))


def condition(
    tester: Callable[[A], bool],
    when_true: ValidationRule[A, B],
    when_false: ValidationRule[A, B],
) -> ValidationRule[A, B]:
    """Run one of two rules depending on ``tester(value)``.

    Only the selected rule is invoked.
    """
    return ValidationRule(
        lambda value, label: (when_true if tester(value) else when_false).run(value, label)
    )


def optional_or(inner: ValidationRule[str, B]) -> ValidationRule[str | None, B | None]:
    """Accept a blank or absent string as ``None``, otherwise delegate to ``inner``.

    Blank input never reaches ``inner``.
    """
    return condition(_is_blank, identity().map(lambda _value: None), inner)
