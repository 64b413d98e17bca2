"""Composable validation rules.

A ``ValidationRule[A, B]`` wraps a function ``(value: A, label: FieldLabel) ->
ValidationResult[B]``. Rules are immutable values, built once and run many
times, and compose in two distinct ways:

- ``and_then`` chains rules sequentially and stops at the first failure, for
  checks that only make sense once an earlier one passed (parse, then range
  check).
- ``combine2`` / ``combine3`` run rules in parallel on the same input and
  accumulate every failure, for independent checks whose problems should all be
  reported in one pass.

``local``, ``fix_label`` and ``retarget`` adapt a generic rule to one field of
an enclosing record.

Example:
    ```python
    from dataknobs_rules import FieldLabel, max_length, required

    first_name = required.and_then(max_length(250)).retarget(
        FieldLabel.FIRSTNAME, lambda form: form.first_name
    )
    first_name.run(form)
    ```
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from .exceptions import RuleDefinitionError
from .labels import FieldLabel
from .result import Valid, ValidationResult, accumulate

A = TypeVar("A")
B = TypeVar("B")
C = TypeVar("C")
D = TypeVar("D")

RuleFunction = Callable[[A, FieldLabel], ValidationResult[B]]


@dataclass(frozen=True)
class ValidationRule(Generic[A, B]):
    """A rule validating a value of type A into a value of type B.

    Attributes:
        fn: The validating function, called with the value and the label the
            messages should be attributed to
    """

    fn: RuleFunction[A, B]

    def run(self, value: A, label: FieldLabel = FieldLabel.FORM) -> ValidationResult[B]:
        """Validate ``value``, attributing messages to ``label``.

        Args:
            value: Input value
            label: Field label supplied to the rule

        Returns:
            The rule's ValidationResult

        Raises:
            RuleDefinitionError: If the rule function returns something other
                than a ValidationResult
        """
        result = self.fn(value, label)
        if not isinstance(result, ValidationResult):
            raise RuleDefinitionError(
                f"Rule function returned {type(result).__name__}, expected a ValidationResult",
                context={"rule": getattr(self.fn, "__name__", repr(self.fn)), "label": label.name},
            )
        return result

    def __call__(self, value: A, label: FieldLabel = FieldLabel.FORM) -> ValidationResult[B]:
        return self.run(value, label)

    @staticmethod
    def pure(value: B) -> ValidationRule[Any, B]:
        """Rule that ignores its input and label and always succeeds with ``value``."""
        return ValidationRule(lambda _value, _label: Valid(value))

    def map(self, f: Callable[[B], C]) -> ValidationRule[A, C]:
        """Transform the successful output; failures pass through untouched."""
        return ValidationRule(lambda value, label: self.run(value, label).map(f))

    def and_then(self, second: ValidationRule[B, C]) -> ValidationRule[A, C]:
        """Chain ``second`` after this rule.

        ``second`` receives this rule's output and the same label, and is only
        invoked when this rule succeeds.
        """

        def chained(value: A, label: FieldLabel) -> ValidationResult[C]:
            return self.run(value, label).and_then(lambda output: second.run(output, label))

        return ValidationRule(chained)

    def combine(self, other: ValidationRule[A, C]) -> ValidationRule[A, tuple[B, C]]:
        """Run this rule and ``other`` on the same input, accumulating errors."""
        return combine2(self, other)

    def local(self, extract: Callable[[C], A]) -> ValidationRule[C, B]:
        """Adapt this rule to an outer input type by narrowing it with ``extract``."""
        return ValidationRule(lambda value, label: self.run(extract(value), label))

    def fix_label(self, label: FieldLabel) -> ValidationRule[A, B]:
        """Always run with ``label``, whatever label the caller supplies."""
        return ValidationRule(lambda value, _label: self.run(value, label))

    def retarget(self, label: FieldLabel, extract: Callable[[C], A]) -> ValidationRule[C, B]:
        """Apply this rule to one field of an enclosing record.

        Args:
            label: Label the inner rule reports its messages under
            extract: Projection from the outer record to this rule's input

        Returns:
            Rule over the outer record type
        """
        return self.local(extract).fix_label(label)


def construct(fn: RuleFunction[A, B]) -> ValidationRule[A, B]:
    """Wrap a raw validating function as a rule.

    Also usable as a decorator:

        @construct
        def positive(value: int, label: FieldLabel) -> ValidationResult[int]:
            return ValidationResult.condition(value > 0, f"{label.display} must be positive.", value)
    """
    return ValidationRule(fn)


def pure(value: B) -> ValidationRule[Any, B]:
    """Rule that always succeeds with ``value``."""
    return ValidationRule.pure(value)


def map_rule(rule: ValidationRule[A, B], f: Callable[[B], C]) -> ValidationRule[A, C]:
    """Free-function form of ``ValidationRule.map``.

    Named ``map_rule`` so that importing it does not shadow the builtin ``map``.
    """
    return rule.map(f)


def and_then(first: ValidationRule[A, B], second: ValidationRule[B, C]) -> ValidationRule[A, C]:
    """Sequential, short-circuiting composition of ``first`` then ``second``."""
    return first.and_then(second)


def combine2(
    first: ValidationRule[A, B],
    second: ValidationRule[A, C],
) -> ValidationRule[A, tuple[B, C]]:
    """Run both rules on the same input and label.

    Returns:
        Rule producing ``(b, c)`` when both succeed, otherwise ``Invalid`` with
        the errors of every failing rule in left-to-right order
    """
    return ValidationRule(
        lambda value, label: accumulate(first.run(value, label), second.run(value, label))
    )


def combine3(
    first: ValidationRule[A, B],
    second: ValidationRule[A, C],
    third: ValidationRule[A, D],
) -> ValidationRule[A, tuple[B, C, D]]:
    """Three-way form of ``combine2``, producing ``(b, c, d)``."""
    return ValidationRule(
        lambda value, label: accumulate(
            first.run(value, label),
            second.run(value, label),
            third.run(value, label),
        )
    )


def fix_label(rule: ValidationRule[A, B], label: FieldLabel) -> ValidationRule[A, B]:
    """Free-function form of ``ValidationRule.fix_label``."""
    return rule.fix_label(label)


def retarget(
    rule: ValidationRule[A, B],
    label: FieldLabel,
    extract: Callable[[C], A],
) -> ValidationRule[C, B]:
    """Free-function form of ``ValidationRule.retarget``."""
    return rule.retarget(label, extract)


def run(
    rule: ValidationRule[A, B],
    value: A,
    label: FieldLabel = FieldLabel.FORM,
) -> ValidationResult[B]:
    """Execute ``rule`` against ``value``."""
    return rule.run(value, label)
