"""Exception hierarchy for the rules package.

Validation failures are never raised: rules report them as ``Invalid`` results.
The exceptions here cover the remaining cases, which are programming and
configuration errors, plus the explicit ``ensure_valid()`` escape hatch.

Example:
    ```python
    from dataknobs_rules.exceptions import ConfigError, RulesError

    try:
        config.build("first_name")
    except RulesError as e:
        logger.error(f"Error: {e}")
        if e.context:
            logger.error(f"Context: {e.context}")
    ```
"""

from typing import Any, Dict


class RulesError(Exception):
    """Base exception for the rules package.

    Attributes:
        context: Dictionary containing contextual information about the error
        details: Alias for context

    Args:
        message: Human-readable error message
        context: Optional dictionary with error context (rule names, fields, etc.)
        details: Alternative to context (both are supported)
    """

    def __init__(
        self,
        message: str,
        context: Dict[str, Any] | None = None,
        details: Dict[str, Any] | None = None,
    ):
        super().__init__(message)
        # Details takes precedence if both are provided
        self.context = details or context or {}
        self.details = self.context


class ConfigError(RulesError):
    """Raised when a rule definition or settings block is invalid.

    Example:
        ```python
        raise ConfigError(
            "Unknown rule type",
            context={"rule": "first_name", "type": "maxlen"}
        )
        ```
    """

    pass


class ConfigNotFoundError(ConfigError):
    """Raised when a named rule definition or a definition file is not found."""

    pass


class RuleDefinitionError(RulesError):
    """Raised when a rule function breaks the rule contract.

    A rule function must return a ``ValidationResult``. Anything else is a bug
    in the rule, not a validation failure, so it is raised instead of being
    folded into the error list.
    """

    pass


class RuleViolationError(RulesError):
    """Raised by ``ValidationResult.ensure_valid()`` on an invalid result.

    The accumulated messages are available as ``errors`` and in
    ``context["errors"]``.
    """

    def __init__(self, errors: list[str] | tuple[str, ...]):
        self.errors = list(errors)
        super().__init__(
            f"Validation failed with {len(self.errors)} error(s): " + "; ".join(self.errors),
            context={"errors": self.errors},
        )


__all__ = [
    "RulesError",
    "ConfigError",
    "ConfigNotFoundError",
    "RuleDefinitionError",
    "RuleViolationError",
]
