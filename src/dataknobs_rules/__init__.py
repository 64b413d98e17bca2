"""Composable validation rules with accumulating errors.

This package provides a small algebra of validation rules:

- **Results**: ``Valid`` / ``Invalid`` with ordered, never-empty error lists
- **Rules**: immutable ``(value, label) -> result`` functions composed with
  ``map``, ``and_then`` (sequential, short-circuiting) and ``combine2`` /
  ``combine3`` (parallel, accumulating)
- **Catalog**: leaf rules such as ``required``, ``max_length`` and ``between``
- **Configuration**: rules built from YAML/JSON definitions via ``RuleFactory``

Example:
    ```python
    from dataknobs_rules import FieldLabel, combine2, containing, max_length, required

    email = required.and_then(
        combine2(max_length(100), containing("@")).map(lambda checked: checked[0])
    )
    email.run("bad", FieldLabel.EMAIL)
    # Invalid(['EMAIL should contain @.'])
    ```
"""

from .catalog import (
    between,
    condition,
    containing,
    identity,
    is_integer,
    max_length,
    not_null,
    optional_or,
    required,
)
from .config import RulesConfig
from .exceptions import (
    ConfigError,
    ConfigNotFoundError,
    RuleDefinitionError,
    RulesError,
    RuleViolationError,
)
from .factory import FactoryBase, RuleFactory, rule_factory
from .labels import FieldLabel
from .result import Invalid, Valid, ValidationResult, accumulate
from .rule import (
    ValidationRule,
    and_then,
    combine2,
    combine3,
    construct,
    fix_label,
    map_rule,
    pure,
    retarget,
    run,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Labels and results
    "FieldLabel",
    "ValidationResult",
    "Valid",
    "Invalid",
    "accumulate",
    # Rule algebra
    "ValidationRule",
    "construct",
    "pure",
    "and_then",
    "combine2",
    "combine3",
    "map_rule",
    "fix_label",
    "retarget",
    "run",
    # Catalog
    "required",
    "not_null",
    "max_length",
    "containing",
    "is_integer",
    "between",
    "identity",
    "condition",
    "optional_or",
    # Configuration
    "RulesConfig",
    "RuleFactory",
    "FactoryBase",
    "rule_factory",
    # Exceptions
    "RulesError",
    "ConfigError",
    "ConfigNotFoundError",
    "RuleDefinitionError",
    "RuleViolationError",
]
