"""Factory for building validation rules from configuration."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from functools import reduce
from typing import Any

from .catalog import (
    between,
    containing,
    identity,
    is_integer,
    max_length,
    not_null,
    optional_or,
    required,
)
from .exceptions import ConfigError, RuleDefinitionError
from .labels import FieldLabel
from .rule import ValidationRule, combine2

logger = logging.getLogger(__name__)


class FactoryBase:
    """Base class for factory objects.

    Factories that inherit from this should implement the create method.
    """

    def create(self, **config: Any) -> Any:
        """Create an object from configuration.

        Args:
            **config: Configuration parameters

        Returns:
            Created object
        """
        raise NotImplementedError("Subclasses must implement create method")


def _extractor(source: str) -> Callable[[Any], Any]:
    """Projection reading ``source`` as a mapping key or an attribute."""

    def extract(record: Any) -> Any:
        if isinstance(record, Mapping):
            return record.get(source)
        try:
            return getattr(record, source)
        except AttributeError as e:
            raise RuleDefinitionError(
                f"Rule source '{source}' not found on {type(record).__name__}",
                context={"source": source, "record_type": type(record).__name__},
            ) from e

    return extract


class RuleFactory(FactoryBase):
    """Factory for creating validation rules from configuration.

    Configuration Options:
        name (str): Rule name, used in log and error messages
        type (str): Rule type (see below)
        field (str): Optional label the rule always reports under
        source (str): Optional attribute/key projected out of the input first

    Leaf Types:
        required, not_null, integer, identity
        max_length (max), containing (value), between (min, max)

    Composite Types:
        chain (rules): sequential, stops at the first failing rule
        all (rules): parallel, reports every failure, keeps the first output
        optional (rule): blank input is accepted as None, otherwise ``rule``

    Example Configuration:
        rules:
          - name: email
            field: EMAIL
            source: email
            type: chain
            rules:
              - type: required
              - type: all
                rules:
                  - type: max_length
                    max: 100
                  - type: containing
                    value: "@"
    """

    LEAF_TYPES = ("required", "not_null", "integer", "identity", "max_length", "containing", "between")
    COMPOSITE_TYPES = ("chain", "all", "optional")

    def create(self, **config: Any) -> ValidationRule[Any, Any]:
        """Create a ValidationRule from configuration.

        Args:
            **config: Rule definition

        Returns:
            ValidationRule instance

        Raises:
            ConfigError: If the definition is invalid
        """
        name = config.get("name", "unnamed_rule")
        logger.info(f"Creating rule: {name}")
        return self._build_rule(config, name)

    def _build_rule(self, config: Mapping[str, Any], path: str) -> ValidationRule[Any, Any]:
        """Build a rule, then apply its optional source projection and label.

        Args:
            config: Rule definition
            path: Dotted location of this definition, for error context

        Returns:
            ValidationRule instance
        """
        if not isinstance(config, Mapping):
            raise ConfigError(
                "Rule definition must be a mapping",
                context={"path": path, "definition": config},
            )

        rule_type = str(config.get("type", "")).lower()
        if not rule_type:
            raise ConfigError("Rule definition is missing 'type'", context={"path": path})

        if rule_type in self.COMPOSITE_TYPES:
            rule = self._build_composite(rule_type, config, path)
        elif rule_type in self.LEAF_TYPES:
            rule = self._build_leaf(rule_type, config, path)
        else:
            raise ConfigError(
                f"Unknown rule type: {rule_type}",
                context={
                    "path": path,
                    "type": rule_type,
                    "known_types": list(self.LEAF_TYPES + self.COMPOSITE_TYPES),
                },
            )

        source = config.get("source")
        if source:
            rule = rule.local(_extractor(str(source)))

        field = config.get("field")
        if field:
            try:
                label = FieldLabel.parse(field)
            except ValueError as e:
                raise ConfigError(str(e), context={"path": path, "field": field}) from e
            rule = rule.fix_label(label)

        return rule

    def _build_leaf(
        self, rule_type: str, config: Mapping[str, Any], path: str
    ) -> ValidationRule[Any, Any]:
        if rule_type == "required":
            return required
        if rule_type == "not_null":
            return not_null()
        if rule_type == "integer":
            return is_integer
        if rule_type == "identity":
            return identity()

        try:
            if rule_type == "max_length":
                return max_length(int(self._param(config, "max", path)))
            if rule_type == "containing":
                return containing(str(self._param(config, "value", path)))
            # between
            return between(
                int(self._param(config, "min", path)),
                int(self._param(config, "max", path)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(
                f"Invalid parameters for '{rule_type}' rule: {e}",
                context={"path": path, "type": rule_type},
            ) from e

    def _build_composite(
        self, rule_type: str, config: Mapping[str, Any], path: str
    ) -> ValidationRule[Any, Any]:
        if rule_type == "optional":
            inner = self._param(config, "rule", path)
            return optional_or(self._build_rule(inner, f"{path}.rule"))

        sub_configs = config.get("rules") or []
        if not isinstance(sub_configs, list) or not sub_configs:
            raise ConfigError(
                f"'{rule_type}' rule requires a non-empty 'rules' list",
                context={"path": path, "type": rule_type},
            )

        rules = [
            self._build_rule(sub_config, f"{path}.rules[{idx}]")
            for idx, sub_config in enumerate(sub_configs)
        ]
        logger.debug(f"Composing {len(rules)} rules with '{rule_type}' at {path}")

        if rule_type == "chain":
            return reduce(lambda first, second: first.and_then(second), rules)

        # all: accumulate every failure, keep the first output
        return reduce(
            lambda first, second: combine2(first, second).map(lambda outputs: outputs[0]),
            rules,
        )

    @staticmethod
    def _param(config: Mapping[str, Any], key: str, path: str) -> Any:
        if config.get(key) is None:
            raise ConfigError(
                f"Rule definition is missing '{key}'",
                context={"path": path, "type": config.get("type"), "parameter": key},
            )
        return config[key]


# Create singleton instance for registration
rule_factory = RuleFactory()
