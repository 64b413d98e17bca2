"""Rule definition loading and settings management."""

from __future__ import annotations

import copy
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Union

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigError, ConfigNotFoundError
from .factory import RuleFactory, rule_factory
from .rule import ValidationRule

logger = logging.getLogger(__name__)


class RulesConfig:
    """Named rule definitions plus a settings block, loaded from dicts or files.

    Sources are YAML or JSON files, or dictionaries, with two top-level keys:

        settings:
          age_max: 120
        rules:
          - name: first_name
            field: FIRSTNAME
            source: first_name
            type: chain
            rules:
              - type: required
              - type: max_length
                max: 250

    Settings merge first-seen-wins; a later rule definition replaces an earlier
    one with the same name. Settings can be overridden from the environment
    with ``DATAKNOBS_RULES_<KEY>`` variables (values parsed as YAML scalars).
    """

    ENV_PREFIX = "DATAKNOBS_RULES_"

    def __init__(
        self,
        *sources: Union[str, Path, dict],
        factory: RuleFactory | None = None,
        use_env: bool = True,
    ) -> None:
        """Initialize from one or more sources.

        Args:
            *sources: Variable number of sources (file paths or dictionaries)
            factory: Factory used to build rules (default: module singleton)
            use_env: Whether to apply environment overrides to settings
        """
        self._settings: Dict[str, Any] = {}
        self._rules: Dict[str, Dict[str, Any]] = {}
        self._cache: Dict[str, ValidationRule[Any, Any]] = {}
        self._factory = factory or rule_factory

        if use_env:
            self._apply_environment_overrides()

        for source in sources:
            self.load(source)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> RulesConfig:
        """Create a RulesConfig from a YAML or JSON file."""
        return cls(path)

    @classmethod
    def from_dict(cls, data: dict) -> RulesConfig:
        """Create a RulesConfig from a dictionary."""
        return cls(data)

    def load(self, source: Union[str, Path, dict]) -> None:
        """Load definitions and settings from a source.

        Args:
            source: File path or dictionary

        Raises:
            ConfigError: If the source type or file format is not supported
        """
        if isinstance(source, dict):
            self._load_dict(source)
        elif isinstance(source, (str, Path)):
            self._load_file(source)
        else:
            raise ConfigError(f"Invalid source type: {type(source)}")

    def _load_file(self, path: Union[str, Path]) -> None:
        path = Path(path).resolve()

        if not path.exists():
            raise ConfigNotFoundError(
                f"Configuration file not found: {path}", context={"path": str(path)}
            )

        suffix = path.suffix.lower()
        with open(path) as f:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigError(f"Unsupported file format: {suffix}", context={"path": str(path)})

        logger.debug(f"Loaded rule configuration from {path}")
        if data:
            self._load_dict(data)

    def _load_dict(self, data: dict) -> None:
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")

        settings = data.get("settings") or {}
        if not isinstance(settings, dict):
            raise ConfigError("'settings' must be a mapping")
        for key, value in settings.items():
            if key not in self._settings:
                self._settings[key] = value

        rules = data.get("rules") or []
        if isinstance(rules, dict):
            rules = [rules]
        for idx, definition in enumerate(rules):
            if not isinstance(definition, dict):
                raise ConfigError(
                    "Rule definition must be a mapping", context={"index": idx, "definition": definition}
                )
            definition = copy.deepcopy(definition)
            name = str(definition.setdefault("name", str(len(self._rules))))
            self._rules[name] = definition
            self._cache.pop(name, None)

        logger.debug(f"Loaded {len(rules)} rule definition(s) and {len(settings)} setting(s)")

    def _apply_environment_overrides(self) -> None:
        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            setting = key[len(self.ENV_PREFIX) :].lower()
            if not setting:
                continue
            try:
                self._settings[setting] = yaml.safe_load(value)
            except yaml.YAMLError:
                self._settings[setting] = value
            logger.debug(f"Setting '{setting}' overridden from environment")

    def get_setting(self, key: str, default: Any = None) -> Any:
        """Get a setting value, or ``default`` if not set."""
        return self._settings.get(key, default)

    def set_setting(self, key: str, value: Any) -> None:
        """Set a setting value."""
        self._settings[key] = value

    @property
    def settings(self) -> Dict[str, Any]:
        """Copy of the current settings."""
        return copy.deepcopy(self._settings)

    def names(self) -> List[str]:
        """Names of all loaded rule definitions, in load order."""
        return list(self._rules.keys())

    def get(self, name: str) -> Dict[str, Any]:
        """Get a copy of a rule definition.

        Raises:
            ConfigNotFoundError: If no definition has that name
        """
        if name not in self._rules:
            raise ConfigNotFoundError(
                f"Rule definition not found: {name}",
                context={"name": name, "available": self.names()},
            )
        return copy.deepcopy(self._rules[name])

    def build(self, name: str, cache: bool = True) -> ValidationRule[Any, Any]:
        """Build the named rule through the factory.

        Args:
            name: Rule definition name
            cache: Whether to reuse and store the built rule

        Returns:
            ValidationRule instance
        """
        if cache and name in self._cache:
            return self._cache[name]

        rule = self._factory.create(**self.get(name))

        if cache:
            self._cache[name] = rule
        return rule

    def build_all(self) -> Dict[str, ValidationRule[Any, Any]]:
        """Build every loaded rule definition, keyed by name."""
        return {name: self.build(name) for name in self.names()}

    def clear_cache(self, name: str | None = None) -> None:
        """Clear built rules.

        Args:
            name: Specific rule to clear, or None to clear all
        """
        if name:
            self._cache.pop(name, None)
        else:
            self._cache.clear()

    def to_dict(self) -> dict:
        """Export settings and rule definitions as a dictionary."""
        return {
            "settings": copy.deepcopy(self._settings),
            "rules": [copy.deepcopy(definition) for definition in self._rules.values()],
        }
