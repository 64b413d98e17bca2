"""Tests for the exception hierarchy."""

import pytest

from dataknobs_rules.exceptions import (
    ConfigError,
    ConfigNotFoundError,
    RuleDefinitionError,
    RulesError,
    RuleViolationError,
)


class TestRulesError:
    def test_basic_exception(self):
        error = RulesError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.context == {}
        assert error.details == {}

    def test_exception_with_context(self):
        error = RulesError("Build failed", context={"rule": "email"})
        assert error.context == {"rule": "email"}
        assert error.details is error.context

    def test_details_takes_precedence(self):
        error = RulesError("Error", context={"key": "context"}, details={"key": "details"})
        assert error.context == {"key": "details"}


class TestHierarchy:
    @pytest.mark.parametrize(
        "error_class",
        [ConfigError, ConfigNotFoundError, RuleDefinitionError],
    )
    def test_subclasses_are_rules_errors(self, error_class):
        with pytest.raises(RulesError):
            raise error_class("failure")

    def test_not_found_is_config_error(self):
        assert issubclass(ConfigNotFoundError, ConfigError)

    def test_rule_violation_error(self):
        error = RuleViolationError(("a", "b"))
        assert isinstance(error, RulesError)
        assert error.errors == ["a", "b"]
        assert error.context == {"errors": ["a", "b"]}
        assert str(error) == "Validation failed with 2 error(s): a; b"
