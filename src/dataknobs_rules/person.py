"""Person form validation built from the rule algebra.

This module wires the leaf rules into a complete form validator:

- first and last name are each required and length-limited, checked in
  parallel, then (only if both pass) looked up in a ``UserRepo``;
- email is required, then length and ``@`` are checked in parallel;
- age is optional, but if present must parse as an integer in range;
- the three groups are checked in parallel, so every problem on the form is
  reported in one pass.

Example:
    ```python
    from dataknobs_rules.person import InMemoryUserRepo, PersonForm, PersonValidator

    validator = PersonValidator(InMemoryUserRepo())
    result = validator.validate(PersonForm("", "", "bad", "200"))
    result.errors
    # ('FIRSTNAME can not be empty.', 'LASTNAME can not be empty.',
    #  'EMAIL should contain @.', 'AGE must be between 0 and 100 .')
    ```
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from .catalog import between, containing, is_integer, max_length, optional_or, required
from .exceptions import ConfigError
from .labels import FieldLabel
from .result import ValidationResult
from .rule import ValidationRule, combine2, combine3

if TYPE_CHECKING:
    from .config import RulesConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PersonForm:
    """Raw form input; every field may be absent."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    age: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> PersonForm:
        """Create a form from a mapping with snake_case or camelCase keys."""

        def pick(snake: str, camel: str) -> Any:
            value = data.get(snake)
            return data.get(camel) if value is None else value

        return cls(
            first_name=pick("first_name", "firstName"),
            last_name=pick("last_name", "lastName"),
            email=data.get("email"),
            age=None if data.get("age") is None else str(data["age"]),
        )


@dataclass(frozen=True)
class PersonName:
    first: str
    last: str

    def __post_init__(self) -> None:
        if not self.first or not self.last:
            raise ValueError("PersonName requires a first and a last name")

    def __str__(self) -> str:
        return f"{self.first} {self.last}"


@dataclass(frozen=True)
class Email:
    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("Email requires a value")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Person:
    """Validated person record."""

    name: PersonName
    email: Email
    age: int | None = None


class UserRepo(Protocol):
    """Read-only lookup of existing people by name."""

    def find_by_name(self, name: PersonName) -> int | None:
        """Return the id of the person with ``name``, or None if there is none."""
        ...


class InMemoryUserRepo:
    """Thread-safe, dict-backed UserRepo."""

    def __init__(self, names_by_id: Mapping[int, PersonName] | None = None):
        self._ids_by_name: dict[PersonName, int] = {
            name: id for id, name in (names_by_id or {}).items()
        }
        self._lock = threading.Lock()

    def add(self, id: int, name: PersonName) -> None:
        """Register ``name`` under ``id``."""
        with self._lock:
            self._ids_by_name[name] = id

    def find_by_name(self, name: PersonName) -> int | None:
        with self._lock:
            return self._ids_by_name.get(name)

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids_by_name)


def does_not_exist_in_repo(repo: UserRepo) -> ValidationRule[PersonName, PersonName]:
    """Pass the name through unless ``repo`` already knows it.

    The label is ignored; the message names the person instead. Errors raised
    by the repository propagate to the caller.
    """

    def check(name: PersonName, _label: FieldLabel) -> ValidationResult[PersonName]:
        existing = repo.find_by_name(name)
        logger.debug(f"Repository lookup for '{name}': {existing}")
        return ValidationResult.condition(
            existing is None,
            f"Person with name {name.first} {name.last} already exists.",
            name,
        )

    return ValidationRule(check)


@dataclass(frozen=True)
class PersonValidatorSettings:
    """Limits applied by PersonValidator."""

    name_max_length: int = 250
    email_max_length: int = 100
    age_min: int = 0
    age_max: int = 100

    def __post_init__(self) -> None:
        if self.name_max_length < 0 or self.email_max_length < 0:
            raise ConfigError(
                "Maximum lengths cannot be negative",
                context={
                    "name_max_length": self.name_max_length,
                    "email_max_length": self.email_max_length,
                },
            )
        if self.age_min > self.age_max:
            raise ConfigError(
                f"age_min ({self.age_min}) cannot be greater than age_max ({self.age_max})",
                context={"age_min": self.age_min, "age_max": self.age_max},
            )

    @classmethod
    def from_config(cls, config: RulesConfig | Mapping[str, Any] | None) -> PersonValidatorSettings:
        """Read settings from a RulesConfig settings block or a plain mapping.

        Unset keys keep their defaults; unknown keys are ignored.
        """
        if config is None:
            return cls()
        settings = config if isinstance(config, Mapping) else config.settings
        defaults = cls()
        try:
            return cls(
                name_max_length=int(settings.get("name_max_length", defaults.name_max_length)),
                email_max_length=int(settings.get("email_max_length", defaults.email_max_length)),
                age_min=int(settings.get("age_min", defaults.age_min)),
                age_max=int(settings.get("age_max", defaults.age_max)),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid person validator settings: {e}") from e


class PersonValidator:
    """Validates a PersonForm into a Person, reporting every problem at once."""

    def __init__(
        self,
        repo: UserRepo,
        settings: PersonValidatorSettings | RulesConfig | Mapping[str, Any] | None = None,
    ):
        """Build the rules once for reuse across validations.

        Args:
            repo: Repository used to reject names that already exist
            settings: Limits, as settings, a RulesConfig, or a plain mapping
        """
        self.repo = repo
        if not isinstance(settings, PersonValidatorSettings):
            settings = PersonValidatorSettings.from_config(settings)
        self.settings = settings
        self.rule = self._build_rule()

    def _build_rule(self) -> ValidationRule[PersonForm, Person]:
        s = self.settings

        first_name = required.and_then(max_length(s.name_max_length)).retarget(
            FieldLabel.FIRSTNAME, lambda form: form.first_name
        )
        last_name = required.and_then(max_length(s.name_max_length)).retarget(
            FieldLabel.LASTNAME, lambda form: form.last_name
        )
        name = (
            combine2(first_name, last_name)
            .map(lambda names: PersonName(*names))
            .and_then(does_not_exist_in_repo(self.repo))
        )

        email = (
            required.and_then(
                combine2(max_length(s.email_max_length), containing("@")).map(
                    lambda checked: checked[0]
                )
            )
            .map(Email)
            .retarget(FieldLabel.EMAIL, lambda form: form.email)
        )

        age = optional_or(is_integer.and_then(between(s.age_min, s.age_max))).retarget(
            FieldLabel.AGE, lambda form: form.age
        )

        return combine3(name, email, age).map(lambda parts: Person(*parts))

    def validate(self, form: PersonForm) -> ValidationResult[Person]:
        """Validate ``form``.

        Returns:
            Valid(Person) or Invalid with every violated constraint
        """
        result = self.rule.run(form, FieldLabel.FORM)
        if result.valid:
            logger.debug("Person form is valid")
        else:
            logger.debug(f"Person form is invalid with {len(result.errors)} error(s)")
        return result


def validate(
    form: PersonForm,
    repo: UserRepo,
    settings: PersonValidatorSettings | RulesConfig | Mapping[str, Any] | None = None,
) -> ValidationResult[Person]:
    """Validate ``form`` against ``repo`` with a one-off PersonValidator."""
    return PersonValidator(repo, settings).validate(form)
