"""End-to-end tests for person form validation."""

import pytest

from dataknobs_rules import ConfigError, FieldLabel, Invalid, RulesConfig, Valid
from dataknobs_rules.person import (
    Email,
    InMemoryUserRepo,
    Person,
    PersonForm,
    PersonName,
    PersonValidator,
    PersonValidatorSettings,
    does_not_exist_in_repo,
    validate,
)


class TestPersonValidatorScenarios:
    """The documented end-to-end scenarios."""

    def test_empty_first_name_only(self, empty_repo):
        result = validate(PersonForm("", "Bols", "x@y.com", "30"), empty_repo)
        assert result == Invalid(["FIRSTNAME can not be empty."])

    def test_email_without_at(self, empty_repo):
        result = validate(PersonForm("Jan", "Bols", "invalid", "30"), empty_repo)
        assert result == Invalid(["EMAIL should contain @."])

    def test_every_problem_is_reported_in_order(self, empty_repo):
        result = validate(PersonForm("", "", "bad", "200"), empty_repo)
        assert result == Invalid(
            [
                "FIRSTNAME can not be empty.",
                "LASTNAME can not be empty.",
                "EMAIL should contain @.",
                "AGE must be between 0 and 100 .",
            ]
        )

    def test_blank_age_is_absent(self, empty_repo):
        result = validate(PersonForm("Jan", "Bols", "jan@bols.com", ""), empty_repo)
        assert result == Valid(Person(PersonName("Jan", "Bols"), Email("jan@bols.com"), None))

    def test_existing_person_rejected(self, repo_with_jan_bols):
        result = validate(PersonForm("Jan", "Bols", "jan@bols.com", "30"), repo_with_jan_bols)
        assert result == Invalid(["Person with name Jan Bols already exists."])


class TestPersonValidator:
    def test_valid_with_age(self, empty_repo):
        result = PersonValidator(empty_repo).validate(
            PersonForm("Jan", "Bols", "jan@bols.com", "42")
        )
        assert result.ensure_valid() == Person(
            PersonName("Jan", "Bols"), Email("jan@bols.com"), 42
        )

    def test_absent_fields(self, empty_repo):
        result = PersonValidator(empty_repo).validate(PersonForm())
        assert result.errors == (
            "FIRSTNAME can not be empty.",
            "LASTNAME can not be empty.",
            "EMAIL can not be empty.",
        )

    def test_non_integer_age_skips_range_check(self, empty_repo):
        result = PersonValidator(empty_repo).validate(
            PersonForm("Jan", "Bols", "jan@bols.com", "abc")
        )
        assert result == Invalid(["AGE must be an integer."])

    def test_email_length_and_at_accumulate(self, empty_repo):
        result = PersonValidator(empty_repo).validate(
            PersonForm("Jan", "Bols", "x" * 101, "30")
        )
        assert result == Invalid(
            ["EMAIL has exceed max length of 100 characters.", "EMAIL should contain @."]
        )

    def test_name_length_limit(self, empty_repo):
        validator = PersonValidator(empty_repo)
        assert validator.validate(PersonForm("a" * 250, "Bols", "a@b.c", None)).valid
        assert validator.validate(PersonForm("a" * 251, "Bols", "a@b.c", None)) == Invalid(
            ["FIRSTNAME has exceed max length of 250 characters."]
        )

    def test_repository_not_called_when_names_fail(self, counting_repo):
        PersonValidator(counting_repo).validate(PersonForm("", "Bols", "a@b.c", "1"))
        assert counting_repo.calls == []

    def test_repository_called_once_with_name(self, counting_repo):
        PersonValidator(counting_repo).validate(PersonForm("Jan", "Bols", "bad", "1"))
        assert counting_repo.calls == [PersonName("Jan", "Bols")]

    def test_repository_faults_propagate(self, failing_repo):
        with pytest.raises(ConnectionError):
            PersonValidator(failing_repo).validate(PersonForm("Jan", "Bols", "a@b.c", "1"))

    def test_validator_is_reusable(self, empty_repo):
        validator = PersonValidator(empty_repo)
        form = PersonForm("", "Bols", "x@y.com", "30")
        assert validator.validate(form) == validator.validate(form)

    def test_repository_updates_are_seen(self, empty_repo):
        validator = PersonValidator(empty_repo)
        form = PersonForm("Jan", "Bols", "jan@bols.com", None)
        assert validator.validate(form).valid

        empty_repo.add(7, PersonName("Jan", "Bols"))
        assert validator.validate(form) == Invalid(["Person with name Jan Bols already exists."])


class TestPersonValidatorSettings:
    def test_defaults(self):
        settings = PersonValidatorSettings()
        assert (settings.name_max_length, settings.email_max_length) == (250, 100)
        assert (settings.age_min, settings.age_max) == (0, 100)

    def test_custom_settings_change_limits(self, empty_repo):
        validator = PersonValidator(empty_repo, {"age_max": 120, "email_max_length": 10})
        assert validator.validate(PersonForm("Jan", "Bols", "j@b.c", "110")).valid
        assert validator.validate(PersonForm("Jan", "Bols", "jan@bols.com", "130")).errors == (
            "EMAIL has exceed max length of 10 characters.",
            "AGE must be between 0 and 120 .",
        )

    def test_from_rules_config(self, empty_repo):
        config = RulesConfig({"settings": {"age_min": 18}}, use_env=False)
        validator = PersonValidator(empty_repo, config)
        assert validator.settings.age_min == 18
        assert validator.validate(PersonForm("Jan", "Bols", "a@b.c", "17")) == Invalid(
            ["AGE must be between 18 and 100 ."]
        )

    def test_invalid_settings(self):
        with pytest.raises(ConfigError):
            PersonValidatorSettings(age_min=50, age_max=10)
        with pytest.raises(ConfigError):
            PersonValidatorSettings(name_max_length=-1)
        with pytest.raises(ConfigError):
            PersonValidatorSettings.from_config({"age_max": "lots"})


class TestDomain:
    def test_form_from_dict(self):
        form = PersonForm.from_dict({"firstName": "Jan", "last_name": "Bols", "age": 30})
        assert form == PersonForm("Jan", "Bols", None, "30")

    def test_form_from_dict_falls_back_to_camel_case_when_snake_is_none(self):
        form = PersonForm.from_dict({"first_name": None, "firstName": "Jan", "last_name": ""})
        assert form.first_name == "Jan"
        assert form.last_name == ""

    def test_value_objects_reject_empty(self):
        with pytest.raises(ValueError):
            PersonName("", "Bols")
        with pytest.raises(ValueError):
            Email("")

    def test_in_memory_repo(self):
        repo = InMemoryUserRepo({3: PersonName("Ann", "Lee")})
        assert repo.find_by_name(PersonName("Ann", "Lee")) == 3
        assert repo.find_by_name(PersonName("Bob", "Lee")) is None
        repo.add(4, PersonName("Bob", "Lee"))
        assert repo.find_by_name(PersonName("Bob", "Lee")) == 4
        assert len(repo) == 2

    def test_does_not_exist_ignores_label(self, repo_with_jan_bols):
        rule = does_not_exist_in_repo(repo_with_jan_bols)
        name = PersonName("Jan", "Bols")
        assert rule.run(name, FieldLabel.AGE) == Invalid(["Person with name Jan Bols already exists."])
        assert rule.run(PersonName("Piet", "Bols"), FieldLabel.AGE) == Valid(PersonName("Piet", "Bols"))
