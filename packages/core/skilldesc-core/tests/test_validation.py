"""Tests for the SKILL.md validator."""

import logging

import pytest

from skilldesc_core import ErrorKind, InvalidSkillError, SkillDescriptor, validate


def _skill_md(
    name: str | None = "my-skill",
    description: str | None = "Does useful things.",
    extra: str = "",
    body: str = "# Instructions\n",
) -> str:
    lines = ["---"]
    if name is not None:
        lines.append(f"name: {name}")
    if description is not None:
        lines.append(f"description: {description}")
    if extra:
        lines.append(extra)
    lines.append("---")
    return "\n".join(lines) + "\n" + body


def _kinds(result) -> list[ErrorKind]:
    return [issue.kind for issue in result.errors]


class TestValidSkills:
    def test_valid_skill(self):
        result = validate("my-skill", _skill_md())
        assert result.ok
        assert result.errors == ()
        assert result.error is None
        assert result.descriptor.name == "my-skill"
        assert result.descriptor.description == "Does useful things."

    def test_end_to_end_git_release(self):
        raw = (
            "---\n"
            "name: git-release\n"
            "description: Create consistent releases and changelogs.\n"
            "---\n"
            "# Git Release\n"
            "...\n"
        )
        result = validate("git-release", raw)
        assert result.ok
        assert result.descriptor.name == "git-release"
        assert result.descriptor.description == "Create consistent releases and changelogs."
        assert result.descriptor.body == "# Git Release\n...\n"

    def test_optional_fields_default(self):
        descriptor = validate("my-skill", _skill_md()).unwrap()
        assert descriptor.license is None
        assert descriptor.compatibility is None
        assert descriptor.metadata == {}
        assert descriptor.allowed_tools == ()

    def test_optional_fields_populated(self):
        extra = (
            "license: MIT\n"
            "compatibility: opencode\n"
            "metadata:\n  audience: maintainers\n  workflow: github\n"
            "allowed-tools: [bash, read]"
        )
        descriptor = validate("my-skill", _skill_md(extra=extra)).unwrap()
        assert descriptor.license == "MIT"
        assert descriptor.compatibility == "opencode"
        assert descriptor.metadata == {"audience": "maintainers", "workflow": "github"}
        assert descriptor.allowed_tools == ("bash", "read")

    def test_allowed_tools_space_separated(self):
        descriptor = validate("my-skill", _skill_md(extra="allowed-tools: bash read")).unwrap()
        assert descriptor.allowed_tools == ("bash", "read")

    def test_body_does_not_affect_validity(self):
        assert validate("my-skill", _skill_md(body="")).ok

    def test_single_char_name(self):
        assert validate("a", _skill_md(name="a")).ok

    def test_digits_only_segments(self):
        assert validate("v2-0", _skill_md(name="v2-0")).ok

    def test_idempotent(self):
        raw = _skill_md(name="Bad--Name")
        assert validate("x", raw) == validate("x", raw)
        assert validate("my-skill", _skill_md()) == validate("my-skill", _skill_md())

    def test_unwrap_returns_descriptor(self):
        assert isinstance(validate("my-skill", _skill_md()).unwrap(), SkillDescriptor)


class TestMalformedHeader:
    def test_no_frontmatter(self):
        result = validate("my-skill", "# Just a body")
        assert _kinds(result) == [ErrorKind.MALFORMED_HEADER]
        assert result.descriptor is None

    def test_unclosed_frontmatter(self):
        result = validate("my-skill", "---\nname: my-skill\ndescription: Desc.\n")
        assert _kinds(result) == [ErrorKind.MALFORMED_HEADER]

    def test_invalid_yaml(self):
        result = validate("my-skill", "---\n: :\ninvalid{{{\n---\n")
        assert _kinds(result) == [ErrorKind.MALFORMED_HEADER]

    def test_message_names_the_directory(self):
        result = validate("my-skill", "nothing here")
        assert "my-skill" in result.error.message


class TestMissingFields:
    def test_missing_name(self):
        result = validate("my-skill", _skill_md(name=None))
        assert result.error.kind is ErrorKind.MISSING_FIELD
        assert result.error.field == "name"

    def test_missing_description(self):
        result = validate("my-skill", _skill_md(description=None))
        assert result.error.kind is ErrorKind.MISSING_FIELD
        assert result.error.field == "description"

    def test_null_name_counts_as_missing(self):
        result = validate("my-skill", "---\nname:\ndescription: Desc.\n---\n")
        assert result.error.kind is ErrorKind.MISSING_FIELD
        assert result.error.field == "name"

    def test_both_missing(self):
        result = validate("my-skill", "---\nlicense: MIT\n---\n")
        assert [(i.kind, i.field) for i in result.errors] == [
            (ErrorKind.MISSING_FIELD, "name"),
            (ErrorKind.MISSING_FIELD, "description"),
        ]

    def test_empty_frontmatter(self):
        result = validate("my-skill", "---\n---\n# Body")
        assert result.error.field == "name"


class TestNameRules:
    @pytest.mark.parametrize(
        "name", ["Git-Release", "-git-release", "git-release-", "git--release"]
    )
    def test_invalid_names(self, name):
        result = validate(name, _skill_md(name=name))
        assert result.error.kind is ErrorKind.INVALID_NAME

    @pytest.mark.parametrize("name", ["git_release", "git.release", "git release", "gït"])
    def test_invalid_characters(self, name):
        result = validate(name, _skill_md(name=f'"{name}"'))
        assert result.has_error(ErrorKind.INVALID_NAME)

    @pytest.mark.parametrize(
        "name", ["2024", "0777", "7", "on", "no", "yes", "off", "true", "2024-01-01"]
    )
    def test_names_that_look_like_other_yaml_types(self, name):
        result = validate(name, _skill_md(name=name))
        assert result.ok, result.errors
        assert result.descriptor.name == name

    def test_non_string_name(self):
        result = validate("my-skill", _skill_md(name="[my-skill]"))
        assert result.error.kind is ErrorKind.INVALID_NAME
        assert "must be a string" in result.error.message

    def test_empty_name(self):
        result = validate("", _skill_md(name='""'))
        assert _kinds(result) == [ErrorKind.INVALID_NAME, ErrorKind.NAME_LENGTH_VIOLATION]

    def test_name_exactly_64_chars(self):
        name = "a" * 64
        assert validate(name, _skill_md(name=name)).ok

    def test_name_65_chars(self):
        name = "a" * 65
        result = validate(name, _skill_md(name=name))
        assert _kinds(result) == [ErrorKind.NAME_LENGTH_VIOLATION]
        assert "got 65" in result.error.message

    def test_long_hyphenated_name_checks_length_only(self):
        name = "-".join(["abcd"] * 13)
        assert len(name) == 64
        assert validate(name, _skill_md(name=name)).ok
        longer = name + "e"
        assert _kinds(validate(longer, _skill_md(name=longer))) == [
            ErrorKind.NAME_LENGTH_VIOLATION
        ]


class TestNameMismatch:
    def test_different_directory(self):
        result = validate("git_release", _skill_md(name="git-release"))
        assert _kinds(result) == [ErrorKind.NAME_MISMATCH]
        assert "does not match directory name 'git_release'" in result.error.message

    def test_case_only_difference(self):
        result = validate("effect", _skill_md(name="Effect"))
        assert result.error.kind is ErrorKind.NAME_MISMATCH
        # The uppercase letter is reported too.
        assert result.has_error(ErrorKind.INVALID_NAME)

    def test_end_to_end_git_release_wrong_directory(self):
        raw = (
            "---\n"
            "name: git-release\n"
            "description: Create consistent releases and changelogs.\n"
            "---\n"
            "# Git Release\n"
        )
        assert validate("git_release", raw).error.kind is ErrorKind.NAME_MISMATCH


class TestDescriptionRules:
    def test_description_exactly_1024_chars(self):
        assert validate("my-skill", _skill_md(description="x" * 1024)).ok

    def test_description_1025_chars(self):
        result = validate("my-skill", _skill_md(description="x" * 1025))
        assert _kinds(result) == [ErrorKind.DESCRIPTION_LENGTH_VIOLATION]

    def test_empty_description(self):
        result = validate("my-skill", _skill_md(description='""'))
        assert _kinds(result) == [ErrorKind.DESCRIPTION_LENGTH_VIOLATION]

    @pytest.mark.parametrize("description", ["42", "3.14", "true", "no", "2024-01-01"])
    def test_descriptions_that_look_like_other_yaml_types(self, description):
        result = validate("my-skill", _skill_md(description=description))
        assert result.ok, result.errors
        assert result.descriptor.description == description

    def test_non_string_description(self):
        result = validate("my-skill", _skill_md(description="[a, b]"))
        assert result.error.kind is ErrorKind.INVALID_FIELD
        assert result.error.field == "description"


class TestOptionalFields:
    def test_license_wrong_type(self):
        result = validate("my-skill", _skill_md(extra="license: [MIT, Apache-2.0]"))
        assert result.error.kind is ErrorKind.INVALID_FIELD
        assert result.error.field == "license"
        assert "'license' must be str" in result.error.message

    def test_compatibility_wrong_type(self):
        result = validate("my-skill", _skill_md(extra="compatibility:\n  ide: vscode"))
        assert result.error.field == "compatibility"

    def test_metadata_wrong_type(self):
        result = validate("my-skill", _skill_md(extra="metadata: should-be-a-map"))
        assert result.error.kind is ErrorKind.INVALID_FIELD
        assert result.error.field == "metadata"

    def test_metadata_nested_value_rejected(self):
        result = validate("my-skill", _skill_md(extra="metadata:\n  tags: [a, b]"))
        assert result.error.field == "metadata"

    def test_metadata_numeric_looking_value_is_text(self):
        descriptor = validate("my-skill", _skill_md(extra="metadata:\n  version: 1.0")).unwrap()
        assert descriptor.metadata == {"version": "1.0"}

    def test_license_numeric_looking_value_is_text(self):
        assert validate("my-skill", _skill_md(extra="license: 2024")).unwrap().license == "2024"

    def test_allowed_tools_wrong_type(self):
        result = validate("my-skill", _skill_md(extra="allowed-tools: {bash: true}"))
        assert result.error.field == "allowed-tools"

    def test_null_optional_field_is_absent(self):
        descriptor = validate("my-skill", _skill_md(extra="license:")).unwrap()
        assert descriptor.license is None

    def test_unknown_keys_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = validate("my-skill", _skill_md(extra="custom-field: value"))
        assert result.ok
        assert "unknown metadata keys" in caplog.text
        assert "custom-field" in caplog.text


class TestMultipleErrors:
    def test_errors_are_ordered(self):
        raw = "---\nname: Other--\ndescription: ''\nlicense: [1]\n---\n"
        result = validate("my-skill", raw)
        assert _kinds(result) == [
            ErrorKind.NAME_MISMATCH,
            ErrorKind.INVALID_NAME,
            ErrorKind.DESCRIPTION_LENGTH_VIOLATION,
            ErrorKind.INVALID_FIELD,
        ]

    def test_missing_field_comes_first(self):
        result = validate("my-skill", "---\nname: Other\n---\n")
        assert result.error.kind is ErrorKind.MISSING_FIELD
        assert result.error.field == "description"
        assert len(result.errors) == 3


class TestUnwrap:
    def test_unwrap_raises(self):
        result = validate("effect", _skill_md(name="Effect"))
        with pytest.raises(InvalidSkillError) as exc_info:
            result.unwrap()
        assert exc_info.value.directory_name == "effect"
        assert exc_info.value.issues == result.errors
        assert "failed validation" in str(exc_info.value)

    def test_unwrap_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate("x", "no header").unwrap()
