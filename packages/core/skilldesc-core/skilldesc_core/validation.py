"""Validate ``SKILL.md`` descriptors.

The primary entry-point is :func:`validate`, a pure function that takes
the name of the directory a descriptor lives in plus the raw text of
its ``SKILL.md`` and returns a :class:`ValidationResult`.  It never
touches the filesystem; callers read the file themselves (see
:mod:`skilldesc_core.discovery`).

A malformed descriptor is an expected outcome, not an exception.  Each
problem is reported as a :class:`ValidationIssue` tagged with an
:class:`ErrorKind` so that callers can produce an actionable message.

Example::

    from skilldesc_core import validate

    result = validate("git-release", Path("git-release/SKILL.md").read_text())
    if not result.ok:
        for issue in result.errors:
            print(f"  - {issue.message}")
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from skilldesc_core.descriptor import SkillDescriptor
from skilldesc_core.exceptions import InvalidSkillError, MalformedFrontmatterError
from skilldesc_core.parsing import split_frontmatter

_logger = logging.getLogger(__name__)

# Lowercase alphanumeric segments joined by single hyphens.
_NAME_RE = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")
NAME_MAX_LEN = 64
DESCRIPTION_MAX_LEN = 1024

_KNOWN_KEYS: frozenset[str] = frozenset(
    {"name", "description", "license", "compatibility", "metadata", "allowed-tools"}
)


class ErrorKind(str, Enum):
    """Why a descriptor was rejected."""

    MALFORMED_HEADER = "malformed_header"
    MISSING_FIELD = "missing_field"
    INVALID_NAME = "invalid_name"
    NAME_LENGTH_VIOLATION = "name_length_violation"
    DESCRIPTION_LENGTH_VIOLATION = "description_length_violation"
    NAME_MISMATCH = "name_mismatch"
    INVALID_FIELD = "invalid_field"


class ValidationIssue(BaseModel):
    """A single validation failure.

    Attributes:
        kind: The rule that failed.
        field: The frontmatter key involved, for ``MISSING_FIELD`` and
            ``INVALID_FIELD``; ``None`` otherwise.
        message: Human-readable description.
    """

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    field: str | None = None
    message: str


class ValidationResult(BaseModel):
    """Outcome of :func:`validate`.

    Exactly one of :attr:`descriptor` and :attr:`errors` is populated.
    """

    model_config = ConfigDict(frozen=True)

    directory_name: str
    descriptor: SkillDescriptor | None = None
    errors: tuple[ValidationIssue, ...] = ()

    @property
    def ok(self) -> bool:
        return self.descriptor is not None

    @property
    def error(self) -> ValidationIssue | None:
        """The primary issue, or ``None`` when validation succeeded."""
        return self.errors[0] if self.errors else None

    def has_error(self, kind: ErrorKind) -> bool:
        return any(issue.kind is kind for issue in self.errors)

    def unwrap(self) -> SkillDescriptor:
        """Return the descriptor or raise :class:`InvalidSkillError`."""
        if self.descriptor is None:
            raise InvalidSkillError(self.directory_name, self.errors)
        return self.descriptor


def validate(directory_name: str, raw_text: str) -> ValidationResult:
    """Validate the ``SKILL.md`` text of the skill in *directory_name*.

    Validation rules:

    * The text must start with a ``---`` delimited YAML mapping.
    * ``name`` (required) -- equal to *directory_name*, lowercase
      ``[a-z0-9]`` segments joined by single hyphens, 1-64 characters.
    * ``description`` (required) -- 1-1024 characters.
    * ``license`` and ``compatibility`` (optional) -- strings.
    * ``metadata`` (optional) -- mapping of strings to strings.
    * ``allowed-tools`` (optional) -- list of strings or a
      space-separated string.

    A malformed header is reported on its own.  Otherwise every failed
    rule is reported in this order: missing fields, name mismatch, name
    pattern, name length, then description and optional fields.  The
    first one is :attr:`ValidationResult.error`.  Unknown keys are
    logged, not rejected.

    Args:
        directory_name: Name of the directory containing ``SKILL.md``.
        raw_text: Full text of the ``SKILL.md`` file.

    Returns:
        A :class:`ValidationResult`.
    """
    try:
        frontmatter, body = split_frontmatter(raw_text)
    except MalformedFrontmatterError as exc:
        issue = ValidationIssue(
            kind=ErrorKind.MALFORMED_HEADER,
            message=f"Skill '{directory_name}': {exc}",
        )
        return ValidationResult(directory_name=directory_name, errors=(issue,))

    name = frontmatter.get("name")
    description = frontmatter.get("description")

    issues: list[ValidationIssue] = []
    for key, value in (("name", name), ("description", description)):
        if value is None:
            issues.append(
                ValidationIssue(
                    kind=ErrorKind.MISSING_FIELD,
                    field=key,
                    message=f"Skill '{directory_name}': metadata missing required '{key}' field",
                )
            )

    if name is not None:
        issues.extend(_check_name(directory_name, name))
    if description is not None:
        issues.extend(_check_description(directory_name, description))

    optional, optional_issues = _check_optional_fields(directory_name, frontmatter)
    issues.extend(optional_issues)

    unknown = set(frontmatter.keys()) - _KNOWN_KEYS
    if unknown:
        _logger.warning(
            "Skill '%s': unknown metadata keys: %s",
            directory_name,
            ", ".join(sorted(str(k) for k in unknown)),
        )

    if issues:
        return ValidationResult(directory_name=directory_name, errors=tuple(issues))

    descriptor = SkillDescriptor(name=name, description=description, body=body, **optional)
    return ValidationResult(directory_name=directory_name, descriptor=descriptor)


# ------------------------------------------------------------------
# Private helpers
# ------------------------------------------------------------------


def _check_name(directory_name: str, name: Any) -> list[ValidationIssue]:
    prefix = f"Skill '{directory_name}'"
    if not isinstance(name, str):
        return [
            ValidationIssue(
                kind=ErrorKind.INVALID_NAME,
                message=f"{prefix}: name must be a string, got {type(name).__name__}",
            )
        ]

    issues: list[ValidationIssue] = []
    if name != directory_name:
        issues.append(
            ValidationIssue(
                kind=ErrorKind.NAME_MISMATCH,
                message=(
                    f"{prefix}: metadata name '{name}' "
                    f"does not match directory name '{directory_name}'"
                ),
            )
        )
    if not _NAME_RE.fullmatch(name):
        issues.append(
            ValidationIssue(
                kind=ErrorKind.INVALID_NAME,
                message=(
                    f"{prefix}: name must be lowercase alphanumeric segments "
                    f"joined by single hyphens"
                ),
            )
        )
    if not 1 <= len(name) <= NAME_MAX_LEN:
        issues.append(
            ValidationIssue(
                kind=ErrorKind.NAME_LENGTH_VIOLATION,
                message=f"{prefix}: name must be 1-{NAME_MAX_LEN} characters, got {len(name)}",
            )
        )
    return issues


def _check_description(directory_name: str, description: Any) -> list[ValidationIssue]:
    prefix = f"Skill '{directory_name}'"
    if not isinstance(description, str):
        return [
            ValidationIssue(
                kind=ErrorKind.INVALID_FIELD,
                field="description",
                message=(
                    f"{prefix}: field 'description' must be str, "
                    f"got {type(description).__name__}"
                ),
            )
        ]
    if not 1 <= len(description) <= DESCRIPTION_MAX_LEN:
        return [
            ValidationIssue(
                kind=ErrorKind.DESCRIPTION_LENGTH_VIOLATION,
                message=(
                    f"{prefix}: description must be 1-{DESCRIPTION_MAX_LEN} "
                    f"characters, got {len(description)}"
                ),
            )
        ]
    return []


def _check_optional_fields(
    directory_name: str, frontmatter: dict[str, Any]
) -> tuple[dict[str, Any], list[ValidationIssue]]:
    """Type-check optional keys and return them as descriptor kwargs."""
    values: dict[str, Any] = {}
    issues: list[ValidationIssue] = []

    def invalid(key: str, expected: str, value: Any) -> None:
        issues.append(
            ValidationIssue(
                kind=ErrorKind.INVALID_FIELD,
                field=key,
                message=(
                    f"Skill '{directory_name}': field '{key}' must be "
                    f"{expected}, got {type(value).__name__}"
                ),
            )
        )

    for key in ("license", "compatibility"):
        value = frontmatter.get(key)
        if value is None:
            continue
        if isinstance(value, str):
            values[key] = value
        else:
            invalid(key, "str", value)

    metadata = frontmatter.get("metadata")
    if metadata is not None:
        if isinstance(metadata, dict) and all(
            isinstance(k, str) and isinstance(v, str) for k, v in metadata.items()
        ):
            values["metadata"] = metadata
        else:
            invalid("metadata", "a mapping of str to str", metadata)

    tools = frontmatter.get("allowed-tools")
    if tools is not None:
        if isinstance(tools, str):
            values["allowed_tools"] = tuple(tools.split())
        elif isinstance(tools, list) and all(isinstance(t, str) for t in tools):
            values["allowed_tools"] = tuple(tools)
        else:
            invalid("allowed-tools", "a list of str", tools)

    return values, issues
