"""Exception hierarchy for skilldesc.

All exceptions raised by :mod:`skilldesc_core` (and by the MCP server
package) inherit from :class:`SkillDescError`, allowing callers to catch
the entire family with a single ``except`` clause.

Note that an invalid ``SKILL.md`` is **not** exceptional: the validator
returns a :class:`~skilldesc_core.ValidationResult` describing the
problem.  :class:`InvalidSkillError` is only raised when a caller asks
for a descriptor explicitly via
:meth:`ValidationResult.unwrap <skilldesc_core.ValidationResult.unwrap>`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from skilldesc_core.validation import ValidationIssue


class SkillDescError(Exception):
    """Base exception for all skilldesc errors."""


class SkillNotFoundError(SkillDescError, LookupError):
    """A requested skill does not exist.

    Raised by :meth:`SkillRegistry.get_skill
    <skilldesc_core.SkillRegistry.get_skill>` when the name is not in
    the index.

    Example::

        try:
            skill = registry.get_skill("nonexistent")
        except SkillNotFoundError:
            print("Skill not found")
    """


class MalformedFrontmatterError(SkillDescError, ValueError):
    """The ``---`` delimited metadata block is missing or unparsable.

    Raised by :func:`~skilldesc_core.split_frontmatter`.  The validator
    converts it into a ``MALFORMED_HEADER`` issue.
    """


class InvalidSkillError(SkillDescError, ValueError):
    """A descriptor failed validation.

    Args:
        directory_name: Name of the directory the descriptor came from.
        issues: The validation issues, primary issue first.
    """

    def __init__(self, directory_name: str, issues: tuple[ValidationIssue, ...]) -> None:
        self.directory_name = directory_name
        self.issues = issues
        lines = "\n".join(f"  - {issue.message}" for issue in issues)
        super().__init__(f"Skill '{directory_name}' failed validation:\n{lines}")


class DuplicateSkillError(SkillDescError, ValueError):
    """A skill name is already registered, or defined in more than one place."""
