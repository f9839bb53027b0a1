"""Validation and discovery for ``SKILL.md`` skill descriptors.

This package provides the building blocks a host needs before loading
a skill:

* :func:`validate` -- pure validator from directory name + raw text to a
  :class:`ValidationResult`.
* :class:`SkillDescriptor` -- immutable record of a valid skill.
* :func:`split_frontmatter` -- splits ``SKILL.md`` into YAML and body.
* :func:`find_scopes` / :func:`discover` -- locate and validate skills
  under project, compat, and global scopes.
* :class:`PermissionRules` -- name-glob allow / deny / ask rules.
* :class:`SkillRegistry` -- flat index with a catalog builder.
* :class:`SkillDescError` -- base class for all library exceptions.

Install::

    pip install skilldesc
"""

from skilldesc_core.descriptor import SkillDescriptor
from skilldesc_core.discovery import (
    DiscoveredSkill,
    DiscoveryReport,
    RejectedSkill,
    Scope,
    ScopeKind,
    SkillLocation,
    discover,
    find_scopes,
    iter_skill_files,
    load_skill,
)
from skilldesc_core.exceptions import (
    DuplicateSkillError,
    InvalidSkillError,
    MalformedFrontmatterError,
    SkillDescError,
    SkillNotFoundError,
)
from skilldesc_core.parsing import split_frontmatter
from skilldesc_core.permissions import PermissionMode, PermissionRules
from skilldesc_core.registry import SkillRegistry
from skilldesc_core.validation import ErrorKind, ValidationIssue, ValidationResult, validate

__all__ = [
    "DiscoveredSkill",
    "DiscoveryReport",
    "DuplicateSkillError",
    "ErrorKind",
    "InvalidSkillError",
    "MalformedFrontmatterError",
    "PermissionMode",
    "PermissionRules",
    "RejectedSkill",
    "Scope",
    "ScopeKind",
    "SkillDescError",
    "SkillDescriptor",
    "SkillLocation",
    "SkillNotFoundError",
    "SkillRegistry",
    "ValidationIssue",
    "ValidationResult",
    "discover",
    "find_scopes",
    "iter_skill_files",
    "load_skill",
    "split_frontmatter",
    "validate",
]
