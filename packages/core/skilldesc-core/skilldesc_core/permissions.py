"""Name-glob permission rules for skills.

A host decides whether a skill may be loaded by looking its name up in
a mapping of glob patterns to a :class:`PermissionMode`::

    {
        "internal-*": "deny",
        "deploy-*": "ask",
        "deploy-docs": "allow"
    }

Resolution: an exact pattern wins outright; otherwise the last matching
glob in declaration order wins; otherwise :attr:`PermissionRules.default`
applies.  Patterns use :func:`fnmatch.fnmatchcase` syntax.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from fnmatch import fnmatchcase

from pydantic import BaseModel, Field


class PermissionMode(str, Enum):
    """What a host does with a skill whose name matches a rule."""

    ALLOW = "allow"
    DENY = "deny"
    ASK = "ask"


class PermissionRules(BaseModel):
    """Mapping from name-glob patterns to permission modes.

    Attributes:
        rules: Patterns in declaration order.
        default: Mode used when no pattern matches.
    """

    rules: dict[str, PermissionMode] = Field(default_factory=dict)
    default: PermissionMode = PermissionMode.ALLOW

    def mode_for(self, name: str) -> PermissionMode:
        """Return the permission mode that applies to skill *name*."""
        exact = self.rules.get(name)
        if exact is not None:
            return exact
        mode = self.default
        for pattern, pattern_mode in self.rules.items():
            if fnmatchcase(name, pattern):
                mode = pattern_mode
        return mode

    def is_visible(self, name: str) -> bool:
        """Return ``False`` for denied skills, which hosts hide entirely."""
        return self.mode_for(name) is not PermissionMode.DENY

    def filter_visible(self, names: Iterable[str]) -> list[str]:
        return [name for name in names if self.is_visible(name)]
