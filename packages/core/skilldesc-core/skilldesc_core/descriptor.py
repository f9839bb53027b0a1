"""Immutable record for a validated ``SKILL.md``.

Instances are produced by :func:`~skilldesc_core.validate`; construct
one directly only in tests or when the fields are already known to be
valid.  The model does not re-check the naming rules.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class SkillDescriptor(BaseModel):
    """Parsed frontmatter plus body of a single skill.

    Attributes:
        name: Skill identifier, equal to its directory name.
        description: What the skill does and when to use it.
        license: Optional licence identifier.
        compatibility: Optional free-text compatibility note.
        metadata: Optional string-to-string mapping, read-only.
        allowed_tools: Tools the skill is pre-approved to use
            (frontmatter key ``allowed-tools``).
        body: Markdown text after the closing ``---`` delimiter.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    license: str | None = None
    compatibility: str | None = None
    metadata: Mapping[str, str] = Field(default_factory=dict, validate_default=True)
    allowed_tools: tuple[str, ...] = Field(default=(), alias="allowed-tools")
    body: str = ""

    @field_validator("metadata")
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @field_serializer("metadata")
    def _dump_metadata(self, value: Mapping[str, str]) -> dict[str, str]:
        return dict(value)

    def to_frontmatter(self) -> dict[str, Any]:
        """Return the frontmatter mapping using on-disk key names.

        Unset optional fields are omitted and the body is excluded, so
        the result is what a host would show during discovery.
        """
        data: dict[str, Any] = {"name": self.name, "description": self.description}
        if self.license is not None:
            data["license"] = self.license
        if self.compatibility is not None:
            data["compatibility"] = self.compatibility
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        if self.allowed_tools:
            data["allowed-tools"] = list(self.allowed_tools)
        return data

    def __hash__(self) -> int:
        return hash(
            (
                self.name,
                self.description,
                self.license,
                self.compatibility,
                frozenset(self.metadata.items()),
                self.allowed_tools,
                self.body,
            )
        )

    def __repr__(self) -> str:
        return f"SkillDescriptor({self.name!r})"
