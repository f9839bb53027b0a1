"""Unified skill index with explicit registration.

The :class:`SkillRegistry` holds validated
:class:`~skilldesc_core.SkillDescriptor` records under a flat namespace
and renders them as a catalog for system-prompt injection.

Example::

    from skilldesc_core import SkillRegistry, discover, find_scopes

    report = discover(find_scopes(Path.cwd()))
    registry = SkillRegistry()
    registry.register([skill.descriptor for skill in report.valid])

    print(registry.get_skills_catalog(format="markdown"))
"""

from __future__ import annotations

from typing import Literal, overload
from xml.etree.ElementTree import Element, SubElement, indent, tostring

from skilldesc_core.descriptor import SkillDescriptor
from skilldesc_core.exceptions import DuplicateSkillError, SkillNotFoundError
from skilldesc_core.permissions import PermissionRules


class SkillRegistry:
    """Unified index over explicitly registered skills.

    Skills are added via :meth:`register`, either one at a time or as a
    batch.  The registry enforces a **flat namespace**: each name must
    be unique, and :exc:`~skilldesc_core.DuplicateSkillError` is raised
    otherwise.  The registry never picks a winner between two skills
    with the same name; that decision belongs to the caller.
    """

    def __init__(self) -> None:
        self._skills: dict[str, SkillDescriptor] = {}

    def __repr__(self) -> str:
        n = len(self._skills)
        label = "skill" if n == 1 else "skills"
        return f"SkillRegistry({n} {label})"

    def __len__(self) -> int:
        return len(self._skills)

    def __contains__(self, name: object) -> bool:
        return name in self._skills

    @overload
    def register(self, skills: SkillDescriptor) -> None: ...

    @overload
    def register(self, skills: list[SkillDescriptor]) -> None: ...

    def register(self, skills: SkillDescriptor | list[SkillDescriptor]) -> None:
        """Register one or more validated descriptors.

        **Single skill**::

            registry.register(validate("git-release", text).unwrap())

        **Batch registration**::

            registry.register([descriptor_a, descriptor_b])

        Batch registration is **atomic** -- if any name is a duplicate,
        none of the skills in the batch are registered.

        Raises:
            DuplicateSkillError: If a name is already registered or
                appears twice within the batch.
            TypeError: If anything other than a
                :class:`~skilldesc_core.SkillDescriptor` is passed.
        """
        if isinstance(skills, SkillDescriptor):
            batch = [skills]
        elif isinstance(skills, list):
            batch = skills
        else:
            raise TypeError(
                f"Expected a SkillDescriptor or a list of them, got {type(skills).__name__}"
            )

        seen: set[str] = set()
        for descriptor in batch:
            if not isinstance(descriptor, SkillDescriptor):
                raise TypeError(f"Expected a SkillDescriptor, got {type(descriptor).__name__}")
            name = descriptor.name
            if name in self._skills:
                raise DuplicateSkillError(f"Duplicate skill '{name}' -- already registered")
            if name in seen:
                raise DuplicateSkillError(f"Duplicate skill '{name}' within the batch")
            seen.add(name)

        for descriptor in batch:
            self._skills[descriptor.name] = descriptor

    def list_skills(self) -> list[SkillDescriptor]:
        """Return registered skills sorted by name."""
        return [self._skills[name] for name in sorted(self._skills)]

    def get_skill(self, name: str) -> SkillDescriptor:
        """Return the descriptor registered under *name*.

        Raises:
            SkillNotFoundError: If no skill with the given name is registered.
        """
        try:
            return self._skills[name]
        except KeyError:
            raise SkillNotFoundError(f"Skill '{name}' not found in registry") from None

    def get_skills_catalog(
        self,
        *,
        format: Literal["xml", "markdown"] = "xml",
        permissions: PermissionRules | None = None,
    ) -> str:
        """Build a skill-catalog string for system-prompt injection.

        Two output formats are supported:

        ``"xml"``
            An ``<available_skills>`` XML block.

        ``"markdown"``
            A human-readable Markdown catalog listing every skill's
            name and description.

        Only ``name`` and ``description`` are included, keeping token
        usage low.  Skills denied by *permissions* are left out.

        Raises:
            ValueError: If *format* is not ``"xml"`` or ``"markdown"``.
        """
        skills = self.list_skills()
        if permissions is not None:
            skills = [s for s in skills if permissions.is_visible(s.name)]
        if format == "xml":
            return _build_xml(skills)
        if format == "markdown":
            return _build_markdown(skills)
        msg = f"Unsupported format {format!r}; expected 'xml' or 'markdown'."
        raise ValueError(msg)


# ------------------------------------------------------------------
# Private helpers
# ------------------------------------------------------------------


def _build_xml(skills: list[SkillDescriptor]) -> str:
    """Return an ``<available_skills>`` XML block."""
    if not skills:
        return "<available_skills />"

    root = Element("available_skills")
    for skill in skills:
        skill_el = SubElement(root, "skill")
        SubElement(skill_el, "name").text = skill.name
        SubElement(skill_el, "description").text = skill.description
    indent(root, space="  ")
    return tostring(root, encoding="unicode")


def _build_markdown(skills: list[SkillDescriptor]) -> str:
    """Return a Markdown-formatted skill catalog."""
    if not skills:
        return "No skills are currently available."

    lines: list[str] = ["# Available Skills", ""]
    for skill in skills:
        lines.append(f"## {skill.name}")
        lines.append(f"- **Description**: {skill.description}")
        lines.append("")
    return "\n".join(lines)
