"""MCP server builder for skilldesc.

This module creates a `FastMCP <https://pypi.org/project/mcp/>`_ server
that exposes a :class:`~skilldesc_core.SkillRegistry` as a set of MCP
tools and resources.

Tools
-----

==============================  =============================================
Tool name                       Description
==============================  =============================================
``get_skill_metadata``          Read frontmatter (name, description, ...).
``get_skill_body``              Load full skill instructions.
``validate_skill_descriptor``   Validate ``SKILL.md`` text for a directory.
==============================  =============================================

Resources
---------

==========================================  ==============================================
URI                                         Description
==========================================  ==============================================
``skills://catalog/xml``                    XML catalog of all visible skills.
``skills://catalog/markdown``               Markdown catalog of all visible skills.
``skills://tools-usage-instructions``       Workflow instructions for using the tools.
==========================================  ==============================================

Permission rules are applied throughout: denied skills are hidden from
the catalogs and behave as unknown, and skills in ``ask`` mode only
return their body once the agent passes ``confirmed=True`` after asking
the user.

Example::

    from skilldesc_mcp_server import build_registry, create_mcp_server

    registry = build_registry(config)
    server = create_mcp_server(registry, name="My Agent")
    server.run()  # stdio by default
"""

from __future__ import annotations

import json
import logging

from mcp.server.fastmcp import FastMCP

from skilldesc_core import (
    DuplicateSkillError,
    PermissionMode,
    PermissionRules,
    Scope,
    SkillDescriptor,
    SkillNotFoundError,
    SkillRegistry,
    discover,
    find_scopes,
    validate,
)
from skilldesc_mcp_server.config import ServerConfig

_logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Registry construction
# ------------------------------------------------------------------


def build_registry(config: ServerConfig) -> SkillRegistry:
    """Discover, validate, and register skills described by *config*.

    Invalid skills are logged and skipped.  A name defined in more than
    one scope is an error: the server does not choose between them.

    Raises:
        DuplicateSkillError: If discovery finds conflicting names.
    """
    scopes: list[Scope] = []
    if config.include_default_scopes:
        scopes.extend(find_scopes(config.start))
    scopes.extend(scope_cfg.to_scope() for scope_cfg in config.scopes)

    report = discover(scopes)
    conflicts = report.conflicts()
    if conflicts:
        details = "\n".join(
            f"  - {name}: " + ", ".join(str(loc.path) for loc in locations)
            for name, locations in sorted(conflicts.items())
        )
        raise DuplicateSkillError(f"Skills defined in more than one location:\n{details}")

    registry = SkillRegistry()
    registry.register([skill.descriptor for skill in report.valid])
    _logger.info(
        "Registered %d skills from %d scopes (%d rejected)",
        len(registry),
        len(scopes),
        len(report.invalid),
    )
    return registry


# ------------------------------------------------------------------
# Server builder
# ------------------------------------------------------------------


def create_mcp_server(
    registry: SkillRegistry,
    *,
    name: str,
    instructions: str | None = None,
    permissions: PermissionRules | None = None,
) -> FastMCP:
    """Build an MCP server that exposes a skill registry.

    The returned :class:`~mcp.server.fastmcp.FastMCP` server is
    transport-agnostic.  Call ``server.run()`` to start with the
    default stdio transport, or ``server.run(transport="streamable-http")``
    for HTTP.

    Args:
        registry: The :class:`~skilldesc_core.SkillRegistry` whose
            skills should be exposed via MCP.
        name: Display name for the MCP server.  Required.
        instructions: Optional server-level instructions sent to the
            MCP client during initialization.
        permissions: Optional :class:`~skilldesc_core.PermissionRules`;
            every skill is allowed when omitted.

    Returns:
        A configured :class:`~mcp.server.fastmcp.FastMCP` server
        instance, ready for ``server.run()``.
    """
    rules = permissions if permissions is not None else PermissionRules()
    mcp = FastMCP(name, instructions=instructions)

    def _visible_skill(skill_id: str) -> SkillDescriptor:
        if not rules.is_visible(skill_id):
            raise SkillNotFoundError(f"Skill '{skill_id}' not found in registry")
        return registry.get_skill(skill_id)

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    @mcp.tool()
    async def get_skill_metadata(skill_id: str) -> str:
        """Get structured metadata (name, description, and optional fields like license, compatibility, metadata) for a specific skill."""  # noqa: E501
        skill = _visible_skill(skill_id)
        data = skill.to_frontmatter()
        data["permission"] = rules.mode_for(skill_id).value
        return json.dumps(data)

    @mcp.tool()
    async def get_skill_body(skill_id: str, confirmed: bool = False) -> str:
        """Get the full instructions (markdown body) for a specific skill.

        Skills whose permission is "ask" require the user's approval:
        ask the user first, then call again with confirmed=true.
        """
        skill = _visible_skill(skill_id)
        if rules.mode_for(skill_id) is PermissionMode.ASK and not confirmed:
            return (
                f"Skill '{skill_id}' requires user confirmation before loading. "
                f"Ask the user for permission, then call get_skill_body again "
                f"with confirmed=true."
            )
        return skill.body

    @mcp.tool()
    async def validate_skill_descriptor(directory_name: str, content: str) -> str:
        """Validate SKILL.md content for the skill directory named directory_name.

        Returns JSON with "ok", the parsed "skill" frontmatter when valid,
        and a list of "errors" (kind, field, message) when not.
        """
        result = validate(directory_name, content)
        data: dict[str, object] = {
            "ok": result.ok,
            "errors": [issue.model_dump(mode="json") for issue in result.errors],
        }
        if result.descriptor is not None:
            data["skill"] = result.descriptor.to_frontmatter()
        return json.dumps(data)

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    @mcp.resource("skills://catalog/xml")
    def skills_catalog_xml() -> str:
        """XML catalog of all visible skills for system-prompt injection."""
        return registry.get_skills_catalog(format="xml", permissions=rules)

    @mcp.resource("skills://catalog/markdown")
    def skills_catalog_markdown() -> str:
        """Markdown catalog of all visible skills for system-prompt injection."""
        return registry.get_skills_catalog(format="markdown", permissions=rules)

    @mcp.resource("skills://tools-usage-instructions")
    def skills_tools_usage_instructions() -> str:
        """Workflow instructions explaining how to use the skill tools."""
        return _TOOLS_USAGE_INSTRUCTIONS

    return mcp


_TOOLS_USAGE_INSTRUCTIONS = """\
## How to Use Skills

You have access to a set of **skills**: named bundles of instructions \
for specific tasks. The available skills are listed in the catalog.

### Workflow

1. **Pick a skill** - Choose the most relevant skill from the catalog \
based on the user's request.
2. **Read metadata** - Call `get_skill_metadata(skill_id)` to get \
structured information and the skill's permission mode.
3. **Read the body** - Call `get_skill_body(skill_id)` to load the \
full instructions. Follow these instructions carefully.
4. **Confirm when asked** - If the permission mode is `ask`, get the \
user's approval before calling `get_skill_body(skill_id, confirmed=true)`.

### Authoring skills

Call `validate_skill_descriptor(directory_name, content)` to check a \
SKILL.md before saving it. The `name` field must equal the directory \
name, use lowercase letters, digits and single hyphens, and be at most \
64 characters; `description` must be 1-1024 characters.

### Important guidelines

- **Load skills on demand.** Read a skill body only when the skill is \
relevant to the current request.
- **One skill at a time.** If multiple skills apply, address them \
sequentially.\
"""
