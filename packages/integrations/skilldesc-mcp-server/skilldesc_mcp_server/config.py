"""Pydantic configuration models for skilldesc MCP servers.

This module defines the declarative configuration schema used by the
CLI (``python -m skilldesc_mcp_server --config server.yaml``).

String values may contain ``${VAR}`` placeholders that are resolved
from environment variables at load time.  Unset variables resolve to
an empty string and emit a warning.

Example config (YAML)::

    name: Team Skills
    start: ${PROJECT_DIR}
    scopes:
      - kind: global
        root: /opt/shared-skills
    permissions:
      rules:
        internal-*: deny
        deploy-*: ask
"""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from skilldesc_core import PermissionRules, Scope, ScopeKind

_logger = logging.getLogger(__name__)


class ScopeConfig(BaseModel):
    """An explicitly configured scope root."""

    kind: ScopeKind = Field(ScopeKind.PROJECT, description="Scope kind")
    root: Path = Field(..., description="Directory containing skill/ or skills/")

    def to_scope(self) -> Scope:
        return Scope(kind=self.kind, root=self.root.expanduser().resolve())


class ServerConfig(BaseModel):
    """Top-level configuration for a skilldesc MCP server.

    Attributes:
        name: Display name shown to MCP clients during initialization.
        instructions: Optional server-level instructions sent to the
            client during the MCP handshake.
        start: Directory the upward scope walk starts from.
        include_default_scopes: Walk project/compat scopes from *start*
            and include the global scope.
        scopes: Additional explicit scopes, searched after the defaults.
        permissions: Name-glob permission rules.
    """

    name: str = Field(..., description="Display name for the MCP server")
    instructions: str | None = Field(None, description="Optional server-level instructions")
    start: Path = Field(default_factory=Path.cwd, description="Start of the scope walk")
    include_default_scopes: bool = Field(True, description="Discover the default scopes")
    scopes: list[ScopeConfig] = Field(default_factory=list, description="Explicit scopes")
    permissions: PermissionRules = Field(default_factory=PermissionRules)


def load_config(path: Path) -> ServerConfig:
    """Load a JSON or YAML config file and resolve ``${VAR}`` placeholders.

    Relative ``start`` and scope ``root`` paths are taken relative to the
    directory containing the config file.

    Raises:
        FileNotFoundError: If *path* does not exist.
        pydantic.ValidationError: If the document does not match
            :class:`ServerConfig`.
    """
    raw = Path(path).read_text(encoding="utf-8")
    if Path(path).suffix in (".yaml", ".yml"):
        data = yaml.safe_load(raw)
    else:
        data = json.loads(raw)
    config = ServerConfig(**resolve_env_vars(data or {}))

    base = Path(path).resolve().parent
    return config.model_copy(
        update={
            "start": _anchor(base, config.start),
            "scopes": [
                scope.model_copy(update={"root": _anchor(base, scope.root)})
                for scope in config.scopes
            ],
        }
    )


def _anchor(base: Path, value: Path) -> Path:
    value = value.expanduser()
    return value if value.is_absolute() else base / value


# ------------------------------------------------------------------
# Environment variable resolution
# ------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)\}")


def resolve_env_vars(data: Any) -> Any:
    """Recursively resolve ``${VAR}`` placeholders in config data.

    Walks dicts, lists, and strings.  Non-string scalars (``int``,
    ``float``, ``bool``, ``None``) are returned as-is.

    Unset environment variables resolve to an empty string and a
    warning is logged.

    Args:
        data: Parsed config data (typically the dict returned by
            ``json.loads`` or ``yaml.safe_load``).

    Returns:
        A new data structure with all ``${VAR}`` placeholders
        replaced by their environment variable values.
    """
    if isinstance(data, str):
        return _resolve_env_vars_in_string(data)
    if isinstance(data, dict):
        return {k: resolve_env_vars(v) for k, v in data.items()}
    if isinstance(data, list):
        return [resolve_env_vars(item) for item in data]
    return data


def _resolve_env_vars_in_string(value: str) -> str:
    """Replace ``${VAR_NAME}`` tokens in *value* with ``os.environ``."""

    def _replace(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name, "")
        if not env_value:
            _logger.warning(
                "Environment variable '%s' is not set or empty",
                var_name,
            )
        return env_value

    return _ENV_VAR_RE.sub(_replace, value)
