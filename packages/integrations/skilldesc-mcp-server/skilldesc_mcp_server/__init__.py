"""MCP server integration for skilldesc.

This package bridges :mod:`skilldesc_core` and the `Model Context
Protocol <https://modelcontextprotocol.io>`_, providing:

* :func:`create_mcp_server` -- builds a FastMCP server from a
  :class:`~skilldesc_core.SkillRegistry`.
* :func:`build_registry` -- discovers and validates skills described by
  a :class:`~skilldesc_mcp_server.config.ServerConfig`.
* CLI entry-point (``python -m skilldesc_mcp_server --config server.yaml``)
  for zero-code server startup.

Quick start (programmatic)::

    from skilldesc_core import SkillRegistry, validate
    from skilldesc_mcp_server import create_mcp_server

    registry = SkillRegistry()
    registry.register(validate("git-release", text).unwrap())
    server = create_mcp_server(registry, name="My Agent")
    server.run()  # stdio by default
"""

from skilldesc_mcp_server.config import ServerConfig, load_config
from skilldesc_mcp_server.server import build_registry, create_mcp_server

__all__ = [
    "ServerConfig",
    "build_registry",
    "create_mcp_server",
    "load_config",
]
