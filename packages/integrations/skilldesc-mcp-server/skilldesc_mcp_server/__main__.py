"""Run a skilldesc MCP server from a config file.

Usage::

    python -m skilldesc_mcp_server --config server.json
    python -m skilldesc_mcp_server --config server.yaml
    python -m skilldesc_mcp_server --config server.yaml --transport streamable-http

The config file is a JSON or YAML document conforming to
:class:`~skilldesc_mcp_server.config.ServerConfig`.

Example ``server.json``::

    {
        "name": "My Skills Server",
        "start": "${PROJECT_DIR}",
        "permissions": {"rules": {"internal-*": "deny"}}
    }

MCP client integration (stdio transport)::

    {
        "command": "python",
        "args": ["-m", "skilldesc_mcp_server", "--config", "server.json"]
    }
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from skilldesc_core import SkillDescError
from skilldesc_mcp_server.config import load_config
from skilldesc_mcp_server.server import build_registry, create_mcp_server


def main() -> None:
    """Parse CLI arguments, load config, and start the MCP server."""
    parser = argparse.ArgumentParser(
        prog="skilldesc_mcp_server",
        description="Start a skilldesc MCP server from a config file.",
    )
    parser.add_argument(
        "--config",
        required=True,
        type=Path,
        help="Path to a JSON or YAML configuration file.",
    )
    parser.add_argument(
        "--transport",
        default="stdio",
        choices=["stdio", "streamable-http"],
        help="MCP transport type (default: stdio).",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level; logs go to stderr (default: WARNING).",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config_path: Path = args.config
    if not config_path.exists():
        print(f"Error: config file not found: {config_path}", file=sys.stderr)
        sys.exit(1)

    try:
        config = load_config(config_path)
        registry = build_registry(config)
    except (ValidationError, SkillDescError, OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    server = create_mcp_server(
        registry,
        name=config.name,
        instructions=config.instructions,
        permissions=config.permissions,
    )
    server.run(transport=args.transport)


if __name__ == "__main__":
    main()
