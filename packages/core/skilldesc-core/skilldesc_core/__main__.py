"""Check skill descriptors from the command line.

Usage::

    python -m skilldesc_core validate .agents/skill/git-release
    python -m skilldesc_core validate path/to/SKILL.md --json
    python -m skilldesc_core scan
    python -m skilldesc_core scan --start ~/work/project --no-global

``validate`` accepts skill directories or ``SKILL.md`` files; the
directory name is what the ``name`` field must match.  ``scan`` walks
the project, compat, and global scopes from ``--start`` (default: the
current directory).

The exit status is ``1`` when any skill is invalid, ``0`` otherwise.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from skilldesc_core.discovery import SKILL_FILENAME, discover, find_scopes
from skilldesc_core.validation import ValidationResult, validate


def _result_to_dict(result: ValidationResult, path: Path) -> dict[str, Any]:
    data: dict[str, Any] = {
        "directory": result.directory_name,
        "path": str(path),
        "ok": result.ok,
    }
    if result.descriptor is not None:
        data["skill"] = result.descriptor.to_frontmatter()
    data["errors"] = [issue.model_dump(mode="json") for issue in result.errors]
    return data


def _print_result(result: ValidationResult, path: Path) -> None:
    status = "ok" if result.ok else "invalid"
    print(f"{status:8s}{result.directory_name}  ({path})")
    for issue in result.errors:
        print(f"  - [{issue.kind.value}] {issue.message}")


def _cmd_validate(args: argparse.Namespace) -> int:
    failed = False
    output: list[dict[str, Any]] = []
    for target in args.paths:
        path = target / SKILL_FILENAME if target.is_dir() else target
        if not path.is_file():
            print(f"Error: {SKILL_FILENAME} not found: {path}", file=sys.stderr)
            failed = True
            continue
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            print(f"Error: cannot read {path}: {exc}", file=sys.stderr)
            failed = True
            continue
        result = validate(path.resolve().parent.name, raw)
        failed = failed or not result.ok
        if args.json:
            output.append(_result_to_dict(result, path))
        else:
            _print_result(result, path)
    if args.json:
        print(json.dumps(output, indent=2))
    return 1 if failed else 0


def _cmd_scan(args: argparse.Namespace) -> int:
    scopes = find_scopes(args.start, include_global=not args.no_global)
    report = discover(scopes)
    conflicts = report.conflicts()

    if args.json:
        data = {
            "scopes": [scope.model_dump(mode="json") for scope in scopes],
            "valid": [
                {"path": str(s.location.path), "skill": s.descriptor.to_frontmatter()}
                for s in report.valid
            ],
            "invalid": [
                {
                    "path": str(r.location.path),
                    "errors": [issue.model_dump(mode="json") for issue in r.errors],
                }
                for r in report.invalid
            ],
            "conflicts": {
                name: [str(loc.path) for loc in locations]
                for name, locations in conflicts.items()
            },
        }
        print(json.dumps(data, indent=2))
        return 1 if report.invalid else 0

    if not scopes:
        print("No skill scopes found.")
    for scope in scopes:
        print(f"scope   {scope.kind.value}: {scope.root}")
    for skill in report.valid:
        print(f"ok      {skill.descriptor.name}  ({skill.location.path})")
    for rejected in report.invalid:
        print(f"invalid {rejected.location.directory_name}  ({rejected.location.path})")
        for issue in rejected.errors:
            print(f"  - [{issue.kind.value}] {issue.message}")
    for name, locations in conflicts.items():
        print(f"conflict {name} defined {len(locations)} times:")
        for loc in locations:
            print(f"  - {loc.path}")
    return 1 if report.invalid else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skilldesc",
        description="Validate and discover SKILL.md skill descriptors.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_validate = sub.add_parser("validate", help="Validate skill directories or SKILL.md files.")
    p_validate.add_argument("paths", nargs="+", type=Path, help="Skill directories or files.")
    p_validate.add_argument("--json", action="store_true", help="Emit JSON.")
    p_validate.set_defaults(func=_cmd_validate)

    p_scan = sub.add_parser("scan", help="Discover and validate skills in all scopes.")
    p_scan.add_argument(
        "--start",
        type=Path,
        default=Path.cwd(),
        help="Directory to start the upward walk from (default: cwd).",
    )
    p_scan.add_argument("--no-global", action="store_true", help="Skip the global scope.")
    p_scan.add_argument("--json", action="store_true", help="Emit JSON.")
    p_scan.set_defaults(func=_cmd_scan)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse CLI arguments and run the selected command."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
