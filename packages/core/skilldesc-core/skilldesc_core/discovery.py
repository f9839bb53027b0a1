"""Locate and validate skills on the local filesystem.

A skill lives at ``<scope>/skill/<name>/SKILL.md`` or
``<scope>/skills/<name>/SKILL.md``, where ``<scope>`` is one of:

* a **project** root -- e.g. ``.agents/`` in the working directory or
  any ancestor up to the repository boundary;
* a **compat** root used by a related tool -- e.g. ``.claude/`` in the
  same places;
* the user's **global** configuration root (``~/.config/agents``).

Expected layout::

    .agents/
    ├── skill/
    │   └── git-release/
    │       └── SKILL.md      # YAML frontmatter + markdown body
    └── skills/
        └── api-style/
            └── SKILL.md

:func:`discover` validates every candidate independently and reports
valid and rejected skills side by side.  Skills defined more than once
are surfaced through :meth:`DiscoveryReport.conflicts`; which one wins
is left to the caller.

File I/O is synchronous because skill files are small.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from skilldesc_core.descriptor import SkillDescriptor
from skilldesc_core.validation import ErrorKind, ValidationIssue, ValidationResult, validate

_logger = logging.getLogger(__name__)

SKILL_FILENAME = "SKILL.md"
SKILL_DIRNAMES: tuple[str, ...] = ("skill", "skills")

DEFAULT_PROJECT_DIRNAMES: tuple[str, ...] = (".agents",)
DEFAULT_COMPAT_DIRNAMES: tuple[str, ...] = (".claude",)

#: Default maximum ``SKILL.md`` size in bytes (1 MB).
DEFAULT_MAX_FILE_BYTES: int = 1024 * 1024


class ScopeKind(str, Enum):
    PROJECT = "project"
    GLOBAL = "global"
    COMPAT = "compat"


class Scope(BaseModel):
    """A filesystem root under which skills are discovered."""

    model_config = ConfigDict(frozen=True)

    kind: ScopeKind
    root: Path


class SkillLocation(BaseModel):
    """Where a candidate ``SKILL.md`` was found."""

    model_config = ConfigDict(frozen=True)

    scope: Scope
    directory_name: str
    path: Path


class DiscoveredSkill(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: SkillLocation
    descriptor: SkillDescriptor


class RejectedSkill(BaseModel):
    model_config = ConfigDict(frozen=True)

    location: SkillLocation
    errors: tuple[ValidationIssue, ...]


class DiscoveryReport(BaseModel):
    """Result of :func:`discover`, in scope order."""

    valid: list[DiscoveredSkill] = Field(default_factory=list)
    invalid: list[RejectedSkill] = Field(default_factory=list)

    def conflicts(self) -> dict[str, list[SkillLocation]]:
        """Return names defined by more than one valid skill.

        Returns:
            Mapping of skill name to every location defining it, in
            discovery order.  Empty when there are no conflicts.
        """
        by_name: dict[str, list[SkillLocation]] = {}
        for skill in self.valid:
            by_name.setdefault(skill.descriptor.name, []).append(skill.location)
        return {name: locs for name, locs in by_name.items() if len(locs) > 1}


def default_global_root(home: Path | None = None) -> Path:
    """Return the user-global scope root, ``~/.config/agents``."""
    return (home if home is not None else Path.home()) / ".config" / "agents"


def find_repository_boundary(start: Path) -> Path | None:
    """Return the nearest ancestor of *start* (inclusive) containing ``.git``."""
    start = Path(start).resolve()
    for level in (start, *start.parents):
        if (level / ".git").exists():
            return level
    return None


def find_scopes(
    start: Path,
    *,
    home: Path | None = None,
    project_dirnames: Iterable[str] = DEFAULT_PROJECT_DIRNAMES,
    compat_dirnames: Iterable[str] = DEFAULT_COMPAT_DIRNAMES,
    global_root: Path | None = None,
    include_global: bool = True,
) -> list[Scope]:
    """Collect existing scopes from *start* up to the repository boundary.

    The walk starts at *start* and stops after the first directory that
    contains ``.git``; without one it continues to the filesystem root.
    At each level, project directories come before compat directories.
    The global root is appended last when it exists.

    Args:
        start: Working directory to start from.
        home: Home directory used for the default global root.
        project_dirnames: Names of project-local scope directories.
        compat_dirnames: Names of compatibility scope directories.
        global_root: Explicit global root; defaults to
            :func:`default_global_root`.
        include_global: Set to ``False`` to skip the global root.

    Returns:
        Scopes ordered nearest first, without duplicates.
    """
    start = Path(start).resolve()
    project_dirnames = tuple(project_dirnames)
    compat_dirnames = tuple(compat_dirnames)

    scopes: list[Scope] = []
    seen: set[Path] = set()

    def add(kind: ScopeKind, root: Path) -> None:
        resolved = root.resolve()
        if resolved in seen or not resolved.is_dir():
            return
        seen.add(resolved)
        scopes.append(Scope(kind=kind, root=resolved))
        _logger.debug("Found %s scope at %s", kind.value, resolved)

    for level in (start, *start.parents):
        for dirname in project_dirnames:
            add(ScopeKind.PROJECT, level / dirname)
        for dirname in compat_dirnames:
            add(ScopeKind.COMPAT, level / dirname)
        if (level / ".git").exists():
            break

    if include_global:
        if global_root is None:
            global_root = default_global_root(home)
        add(ScopeKind.GLOBAL, global_root)
    return scopes


def iter_skill_files(scope: Scope) -> Iterator[SkillLocation]:
    """Yield every ``<root>/{skill,skills}/<name>/SKILL.md`` in *scope*.

    Directories are visited in sorted order and hidden directories are
    skipped.  The filename must be ``SKILL.md`` exactly, even on
    case-insensitive filesystems.

    An unreadable container is logged and skipped.  An unreadable skill
    directory is still yielded so that :func:`load_skill` reports it.
    """
    for container_name in SKILL_DIRNAMES:
        container = scope.root / container_name
        if not container.is_dir():
            continue
        try:
            skill_dirs = sorted(container.iterdir())
        except OSError as exc:
            _logger.warning("Cannot list %s: %s", container, exc)
            continue
        for skill_dir in skill_dirs:
            if not skill_dir.is_dir() or skill_dir.name.startswith("."):
                continue
            try:
                has_skill_md = any(p.name == SKILL_FILENAME for p in skill_dir.iterdir())
            except OSError as exc:
                _logger.debug("Cannot list %s: %s", skill_dir, exc)
                has_skill_md = True
            if not has_skill_md:
                _logger.debug("Skipping %s: no %s", skill_dir, SKILL_FILENAME)
                continue
            yield SkillLocation(
                scope=scope,
                directory_name=skill_dir.name,
                path=skill_dir / SKILL_FILENAME,
            )


def load_skill(
    location: SkillLocation,
    *,
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
) -> ValidationResult:
    """Read and validate the ``SKILL.md`` at *location*.

    Unreadable, oversized, or non-UTF-8 files are reported as a
    ``MALFORMED_HEADER`` issue instead of raising.
    """
    try:
        raw = _read_skill_md(location.path, max_file_bytes)
    except (OSError, UnicodeDecodeError) as exc:
        issue = ValidationIssue(
            kind=ErrorKind.MALFORMED_HEADER,
            message=f"Skill '{location.directory_name}': cannot read {location.path}: {exc}",
        )
        return ValidationResult(directory_name=location.directory_name, errors=(issue,))
    return validate(location.directory_name, raw)


def discover(
    scopes: Iterable[Scope],
    *,
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
) -> DiscoveryReport:
    """Validate every skill found in *scopes*.

    Each candidate is validated independently; one broken skill never
    hides another.  Rejected skills are logged at WARNING.

    Args:
        scopes: Scopes to search, typically from :func:`find_scopes`.
        max_file_bytes: Per-file size limit.

    Returns:
        A :class:`DiscoveryReport`.
    """
    report = DiscoveryReport()
    for scope in scopes:
        for location in iter_skill_files(scope):
            result = load_skill(location, max_file_bytes=max_file_bytes)
            if result.descriptor is not None:
                report.valid.append(
                    DiscoveredSkill(location=location, descriptor=result.descriptor)
                )
                continue
            report.invalid.append(RejectedSkill(location=location, errors=result.errors))
            _logger.warning(
                "Rejected skill at %s: %s",
                location.path,
                "; ".join(issue.message for issue in result.errors),
            )

    _logger.debug(
        "Discovered %d valid and %d invalid skills",
        len(report.valid),
        len(report.invalid),
    )
    return report


def _read_skill_md(path: Path, max_file_bytes: int) -> str:
    size = path.stat().st_size
    if size > max_file_bytes:
        raise OSError(f"{SKILL_FILENAME} exceeds maximum size ({max_file_bytes} bytes)")
    return path.read_text(encoding="utf-8")
