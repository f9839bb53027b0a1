"""Frontmatter parsing for ``SKILL.md`` content.

A ``SKILL.md`` file starts with a YAML block delimited by two lines that
contain only ``---``.  Everything after the closing delimiter is the
Markdown body and is returned verbatim.
"""

from __future__ import annotations

from typing import Any

import yaml

from skilldesc_core.exceptions import MalformedFrontmatterError

#: Upper bound for the YAML block, in UTF-8 bytes (64 KiB).
MAX_FRONTMATTER_BYTES: int = 64 * 1024

_DELIMITER = "---"
_BOM = "\ufeff"

_TYPED_SCALAR_TAGS = frozenset(
    {
        "tag:yaml.org,2002:bool",
        "tag:yaml.org,2002:int",
        "tag:yaml.org,2002:float",
        "tag:yaml.org,2002:timestamp",
    }
)


class _FrontmatterLoader(yaml.SafeLoader):
    """Safe loader that keeps plain scalars such as ``2024`` or ``on`` as text.

    Only ``null`` is still resolved implicitly, so an empty value reads
    as absent.
    """


_FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag not in _TYPED_SCALAR_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == _DELIMITER


def split_frontmatter(raw: str) -> tuple[dict[str, Any], str]:
    """Split ``SKILL.md`` content into YAML frontmatter and markdown body.

    The first line must be ``---``; the block ends at the next line that
    is exactly ``---``.  Both ``\\n`` and ``\\r\\n`` line endings are
    accepted and a leading byte-order mark is ignored.  A ``---`` line
    inside the body is ordinary Markdown and is left untouched.

    Plain scalars stay strings: ``name: 2024`` yields ``"2024"`` and
    ``description: yes`` yields ``"yes"``.  Empty values and ``null``
    yield ``None``.

    Args:
        raw: Full text content of a ``SKILL.md`` file.

    Returns:
        A ``(frontmatter_dict, body_str)`` tuple.  *frontmatter_dict*
        is ``{}`` when the block is empty.

    Raises:
        MalformedFrontmatterError: If either delimiter is missing, the
            block exceeds :data:`MAX_FRONTMATTER_BYTES`, or the YAML does
            not parse to a mapping.

    Example::

        meta, body = split_frontmatter(Path("SKILL.md").read_text())
        print(meta.get("name"))
    """
    if raw.startswith(_BOM):
        raw = raw[len(_BOM) :]

    lines = raw.split("\n")
    if not _is_delimiter(lines[0]):
        raise MalformedFrontmatterError("missing opening '---' delimiter on the first line")

    for index in range(1, len(lines)):
        if _is_delimiter(lines[index]):
            closing = index
            break
    else:
        raise MalformedFrontmatterError("missing closing '---' delimiter")

    fm_text = "\n".join(lines[1:closing])
    body = "\n".join(lines[closing + 1 :])

    if len(fm_text.strip().encode("utf-8")) > MAX_FRONTMATTER_BYTES:
        raise MalformedFrontmatterError(
            f"frontmatter exceeds maximum size ({MAX_FRONTMATTER_BYTES} bytes)"
        )

    try:
        metadata = yaml.load(fm_text, Loader=_FrontmatterLoader)
    except yaml.YAMLError as exc:
        raise MalformedFrontmatterError(f"frontmatter is not valid YAML: {exc}") from exc

    if metadata is None:
        return {}, body
    if not isinstance(metadata, dict):
        raise MalformedFrontmatterError(
            f"frontmatter must be a mapping, got {type(metadata).__name__}"
        )
    return metadata, body
