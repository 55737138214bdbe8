"""locsync – Locale Store.

CRUD on nested JSON locale trees addressed by a parsed key's ``full_path``.
Writes use 2-space indentation and a trailing newline.
"""

from __future__ import annotations

from typing import Any, Iterator

import structlog

from locsync.core.errors import DuplicateKeyError, NotFoundError
from locsync.core.keys import ParsedKey
from locsync.core.workspace import Workspace
from locsync.locales.sort import sort_object_keys

logger = structlog.get_logger()


def _walk(tree: dict, path: tuple[str, ...], create: bool, file_path: str) -> dict:
    """Return the object holding the last segment of ``path``.

    With ``create`` missing objects are added, but a translation found
    along the way is never replaced by one.
    """
    current = tree
    for i, part in enumerate(path[:-1]):
        prefix = ".".join(path[: i + 1])
        child = current.get(part)
        if isinstance(child, dict):
            current = child
            continue
        if part in current and create:
            raise DuplicateKeyError(
                f'Key "{prefix}" already holds a translation in {file_path}; '
                f'cannot nest "{".".join(path)}" under it'
            )
        if not create:
            raise NotFoundError(f'Key path "{prefix}" not found in {file_path}')
        child = {}
        current[part] = child
        current = child
    return current


def _require_leaf(parent: dict, parsed_key: ParsedKey, file_path: str) -> str:
    leaf = parsed_key.full_path[-1]
    if leaf not in parent:
        raise NotFoundError(f'Key "{parsed_key.dotted}" not found in {file_path}')
    if isinstance(parent[leaf], dict):
        raise NotFoundError(
            f'Key "{parsed_key.dotted}" is an object, not a translation, in {file_path}'
        )
    return leaf


def add_to_locale_file(
    workspace: Workspace, file_path: str, parsed_key: ParsedKey, text: str
) -> None:
    """Add a new leaf, creating intermediate objects as needed.

    Raises:
        DuplicateKeyError: If the key already exists, or a
            shorter prefix of it already holds a translation.
    """
    tree = workspace.read_json(file_path)
    path = parsed_key.full_path
    parent = _walk(tree, path, create=True, file_path=file_path)

    leaf = path[-1]
    if leaf in parent:
        raise DuplicateKeyError(f'Key "{parsed_key.dotted}" already exists in {file_path}')

    parent[leaf] = text

    # Re-sort only the immediate parent, in place so the tree keeps its reference.
    ordered = sort_object_keys(parent, path[:-1])
    parent.clear()
    parent.update(ordered)

    workspace.write_json(file_path, tree)
    logger.info("locale.key_added", file=file_path, key=parsed_key.dotted)


def update_locale_file(
    workspace: Workspace, file_path: str, parsed_key: ParsedKey, text: str
) -> None:
    """Overwrite an existing leaf in place.

    Raises:
        NotFoundError: If any segment of the key is missing,
            or the key names an object rather than a translation.
    """
    tree = workspace.read_json(file_path)
    parent = _walk(tree, parsed_key.full_path, create=False, file_path=file_path)

    leaf = _require_leaf(parent, parsed_key, file_path)

    parent[leaf] = text
    workspace.write_json(file_path, tree)
    logger.info("locale.key_updated", file=file_path, key=parsed_key.dotted)


def delete_from_locale_file(workspace: Workspace, file_path: str, parsed_key: ParsedKey) -> None:
    """Remove an existing leaf.

    Raises:
        NotFoundError: If any segment of the key is missing,
            or the key names an object rather than a translation.
    """
    tree = workspace.read_json(file_path)
    parent = _walk(tree, parsed_key.full_path, create=False, file_path=file_path)

    leaf = _require_leaf(parent, parsed_key, file_path)

    del parent[leaf]
    workspace.write_json(file_path, tree)
    logger.info("locale.key_deleted", file=file_path, key=parsed_key.dotted)


# ── Flattened views (used by sync and validate) ──────────────────────────────

def iter_leaves(tree: Any, prefix: str = "") -> Iterator[tuple[str, Any]]:
    """Yield ``(dotted_key, value)`` for every non-object leaf."""
    if not isinstance(tree, dict):
        return
    for key, value in tree.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            yield from iter_leaves(value, full_key)
        else:
            yield full_key, value


def flatten(tree: Any) -> dict[str, Any]:
    return dict(iter_leaves(tree))


def set_nested(tree: dict, dotted_key: str, value: Any) -> None:
    """Set a leaf, replacing any scalar found along the way with an object."""
    parts = dotted_key.split(".")
    current = tree
    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[parts[-1]] = value


def remove_nested(tree: dict, dotted_key: str) -> bool:
    """Remove a leaf; returns False when the path is absent."""
    parts = dotted_key.split(".")
    current = tree
    for part in parts[:-1]:
        current = current.get(part)
        if not isinstance(current, dict):
            return False
    return current.pop(parts[-1], _MISSING) is not _MISSING


_MISSING = object()


def placeholder_for(lang: str, value: Any) -> str:
    """Marked stand-in for a translation that does not exist yet."""
    return f"[{lang.upper()}] {value}"
