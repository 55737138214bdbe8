"""locsync – Constants Rewriter.

Regenerates constant blocks from parsed entries. Blocks are always rebuilt
from scratch in canonical order; the only layout carried over is what the
entries themselves hold (comments, non-string values).

    export const AUTH_LABELS = {
      loginTitle: 'labels.login-title',

      emailLabel: 'labels.email-label',
      passwordLabel: 'labels.password-label',

      submitButton: 'labels.submit-button',
    } as const;
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import cmp_to_key

import structlog

from locsync.constants.parser import (
    ConstantBlock,
    ConstantEntry,
    find_block,
    iter_blocks,
    require_block,
)
from locsync.core.errors import DuplicateKeyError, NotFoundError
from locsync.core.keys import ParsedKey, get_constant_name, get_property_name, get_relative_key
from locsync.core.workspace import Workspace
from locsync.locales.sort import comparator_for_constant, group_breaks, is_labels_constant

logger = structlog.get_logger()

INDENT = "  "
DEFAULT_PRINT_WIDTH = 80


# ──────────────────────────────────────────
# Rendering
# ──────────────────────────────────────────

def render_entry(entry: ConstantEntry, print_width: int = DEFAULT_PRINT_WIDTH) -> list[str]:
    lines = [f"{INDENT}{comment}" for comment in entry.leading_comments]
    tail = f" {entry.trailing_comment}" if entry.trailing_comment else ""

    if entry.key is None:
        lines.append(f"{INDENT}{entry.raw_value},{tail}")
        return lines

    single = f"{INDENT}{entry.raw_key}: {entry.raw_value},"
    if entry.is_string and len(single) > print_width:
        lines.append(f"{INDENT}{entry.raw_key}:")
        lines.append(f"{INDENT}{INDENT}{entry.raw_value},{tail}")
    else:
        lines.append(f"{single}{tail}")
    return lines


def sort_entries(name: str, entries: list[ConstantEntry]) -> list[ConstantEntry]:
    """Spreads keep their place at the top; keyed entries are sorted."""
    comparator = comparator_for_constant(name)
    spreads = [e for e in entries if e.key is None]
    keyed = [e for e in entries if e.key is not None]
    keyed.sort(key=cmp_to_key(lambda a, b: comparator(a.key, b.key)))
    return spreads + keyed


def render_block(
    name: str,
    entries: list[ConstantEntry],
    dangling_comments: list[str] | None = None,
    print_width: int = DEFAULT_PRINT_WIDTH,
) -> str:
    """Build ``export const NAME = { ... } as const;`` in canonical order."""
    ordered = sort_entries(name, entries)
    keyed = [e.key for e in ordered if e.key is not None]
    breaks = iter(group_breaks(keyed)) if is_labels_constant(name) else None

    lines: list[str] = []
    for entry in ordered:
        if breaks is not None and entry.key is not None and next(breaks):
            lines.append("")
        lines.extend(render_entry(entry, print_width))
    lines.extend(f"{INDENT}{comment}" for comment in dangling_comments or [])

    if not lines:
        return f"export const {name} = {{}} as const;"
    body = "\n".join(lines)
    return f"export const {name} = {{\n{body}\n}} as const;"


def block_doc_comment(domain: str, category: str) -> str:
    return f"/**\n * {domain[:1].upper()}{domain[1:]} {category} messages (i18n keys)\n */"


def append_block(content: str, domain: str, category: str, block_text: str) -> str:
    """Append a new documented block at the end of the file."""
    head = content.rstrip("\n")
    separator = "\n\n" if head else ""
    return f"{head}{separator}{block_doc_comment(domain, category)}\n{block_text}\n"


def replace_block(content: str, block: ConstantBlock, block_text: str) -> str:
    return content[:block.start] + block_text + content[block.end:]


def rerender(content: str, block: ConstantBlock, entries: list[ConstantEntry], print_width: int) -> str:
    return replace_block(
        content, block, render_block(block.name, entries, block.dangling_comments, print_width)
    )


# ──────────────────────────────────────────
# Single-key operations
# ──────────────────────────────────────────

def constant_entry_for(parsed_key: ParsedKey) -> tuple[str, ConstantEntry]:
    """Block name and entry that mirror a parsed key."""
    name = get_constant_name(parsed_key.domain, parsed_key.category)
    value = get_relative_key(parsed_key.dotted, parsed_key.domain)
    return name, ConstantEntry.string(get_property_name(parsed_key.key), value)


def add_to_constants_file(
    workspace: Workspace,
    file_path: str,
    parsed_key: ParsedKey,
    print_width: int = DEFAULT_PRINT_WIDTH,
) -> str:
    """Insert the entry for a key and re-sort its block.

    A missing block is created at the end of the file. Returns one of
    ``appended``, ``inserted`` or ``unchanged``.

    Raises:
        DuplicateKeyError: If the property exists with another value.
    """
    content = workspace.read_text(file_path)
    name, entry = constant_entry_for(parsed_key)
    block = find_block(content, name)

    if block is None:
        text = render_block(name, [entry], print_width=print_width)
        workspace.write_text(
            file_path, append_block(content, parsed_key.domain, parsed_key.category, text)
        )
        logger.info("constants.block_appended", file=file_path, constant=name, property=entry.key)
        return "appended"

    existing = block.get(entry.key)
    if existing is not None:
        if existing.value == entry.value:
            return "unchanged"
        raise DuplicateKeyError(
            f"Property {entry.key} already exists in constant {name} "
            f"with value '{existing.value or existing.raw_value}'"
        )

    workspace.write_text(file_path, rerender(content, block, [*block.entries, entry], print_width))
    logger.info("constants.property_inserted", file=file_path, constant=name, property=entry.key)
    return "inserted"


def update_constants_file(
    workspace: Workspace,
    file_path: str,
    parsed_key: ParsedKey,
    print_width: int = DEFAULT_PRINT_WIDTH,
) -> str:
    """Replace the value of an existing entry; ``replaced`` or ``unchanged``.

    Raises:
        BlockNotFoundError: If the constant block is absent.
        NotFoundError: If the block exists but has no such property.
    """
    content = workspace.read_text(file_path)
    name, entry = constant_entry_for(parsed_key)
    block = require_block(content, name, file_path)

    existing = block.get(entry.key)
    if existing is None:
        raise NotFoundError(f"Property {entry.key} not found in constant {name}")
    if existing.value == entry.value:
        return "unchanged"

    entries = [e.with_value(entry.value) if e is existing else e for e in block.entries]
    workspace.write_text(file_path, rerender(content, block, entries, print_width))
    logger.info("constants.property_replaced", file=file_path, constant=name, property=entry.key)
    return "replaced"


def delete_from_constants_file(
    workspace: Workspace,
    file_path: str,
    parsed_key: ParsedKey,
    print_width: int = DEFAULT_PRINT_WIDTH,
) -> None:
    """Remove the entry for a key.

    Raises:
        BlockNotFoundError: If the constant block is absent.
        NotFoundError: If the block exists but has no such property.
    """
    content = workspace.read_text(file_path)
    name, entry = constant_entry_for(parsed_key)
    block = require_block(content, name, file_path)

    remaining = [e for e in block.entries if e.key != entry.key]
    if len(remaining) == len(block.entries):
        raise NotFoundError(f"Property {entry.key} not found in constant {name}")

    workspace.write_text(file_path, rerender(content, block, remaining, print_width))
    logger.info("constants.property_deleted", file=file_path, constant=name, property=entry.key)


# ──────────────────────────────────────────
# Whole-file operations
# ──────────────────────────────────────────

def sort_strings_content(content: str, print_width: int = DEFAULT_PRINT_WIDTH) -> str:
    """Canonical form of every block in a strings file."""
    pieces: list[str] = []
    cursor = 0
    for block in iter_blocks(content):
        pieces.append(content[cursor:block.start])
        pieces.append(render_block(block.name, block.entries, block.dangling_comments, print_width))
        cursor = block.end
    pieces.append(content[cursor:])
    return "".join(pieces)


def sort_strings_file(
    workspace: Workspace, file_path: str, print_width: int = DEFAULT_PRINT_WIDTH
) -> bool:
    """Rewrite a strings file in canonical order; returns True if it changed."""
    content = workspace.read_text(file_path)
    updated = sort_strings_content(content, print_width)
    if updated == content:
        return False
    workspace.write_text(file_path, updated)
    return True


@dataclass
class ConstantDrift:
    """Outcome of reconciling one block against the values it should hold."""
    entries: list[ConstantEntry]
    updates: list[tuple[str, str, str]] = field(default_factory=list)  # (property, old, new)
    missing: list[tuple[str, str]] = field(default_factory=list)  # (property, value)

    @property
    def changed(self) -> bool:
        return bool(self.updates)


def reconcile_entries(entries: list[ConstantEntry], desired: dict[str, str]) -> ConstantDrift:
    """Overwrite drifted string values; list desired properties the block lacks.

    Entries not named in ``desired`` are kept untouched. Missing properties
    are reported only, never inserted.
    """
    pending = dict(desired)
    merged: list[ConstantEntry] = []
    updates: list[tuple[str, str, str]] = []

    for entry in entries:
        wanted = pending.pop(entry.key, None) if entry.key is not None else None
        if wanted is not None and entry.value != wanted:
            updates.append((entry.key, entry.value or entry.raw_value, wanted))
            entry = entry.with_value(wanted)
        merged.append(entry)

    return ConstantDrift(entries=merged, updates=updates, missing=list(pending.items()))
