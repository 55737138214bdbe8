"""locsync – Sort every i18n artifact in place.

- JSON locale files (per domain and combined): suffix rank for ``labels``
  objects, alphabetical elsewhere
- Strings files: same order, blank lines between label suffix groups

A file that cannot be read or parsed is skipped and reported; it never
stops the remaining files from being sorted.
"""

from __future__ import annotations

import json

import structlog

from locsync.constants.rewriter import sort_strings_file
from locsync.core.domains import DomainRegistry
from locsync.core.errors import I18nError
from locsync.core.workspace import Workspace, dump_json
from locsync.locales.sort import sort_object_keys

logger = structlog.get_logger()

# (path, error message) for every file that could not be sorted.
FileFailures = list[tuple[str, str]]


def sort_json_file(workspace: Workspace, file_path: str) -> bool:
    """Rewrite a JSON locale file in canonical order; True if it changed."""
    content = workspace.read_text(file_path)
    updated = dump_json(sort_object_keys(workspace.read_json(file_path)))
    if updated == content:
        return False
    workspace.write_text(file_path, updated)
    return True


def sort_all_files(registry: DomainRegistry, failures: FileFailures | None = None) -> list[str]:
    """Sort every locale and strings file; returns the files that changed.

    Files that do not exist are skipped. Files that fail are logged and,
    when ``failures`` is given, appended to it.
    """
    workspace = registry.workspace
    print_width = registry.settings.print_width
    languages = registry.get_languages()

    json_files = [
        registry.locale_path(domain, lang)
        for lang in languages
        for domain in registry.get_domains(lang)
    ]
    json_files += [registry.combined_locale_path(lang) for lang in languages]

    strings_files = [registry.feature_constants_path(f) for f in registry.get_features()]
    strings_files.append(registry.settings.core_strings_path)

    changed: list[str] = []
    for path in json_files + strings_files:
        if not workspace.exists(path):
            continue
        try:
            if path in json_files:
                was_changed = sort_json_file(workspace, path)
            else:
                was_changed = sort_strings_file(workspace, path, print_width)
        except (I18nError, OSError, json.JSONDecodeError) as exc:
            logger.error("sort.file_failed", file=path, error=str(exc))
            if failures is not None:
                failures.append((path, str(exc)))
            continue
        if was_changed:
            changed.append(path)
            logger.info("sort.file_sorted", file=path)
        else:
            logger.debug("sort.file_unchanged", file=path)

    return changed
