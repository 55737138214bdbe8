"""locsync – Merge per-domain locale files into one file per language.

    src/locales/en/*.json  ->  src/locales/en.json
    src/locales/hu/*.json  ->  src/locales/hu.json

Top-level keys are combined shallowly in sorted filename order (later files
win on collision), then the result is key-sorted.
"""

from __future__ import annotations

import json
from typing import Any

import structlog

from locsync.core.domains import DomainRegistry
from locsync.core.errors import I18nError, ParseError
from locsync.locales.sort import sort_object_keys
from locsync.sync.sort_all import FileFailures

logger = structlog.get_logger()


def merge_locale_files(registry: DomainRegistry, lang: str) -> dict[str, Any] | None:
    """Merge one language and write its combined file.

    Returns the merged tree, or None when the language has no domain files.
    """
    workspace = registry.workspace
    domains = registry.get_domains(lang)
    if not domains:
        logger.warning("merge.no_domain_files", lang=lang)
        return None

    merged: dict[str, Any] = {}
    for domain in domains:
        path = registry.locale_path(domain, lang)
        tree = workspace.read_json(path)
        if not isinstance(tree, dict):
            raise ParseError(f"Locale file {path} must contain a JSON object")
        merged.update(tree)

    result = sort_object_keys(merged)
    output = registry.combined_locale_path(lang)
    workspace.write_json(output, result)
    logger.info("merge.file_written", lang=lang, file=output, domains=len(domains))
    return result


def merge_all(registry: DomainRegistry, failures: FileFailures | None = None) -> list[str]:
    """Merge every language; returns the combined files written.

    A language whose files cannot be read is logged and, when ``failures``
    is given, appended to it; the other languages are still merged.
    """
    written: list[str] = []
    for lang in registry.get_languages():
        output = registry.combined_locale_path(lang)
        try:
            merged = merge_locale_files(registry, lang)
        except (I18nError, OSError, json.JSONDecodeError) as exc:
            logger.error("merge.language_failed", lang=lang, file=output, error=str(exc))
            if failures is not None:
                failures.append((output, str(exc)))
            continue
        if merged is not None:
            written.append(output)
    return written
