"""locsync – Synchronizer.

Reconciles the catalog against the primary language, domain by domain:

1. Locale pass: every secondary language gains a ``[LANG] <primary text>``
   placeholder for each key it lacks and loses every key the primary lacks.
2. Constants pass: drifted constant values are corrected; keys with no
   constant are reported as ``missing`` but never wired up implicitly.
   Feature domains get a new block for a category that has none yet; the
   flat ``errors`` domain never does.
3. Unless dry-running: sort every artifact, then regenerate the combined
   per-language files.

Usage:
    from locsync.sync.synchronizer import Synchronizer

    report = Synchronizer(registry, dry_run=True).run()
    for file, actions in report.grouped_by_file().items():
        ...
"""

from __future__ import annotations

import json

import structlog

from locsync.constants.parser import ConstantEntry, find_block
from locsync.constants.rewriter import append_block, reconcile_entries, render_block, rerender
from locsync.core.domains import DomainRegistry
from locsync.core.errors import I18nError, NotFoundError
from locsync.core.keys import (
    CORE_CONSTANT_NAME,
    CORE_DOMAIN,
    get_constant_name,
    get_property_name,
    get_relative_key,
)
from locsync.locales.sort import sort_keys, sort_object_keys
from locsync.locales.store import flatten, placeholder_for, remove_nested, set_nested
from locsync.sync.actions import SyncAction, SyncFailure, SyncReport
from locsync.sync.merge import merge_all
from locsync.sync.sort_all import FileFailures, sort_all_files

logger = structlog.get_logger()

# Per-file failures that must not stop the rest of the catalog.
RECOVERABLE_ERRORS = (I18nError, OSError, json.JSONDecodeError)


class Synchronizer:
    """One sync run over every domain of the primary language."""

    def __init__(self, registry: DomainRegistry, dry_run: bool = False) -> None:
        self._registry = registry
        self._workspace = registry.workspace
        self._settings = registry.settings
        self._dry_run = dry_run

    def run(self) -> SyncReport:
        """Sync all domains and return the report.

        Raises:
            NotFoundError: If the primary language has no locale directory.
        """
        report = SyncReport(dry_run=self._dry_run)
        primary = self._settings.primary_language
        languages = self._registry.get_languages()
        if primary not in languages:
            raise NotFoundError(
                f"Primary language '{primary}' not found in {self._settings.locales_dir}"
            )
        secondaries = [lang for lang in languages if lang != primary]

        logger.info("sync.started", primary=primary, languages=languages, dry_run=self._dry_run)
        for domain in self._registry.get_domains(primary):
            logger.info("sync.domain_started", domain=domain)
            for lang in secondaries:
                target = self._registry.locale_path(domain, lang)
                self._guarded(report, domain, target, self.sync_locale_files, domain, lang, report)
            constants_path = self._registry.constants_path_for(domain)
            if constants_path is not None:
                self._guarded(report, domain, constants_path, self.sync_constants, domain, report)

        if not self._dry_run:
            self._guarded(report, "catalog", None, self._sort_files, report)
            self._guarded(report, "catalog", None, self._merge_files, report)

        logger.info(
            "sync.finished",
            actions=len(report.actions),
            failures=len(report.failures),
            dry_run=self._dry_run,
        )
        return report

    def _guarded(self, report: SyncReport, domain: str, file: str | None, step, *args) -> None:
        try:
            step(*args)
        except RECOVERABLE_ERRORS as exc:
            logger.error("sync.domain_failed", domain=domain, file=file, error=str(exc))
            report.failures.append(SyncFailure(domain=domain, file=file, error=str(exc)))

    def _sort_files(self, report: SyncReport) -> None:
        failures: FileFailures = []
        report.sorted_files = sort_all_files(self._registry, failures)
        self._record_file_failures(report, failures)

    def _merge_files(self, report: SyncReport) -> None:
        failures: FileFailures = []
        report.merged_files = merge_all(self._registry, failures)
        self._record_file_failures(report, failures)

    @staticmethod
    def _record_file_failures(report: SyncReport, failures: FileFailures) -> None:
        for path, error in failures:
            report.failures.append(SyncFailure(domain="catalog", file=path, error=error))

    # ── Locale pass ───────────────────────────────────────────────────────────

    def sync_locale_files(self, domain: str, lang: str, report: SyncReport) -> None:
        """Placeholder-fill missing keys and prune orphans in one secondary file."""
        primary = self._settings.primary_language
        source_path = self._registry.locale_path(domain, primary)
        target_path = self._registry.locale_path(domain, lang)

        source = flatten(self._workspace.read_json(source_path))
        target_tree = self._workspace.read_json(target_path)
        target = flatten(target_tree)

        additions = {
            key: placeholder_for(lang, value) for key, value in source.items() if key not in target
        }
        removals = [key for key in target if key not in source]

        for key, placeholder in additions.items():
            report.record(SyncAction(type="add", file=target_path, key=key, value=placeholder))
        for key in removals:
            report.record(SyncAction(type="remove", file=target_path, key=key))

        # Removals first: an orphan scalar may sit where an addition needs an object.
        for key in removals:
            remove_nested(target_tree, key)
        for key, placeholder in additions.items():
            set_nested(target_tree, key, placeholder)

        if (additions or removals) and not self._dry_run:
            self._workspace.write_json(target_path, sort_object_keys(target_tree))

        logger.info(
            "sync.locale_synced",
            domain=domain,
            lang=lang,
            added=len(additions),
            removed=len(removals),
        )

    # ── Constants pass ────────────────────────────────────────────────────────

    def sync_constants(self, domain: str, report: SyncReport) -> None:
        """Bring a domain's constants file in line with the primary locale."""
        constants_path = self._registry.constants_path_for(domain)
        if not self._workspace.exists(constants_path):
            message = f"Constants file not found: {constants_path}"
            logger.warning("sync.constants_file_missing", domain=domain, file=constants_path)
            report.warnings.append(message)
            return

        content = self._workspace.read_text(constants_path)
        locale_path = self._registry.locale_path(domain, self._settings.primary_language)
        keys = list(flatten(self._workspace.read_json(locale_path)))

        if domain == CORE_DOMAIN:
            updated = self._sync_flat_constants(constants_path, content, keys, report)
        else:
            updated = self._sync_category_constants(constants_path, content, domain, keys, report)

        if updated != content and not self._dry_run:
            self._workspace.write_text(constants_path, updated)

    def _sync_flat_constants(
        self, constants_path: str, content: str, keys: list[str], report: SyncReport
    ) -> str:
        desired: dict[str, str] = {}
        for key in sort_keys([k for k in keys if "." in k]):
            relative = get_relative_key(key, CORE_DOMAIN)
            desired[get_property_name(relative)] = relative

        block = find_block(content, CORE_CONSTANT_NAME)
        if block is None:
            message = f"Constant {CORE_CONSTANT_NAME} not found in {constants_path}, skipping sync"
            logger.warning("sync.constant_block_missing", constant=CORE_CONSTANT_NAME, file=constants_path)
            report.warnings.append(message)
            return content

        return self._apply_drift(constants_path, content, block, desired, report)

    def _sync_category_constants(
        self, constants_path: str, content: str, domain: str, keys: list[str], report: SyncReport
    ) -> str:
        categorized: dict[str, dict[str, str]] = {}
        for key in keys:
            parts = key.split(".")
            if len(parts) < 3 or parts[0] != domain:
                continue
            desired = categorized.setdefault(parts[1], {})
            desired[get_property_name(".".join(parts[2:]))] = get_relative_key(key, domain)

        for category, desired in categorized.items():
            name = get_constant_name(domain, category)
            block = find_block(content, name)

            if block is None:
                entries = [ConstantEntry.string(prop, value) for prop, value in desired.items()]
                block_text = render_block(name, entries, print_width=self._settings.print_width)
                content = append_block(content, domain, category, block_text)
                report.record(
                    SyncAction(
                        type="add",
                        file=constants_path,
                        key=name,
                        detail=f"new constant with {len(entries)} entries",
                    )
                )
                logger.info("sync.constant_block_created", constant=name, file=constants_path)
                continue

            content = self._apply_drift(constants_path, content, block, desired, report)

        return content

    def _apply_drift(self, constants_path, content, block, desired, report) -> str:
        drift = reconcile_entries(block.entries, desired)

        for prop, value in drift.missing:
            report.record(
                SyncAction(
                    type="missing",
                    file=constants_path,
                    key=f"{block.name}.{prop}",
                    value=value,
                    detail=f"key {prop} not present in {block.name}",
                )
            )
        if not drift.changed:
            return content

        for prop, old, new in drift.updates:
            report.record(
                SyncAction(
                    type="update",
                    file=constants_path,
                    key=f"{block.name}.{prop}",
                    value=new,
                    detail=f"{prop}: {old} → {new}",
                )
            )
        return rerender(content, block, drift.entries, self._settings.print_width)


def sync_catalog(registry: DomainRegistry, dry_run: bool = False) -> SyncReport:
    """Run a full sync."""
    return Synchronizer(registry, dry_run=dry_run).run()
