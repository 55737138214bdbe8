"""locsync – Command line entry point.

Usage:
    locsync add auth.errors.invalid-email "Invalid email" "Érvénytelen e-mail"
    locsync update errors.not-found "Not found"
    locsync delete auth.labels.old-label
    locsync sync --dry-run
    locsync sort-all
    locsync merge
    locsync validate

Reports go to stdout, structured logs to stderr.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Sequence

import structlog

from config.settings import get_settings
from locsync.core.domains import DomainRegistry
from locsync.core.errors import I18nError
from locsync.core.logging import setup_logging
from locsync.core.workspace import Workspace
from locsync.manage import ManageResult, add_key, delete_key, update_key
from locsync.sync.actions import SyncReport
from locsync.sync.merge import merge_all
from locsync.sync.sort_all import FileFailures, sort_all_files
from locsync.sync.synchronizer import Synchronizer
from locsync.sync.validate import ValidationReport, Validator

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="locsync",
        description="Keep locale JSON files and generated string constants in sync.",
    )
    parser.add_argument("--root", help="Project root (default: I18N_ROOT_DIR or the current directory)")
    parser.add_argument("--log-level", choices=["debug", "info", "warning", "error"], help="Log verbosity")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")

    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="Add a key to every language and its constant")
    add.add_argument("key", help="Dotted key, e.g. auth.errors.invalid-email")
    add.add_argument("texts", nargs="+", help="Primary text first, then other languages in sorted order")

    update = sub.add_parser("update", help="Change the text of an existing key")
    update.add_argument("key")
    update.add_argument("texts", nargs="+")

    delete = sub.add_parser("delete", help="Remove a key from every language and its constant")
    delete.add_argument("key")

    sync = sub.add_parser("sync", help="Reconcile all languages and constants with the primary language")
    sync.add_argument("--dry-run", action="store_true", help="Report actions without writing")

    sub.add_parser("sort-all", help="Sort every locale and strings file")
    sub.add_parser("merge", help="Regenerate the combined <lang>.json files")
    sub.add_parser("validate", help="Check languages and constants for consistency")

    return parser


# ── Report printing ───────────────────────────────────────────────────────────

def print_manage_result(verb: str, result: ManageResult) -> None:
    print(f"{verb} {result.key.dotted}")
    for path in result.locale_files:
        print(f"  {path}")
    if result.constants_file:
        print(f"  {result.constants_file} ({result.constants_outcome})")
    for warning in result.warnings:
        print(f"  Warning: {warning}")
    if verb != "Deleted":
        print(f"Use in code: {result.reference}")


def print_sync_report(report: SyncReport) -> None:
    for warning in report.warnings:
        print(f"Warning: {warning}")

    if report.in_sync:
        print("All files are in sync")
    for file, actions in report.grouped_by_file().items():
        print(f"\n{file} ({len(actions)} changes)")
        for action in actions:
            print(f"  {action.describe()}")

    if report.failures:
        print(f"\n{len(report.failures)} failure(s):")
        for failure in report.failures:
            where = f"{failure.domain} ({failure.file})" if failure.file else failure.domain
            print(f"  {where}: {failure.error}")

    if report.dry_run:
        print("\nDry run - no files were modified")
    else:
        print(f"\nSynced with {len(report.actions)} actions")
        for path in report.merged_files:
            print(f"Merged {path}")


def print_file_failures(failures: FileFailures) -> None:
    for path, error in failures:
        print(f"Failed {path}: {error}")


def print_validation_report(
report: ValidationReport) -> None:
    if report.errors:
        print(f"Errors ({len(report.errors)}):")
        for issue in report.errors:
            print(f"  {issue.file}: {issue.details}")
    if report.warnings:
        print(f"Warnings ({len(report.warnings)}):")
        for issue in report.warnings:
            print(f"  {issue.file}: {issue.details}")
    if report.ok:
        print("Validation passed")


# ── Commands ──────────────────────────────────────────────────────────────────

def run_command(args: argparse.Namespace, registry: DomainRegistry) -> int:
    if args.command == "add":
        print_manage_result("Added", add_key(registry, args.key, args.texts))
        return 0

    if args.command == "update":
        print_manage_result("Updated", update_key(registry, args.key, args.texts))
        return 0

    if args.command == "delete":
        print_manage_result("Deleted", delete_key(registry, args.key))
        return 0

    if args.command == "sync":
        report = Synchronizer(registry, dry_run=args.dry_run).run()
        print_sync_report(report)
        if not args.dry_run:
            # Informational only; a sync never fails on validation issues.
            print("\nValidation:")
            print_validation_report(Validator(registry).run())
        return 1 if report.failures else 0

    if args.command == "sort-all":
        failures: FileFailures = []
        changed = sort_all_files(registry, failures)
        for path in changed:
            print(f"Sorted {path}")
        print(f"{len(changed)} file(s) changed")
        print_file_failures(failures)
        return 1 if failures else 0

    if args.command == "merge":
        failures = []
        written = merge_all(registry, failures)
        for path in written:
            print(f"Merged {path}")
        print_file_failures(failures)
        return 1 if failures else 0

    if args.command == "validate":
        report = Validator(registry).run()
        print_validation_report(report)
        return 0 if report.ok else 1

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    overrides = {"root_dir": args.root} if args.root else {}
    settings = get_settings(**overrides)
    setup_logging(
        level=args.log_level or settings.log_level,
        fmt="json" if args.json_logs else settings.log_format,
    )

    registry = DomainRegistry(settings, Workspace(settings.root_dir))
    logger.debug("cli.command", command=args.command, root=str(registry.workspace.root))

    try:
        return run_command(args, registry)
    except (I18nError, OSError, json.JSONDecodeError) as exc:
        logger.error("cli.command_failed", command=args.command, error=str(exc))
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
