"""locsync – Catalog validation.

Read-only checks, reported as errors (must fix) and warnings:

- secondary language lacks a primary key          -> error
- secondary language has a key the primary lacks  -> warning
- constant references a key the locale lacks      -> error
- locale key without a constant                   -> warning
- combined per-language files disagree            -> as above

``*_CODES`` blocks hold error codes, not i18n keys, and are ignored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

import structlog

from locsync.constants.parser import iter_blocks
from locsync.core.domains import DomainRegistry
from locsync.core.errors import NotFoundError
from locsync.locales.store import flatten

logger = structlog.get_logger()

IssueType = Literal["missing", "extra", "mismatch"]

CODES_SUFFIX = "_CODES"


@dataclass(frozen=True)
class ValidationIssue:
    type: IssueType
    file: str
    key: str
    details: str


@dataclass
class ValidationReport:
    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class Validator:
    """Validates every domain of the primary language plus the combined files."""

    def __init__(self, registry: DomainRegistry) -> None:
        self._registry = registry
        self._workspace = registry.workspace
        self._primary = registry.settings.primary_language

    def run(self) -> ValidationReport:
        """Raises NotFoundError if the primary language has no locale directory."""
        report = ValidationReport()
        languages = self._registry.get_languages()
        if self._primary not in languages:
            raise NotFoundError(f"Base language ({self._primary}) must exist")
        others = [lang for lang in languages if lang != self._primary]

        for domain in self._registry.get_domains(self._primary):
            base_path = self._registry.locale_path(domain, self._primary)
            for lang in others:
                target_path = self._registry.locale_path(domain, lang)
                if not self._workspace.exists(target_path):
                    report.errors.append(ValidationIssue(
                        "missing", target_path, "",
                        f"Missing {lang} locale file for domain: {domain}",
                    ))
                    continue
                self.compare_locale_files(report, base_path, target_path, lang)

            constants_path = self._registry.constants_path_for(domain)
            if constants_path is not None and self._workspace.exists(constants_path):
                self.validate_constants(report, constants_path, base_path, domain)

        self.validate_combined_files(report, others)

        logger.info("validate.finished", errors=len(report.errors), warnings=len(report.warnings))
        return report

    def compare_locale_files(
        self, report: ValidationReport, base_path: str, target_path: str, lang: str
    ) -> None:
        base_keys = set(flatten(self._workspace.read_json(base_path)))
        target_keys = set(flatten(self._workspace.read_json(target_path)))

        for key in sorted(base_keys - target_keys):
            report.errors.append(ValidationIssue(
                "missing", target_path, key, f"Missing {lang} translation for: {key}",
            ))
        for key in sorted(target_keys - base_keys):
            report.warnings.append(ValidationIssue(
                "extra", target_path, key,
                f"Extra {lang} translation (not in {self._primary}): {key}",
            ))

    def validate_constants(
        self, report: ValidationReport, constants_path: str, locale_path: str, domain: str
    ) -> None:
        prefix = f"{domain}."
        content = self._workspace.read_text(constants_path)
        values = {
            value[len(prefix):] if value.startswith(prefix) else value
            for block in iter_blocks(content)
            if not block.name.endswith(CODES_SUFFIX)
            for value in block.values()
        }
        locale_keys = {
            key[len(prefix):]
            for key in flatten(self._workspace.read_json(locale_path))
            if key.startswith(prefix)
        }

        for value in sorted(values - locale_keys):
            report.errors.append(ValidationIssue(
                "mismatch", constants_path, f"{prefix}{value}",
                f"Constant references non-existent key: {prefix}{value}",
            ))
        for key in sorted(locale_keys - values):
            report.warnings.append(ValidationIssue(
                "mismatch", constants_path, f"{prefix}{key}",
                f"Key exists in locale but not in constants: {prefix}{key}",
            ))

    def validate_combined_files(self, report: ValidationReport, others: list[str]) -> None:
        base_path = self._registry.combined_locale_path(self._primary)
        for lang in others:
            target_path = self._registry.combined_locale_path(lang)
            if not self._workspace.exists(base_path):
                report.errors.append(ValidationIssue(
                    "missing", base_path, "",
                    f"Missing merged base language ({self._primary}) file: {self._primary}.json",
                ))
                continue
            if not self._workspace.exists(target_path):
                report.errors.append(ValidationIssue(
                    "missing", target_path, "", f"Missing merged {lang} locale file: {lang}.json",
                ))
                continue
            self.compare_locale_files(report, base_path, target_path, lang)


def validate_catalog(registry: DomainRegistry) -> ValidationReport:
    return Validator(registry).run()
