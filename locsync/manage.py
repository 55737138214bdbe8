"""locsync – Translation key management.

CRUD for one key across every language plus its constant mirror.

Usage:
    locsync add auth.errors.new-error "New error" "Új hiba"
    locsync update auth.success.login "Welcome!" "Üdvözöljük!"
    locsync delete auth.errors.old-error

Languages are processed primary first; files are written one at a time, so
a failure part-way leaves earlier languages already updated.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import structlog

from locsync.constants.rewriter import (
    add_to_constants_file,
    delete_from_constants_file,
    update_constants_file,
)
from locsync.core.domains import DomainConfig, DomainRegistry
from locsync.core.errors import FormatError, LocaleFileNotFoundError, NotFoundError
from locsync.core.keys import ParsedKey, get_constant_name, get_property_name, parse_key
from locsync.locales.store import (
    add_to_locale_file,
    delete_from_locale_file,
    placeholder_for,
    update_locale_file,
)

logger = structlog.get_logger()


@dataclass
class ManageResult:
    """What a CRUD command touched."""
    key: ParsedKey
    locale_files: list[str] = field(default_factory=list)
    constants_file: str | None = None
    constants_outcome: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def reference(self) -> str:
        """How application code refers to the key."""
        return f"{get_constant_name(self.key.domain, self.key.category)}.{get_property_name(self.key.key)}"


class KeyManager:
    """Applies add/update/delete for a key through the domain registry."""

    def __init__(self, registry: DomainRegistry) -> None:
        self._registry = registry
        self._workspace = registry.workspace
        self._settings = registry.settings

    # ── Helpers ───────────────────────────────────────────────────────────────

    def texts_by_language(self, texts: Sequence[str], fill_missing: bool = True) -> dict[str, str]:
        """Map positional texts onto languages, primary first.

        With ``fill_missing`` languages beyond the given texts get a placeholder
        of the primary text; otherwise they are left out.
        """
        if not texts or not all(texts):
            raise FormatError("At least one non-empty text (for the primary language) is required")
        languages = self._registry.ordered_languages()
        if len(texts) > len(languages):
            raise FormatError(
                f"Got {len(texts)} texts but only {len(languages)} languages: {', '.join(languages)}"
            )
        by_lang = dict(zip(languages, texts))
        if fill_missing:
            for lang in languages[len(texts):]:
                by_lang[lang] = placeholder_for(lang, texts[0])
        return by_lang

    def _locale_paths(self, config: DomainConfig) -> list[tuple[str, str]]:
        paths = []
        for lang in self._registry.ordered_languages():
            path = config.locale_path(lang)
            if not self._workspace.exists(path):
                raise LocaleFileNotFoundError(path)
            paths.append((lang, path))
        return paths

    def _constants_path(self, config: DomainConfig, result: ManageResult) -> str | None:
        if config.constants is None:
            return None
        if not self._workspace.exists(config.constants):
            message = f"Constants file not found: {config.constants} (skipped)"
            logger.warning("manage.constants_file_missing", file=config.constants)
            result.warnings.append(message)
            return None
        return config.constants

    # ── Operations ────────────────────────────────────────────────────────────

    def add(self, key: str, texts: Sequence[str]) -> ManageResult:
        parsed = parse_key(key)
        result = ManageResult(key=parsed)
        config = self._registry.resolve(parsed.domain)
        by_lang = self.texts_by_language(texts)
        logger.info("manage.add", key=key, domain=parsed.domain, category=parsed.category)

        for lang, path in self._locale_paths(config):
            add_to_locale_file(self._workspace, path, parsed, by_lang[lang])
            result.locale_files.append(path)

        constants_path = self._constants_path(config, result)
        if constants_path is not None:
            result.constants_file = constants_path
            result.constants_outcome = add_to_constants_file(
                self._workspace, constants_path, parsed, print_width=self._settings.print_width
            )
        return result

    def update(self, key: str, texts: Sequence[str]) -> ManageResult:
        parsed = parse_key(key)
        result = ManageResult(key=parsed)
        config = self._registry.resolve(parsed.domain)
        by_lang = self.texts_by_language(texts, fill_missing=False)
        logger.info("manage.update", key=key, domain=parsed.domain, category=parsed.category)

        for lang, path in self._locale_paths(config):
            if lang not in by_lang:
                continue
            update_locale_file(self._workspace, path, parsed, by_lang[lang])
            result.locale_files.append(path)

        # The constant value only depends on the key; repair it if it drifted.
        constants_path = self._constants_path(config, result)
        if constants_path is not None:
            result.constants_file = constants_path
            try:
                result.constants_outcome = update_constants_file(
                    self._workspace, constants_path, parsed, print_width=self._settings.print_width
                )
            except NotFoundError as exc:
                logger.warning("manage.constant_not_mirrored", key=key, error=str(exc))
                result.warnings.append(str(exc))
        return result

    def delete(self, key: str) -> ManageResult:
        parsed = parse_key(key)
        result = ManageResult(key=parsed)
        config = self._registry.resolve(parsed.domain)
        logger.info("manage.delete", key=key, domain=parsed.domain, category=parsed.category)

        for _, path in self._locale_paths(config):
            delete_from_locale_file(self._workspace, path, parsed)
            result.locale_files.append(path)

        constants_path = self._constants_path(config, result)
        if constants_path is not None:
            delete_from_constants_file(
                self._workspace, constants_path, parsed, print_width=self._settings.print_width
            )
            result.constants_file = constants_path
            result.constants_outcome = "deleted"
        return result


def add_key(registry: DomainRegistry, key: str, texts: Sequence[str]) -> ManageResult:
    return KeyManager(registry).add(key, texts)


def update_key(registry: DomainRegistry, key: str, texts: Sequence[str]) -> ManageResult:
    return KeyManager(registry).update(key, texts)


def delete_key(registry: DomainRegistry, key: str) -> ManageResult:
    return KeyManager(registry).delete(key)
