"""locsync – Domain Registry.

Resolves a domain name to its locale file pattern and constants file.

Static domains:
    common      src/locales/{lang}/common.json       (no constants)
    errors      src/locales/{lang}/errors.json       src/lib/errors/messages.ts (flat)
    navigation  src/locales/{lang}/navigation.json   (no constants)

Feature domains (one per directory under the features root):
    <feature>   src/locales/{lang}/<feature>.json    src/features/<feature>/lib/strings.ts
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

import structlog

from config.settings import Settings
from locsync.core.keys import CORE_DOMAIN
from locsync.core.workspace import Workspace

logger = structlog.get_logger()

LANG_PLACEHOLDER = "{lang}"


@dataclass(frozen=True)
class DomainConfig:
    """File locations for one domain."""
    locales: str
    constants: str | None = None
    feature: bool = False

    def locale_path(self, lang: str) -> str:
        return self.locales.replace(LANG_PLACEHOLDER, lang)


class DomainRegistry:
    """Builds the domain map for a single invocation.

    ``features`` may be injected; otherwise it is discovered by listing the
    features root (every non-hidden subdirectory is a feature domain).
    """

    def __init__(
        self,
        settings: Settings,
        workspace: Workspace,
        features: Iterable[str] | None = None,
    ) -> None:
        self._settings = settings
        self._workspace = workspace
        self._features = sorted(features) if features is not None else None

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def workspace(self) -> Workspace:
        return self._workspace

    # ── Paths ─────────────────────────────────────────────────────────────────

    def locale_pattern(self, domain: str) -> str:
        return f"{self._settings.locales_dir}/{LANG_PLACEHOLDER}/{domain}.json"

    def locale_path(self, domain: str, lang: str) -> str:
        return self.locale_pattern(domain).replace(LANG_PLACEHOLDER, lang)

    def feature_constants_path(self, domain: str) -> str:
        return f"{self._settings.features_dir}/{domain}/{self._settings.feature_strings_path}"

    def get_constants_path(self, domain: str) -> str:
        """Constants file for a domain, whether or not it exists."""
        if domain == CORE_DOMAIN:
            return self._settings.core_strings_path
        return self.feature_constants_path(domain)

    def constants_path_for(self, domain: str) -> str | None:
        """Constants file a known domain declares, or the feature default for unknown ones."""
        config = self.get_domain_config().get(domain)
        if config is not None:
            return config.constants
        return self.get_constants_path(domain)

    def combined_locale_path(self, lang: str) -> str:
        return f"{self._settings.locales_dir}/{lang}.json"

    # ── Discovery ─────────────────────────────────────────────────────────────

    def get_features(self) -> list[str]:
        if self._features is not None:
            return list(self._features)
        return self._workspace.list_dirs(self._settings.features_dir)

    def get_domain_config(self) -> dict[str, DomainConfig]:
        """Static domains plus one entry per feature directory."""
        config: dict[str, DomainConfig] = {
            "common": DomainConfig(locales=self.locale_pattern("common")),
            CORE_DOMAIN: DomainConfig(
                locales=self.locale_pattern(CORE_DOMAIN),
                constants=self._settings.core_strings_path,
            ),
            "navigation": DomainConfig(locales=self.locale_pattern("navigation")),
        }
        for feature in self.get_features():
            config[feature] = DomainConfig(
                locales=self.locale_pattern(feature),
                constants=self.feature_constants_path(feature),
                feature=True,
            )
        return config

    def resolve(self, domain: str) -> DomainConfig:
        """Config for a domain; unknown domains are assumed to be features."""
        config = self.get_domain_config().get(domain)
        if config is None:
            logger.warning("domains.unknown_domain_assumed_feature", domain=domain)
            config = DomainConfig(
                locales=self.locale_pattern(domain),
                constants=self.feature_constants_path(domain),
                feature=True,
            )
        return config

    def get_languages(self) -> list[str]:
        """Language directories under the locales root, sorted."""
        return [
            name for name in self._workspace.list_dirs(self._settings.locales_dir)
            if "." not in name
        ]

    def get_domains(self, lang: str) -> list[str]:
        """Domain names (``*.json`` stems) for a language, sorted."""
        files = self._workspace.list_files(f"{self._settings.locales_dir}/{lang}", ".json")
        return [name[: -len(".json")] for name in files]

    def ordered_languages(self) -> list[str]:
        """Primary language first, then the others in sorted order."""
        primary = self._settings.primary_language
        languages = self.get_languages()
        return [lang for lang in languages if lang == primary] + [
            lang for lang in languages if lang != primary
        ]
