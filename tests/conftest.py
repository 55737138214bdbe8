"""locsync – Pytest Configuration.

Shared fixtures for all tests. ``catalog`` builds a small, fully in-sync
project under ``tmp_path``:

    src/locales/{en,hu}/{auth,common,errors}.json
    src/features/auth/lib/strings.ts
    src/lib/errors/messages.ts

Tests introduce drift on top of it.
"""

import pytest
import structlog

from config.settings import Settings
from locsync.core.domains import DomainRegistry
from locsync.core.workspace import Workspace

EN_AUTH = {
    "auth": {
        "errors": {"invalid-email": "Invalid email"},
        "labels": {
            "login-title": "Log in",
            "email-label": "Email",
            "submit-button": "Submit",
        },
        "success": {"login": "Welcome back"},
    }
}

HU_AUTH = {
    "auth": {
        "errors": {"invalid-email": "Érvénytelen e-mail"},
        "labels": {
            "login-title": "Bejelentkezés",
            "email-label": "E-mail",
            "submit-button": "Küldés",
        },
        "success": {"login": "Üdv újra"},
    }
}

EN_COMMON = {"common": {"actions": {"cancel": "Cancel", "save": "Save"}}}
HU_COMMON = {"common": {"actions": {"cancel": "Mégse", "save": "Mentés"}}}

EN_ERRORS = {"errors": {"network": {"timeout": "Timed out"}, "not-found": "Not found"}}
HU_ERRORS = {"errors": {"network": {"timeout": "Időtúllépés"}, "not-found": "Nem található"}}

AUTH_STRINGS = """\
/**
 * Auth errors messages (i18n keys)
 */
export const AUTH_ERRORS = {
  invalidEmail: 'errors.invalid-email',
} as const;

/**
 * Auth labels messages (i18n keys)
 */
export const AUTH_LABELS = {
  loginTitle: 'labels.login-title',

  emailLabel: 'labels.email-label',

  submitButton: 'labels.submit-button',
} as const;

/**
 * Auth success messages (i18n keys)
 */
export const AUTH_SUCCESS = {
  login: 'success.login',
} as const;
"""

CORE_MESSAGES = """\
/**
 * Core error messages (i18n keys)
 */
export const CORE_ERRORS = {
  networkTimeout: 'network.timeout',
  notFound: 'not-found',
} as const;

export const ERROR_CODES = {
  NOT_FOUND: 404,
} as const;
"""

AUTH_STRINGS_PATH = "src/features/auth/lib/strings.ts"
CORE_MESSAGES_PATH = "src/lib/errors/messages.ts"


@pytest.fixture(autouse=True)
def reset_structlog():
    """CLI runs reconfigure structlog against captured streams; undo that."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings(tmp_path):
    return Settings(root_dir=tmp_path, _env_file=None)


@pytest.fixture
def workspace(tmp_path):
    return Workspace(tmp_path)


@pytest.fixture
def registry(settings, workspace):
    return DomainRegistry(settings, workspace, features=["auth"])


@pytest.fixture
def catalog(workspace, tmp_path):
    """Write the in-sync catalog and return the project root."""
    locales = {
        "en": {"auth": EN_AUTH, "common": EN_COMMON, "errors": EN_ERRORS},
        "hu": {"auth": HU_AUTH, "common": HU_COMMON, "errors": HU_ERRORS},
    }
    for lang, domains in locales.items():
        for domain, tree in domains.items():
            workspace.write_json(f"src/locales/{lang}/{domain}.json", tree)

    workspace.write_text(AUTH_STRINGS_PATH, AUTH_STRINGS)
    workspace.write_text(CORE_MESSAGES_PATH, CORE_MESSAGES)
    return tmp_path


def snapshot(root):
    """Every file under ``root`` keyed by relative path."""
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob("*"))
        if path.is_file()
    }
