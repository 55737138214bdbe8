"""Tests for key CRUD across languages and constants."""

import pytest

from conftest import AUTH_STRINGS, AUTH_STRINGS_PATH, CORE_MESSAGES_PATH
from locsync.constants.parser import find_block
from locsync.core.errors import (
    DuplicateKeyError,
    FormatError,
    LocaleFileNotFoundError,
    NotFoundError,
)
from locsync.locales.store import flatten
from locsync.manage import KeyManager, add_key, delete_key, update_key

EN_AUTH = "src/locales/en/auth.json"
HU_AUTH = "src/locales/hu/auth.json"


def leaves(workspace, path):
    return flatten(workspace.read_json(path))


class TestAdd:
    def test_add_everywhere(self, catalog, registry, workspace):
        result = add_key(registry, "auth.errors.account-locked", ["Account locked", "Fiók zárolva"])

        assert leaves(workspace, EN_AUTH)["auth.errors.account-locked"] == "Account locked"
        assert leaves(workspace, HU_AUTH)["auth.errors.account-locked"] == "Fiók zárolva"
        assert result.locale_files == [EN_AUTH, HU_AUTH]
        assert result.constants_file == AUTH_STRINGS_PATH
        assert result.constants_outcome == "inserted"
        assert result.reference == "AUTH_ERRORS.accountLocked"

    def test_missing_texts_get_placeholders(self, catalog, registry, workspace):
        add_key(registry, "auth.errors.account-locked", ["Account locked"])
        assert leaves(workspace, HU_AUTH)["auth.errors.account-locked"] == "[HU] Account locked"

    def test_too_many_texts(self, catalog, registry, workspace):
        with pytest.raises(FormatError):
            add_key(registry, "auth.errors.x", ["a", "b", "c"])
        assert "auth.errors.x" not in leaves(workspace, EN_AUTH)

    def test_empty_text(self, catalog, registry):
        with pytest.raises(FormatError):
            add_key(registry, "auth.errors.x", [""])

    def test_duplicate(self, catalog, registry, workspace):
        with pytest.raises(DuplicateKeyError):
            add_key(registry, "auth.errors.invalid-email", ["Again"])
        assert workspace.read_text(AUTH_STRINGS_PATH) == AUTH_STRINGS

    def test_flat_errors_key(self, catalog, registry, workspace):
        result = add_key(registry, "errors.server-down", ["Server down", "A szerver nem elérhető"])

        assert result.reference == "CORE_ERRORS.serverDown"
        block = find_block(workspace.read_text(CORE_MESSAGES_PATH), "CORE_ERRORS")
        assert block.get("serverDown").value == "server-down"
        assert leaves(workspace, "src/locales/en/errors.json")["errors.server-down"] == "Server down"

    def test_new_category_appends_block(self, catalog, registry, workspace):
        result = add_key(registry, "auth.info.hint", ["Hint"])
        assert result.constants_outcome == "appended"
        assert "export const AUTH_INFO = {\n  hint: 'info.hint',\n} as const;\n" in (
            workspace.read_text(AUTH_STRINGS_PATH)
        )

    def test_domain_without_constants(self, catalog, registry, workspace):
        result = add_key(registry, "common.actions.delete", ["Delete", "Törlés"])
        assert result.constants_file is None
        assert result.warnings == []
        assert leaves(workspace, "src/locales/hu/common.json")["common.actions.delete"] == "Törlés"

    def test_missing_constants_file_is_warning(self, catalog, registry, tmp_path):
        (tmp_path / AUTH_STRINGS_PATH).unlink()
        result = add_key(registry, "auth.errors.x", ["X"])
        assert result.constants_file is None
        assert result.warnings == [f"Constants file not found: {AUTH_STRINGS_PATH} (skipped)"]

    def test_unknown_domain_without_files(self, catalog, registry):
        with pytest.raises(LocaleFileNotFoundError, match="src/locales/en/billing.json"):
            add_key(registry, "billing.errors.declined", ["Declined"])

    def test_texts_by_language_order(self, catalog, registry):
        manager = KeyManager(registry)
        assert manager.texts_by_language(["A"]) == {"en": "A", "hu": "[HU] A"}
        assert manager.texts_by_language(["A"], fill_missing=False) == {"en": "A"}


class TestUpdate:
    def test_update_all_languages(self, catalog, registry, workspace):
        result = update_key(registry, "auth.success.login", ["Welcome!", "Üdvözöljük!"])
        assert leaves(workspace, EN_AUTH)["auth.success.login"] == "Welcome!"
        assert leaves(workspace, HU_AUTH)["auth.success.login"] == "Üdvözöljük!"
        assert result.constants_outcome == "unchanged"

    def test_primary_only_keeps_translations(self, catalog, registry, workspace):
        result = update_key(registry, "auth.success.login", ["Welcome!"])
        assert leaves(workspace, HU_AUTH)["auth.success.login"] == "Üdv újra"
        assert result.locale_files == [EN_AUTH]

    def test_update_missing_key(self, catalog, registry):
        with pytest.raises(NotFoundError):
            update_key(registry, "auth.success.logout", ["Bye"])

    def test_repairs_drifted_constant(self, catalog, registry, workspace):
        workspace.write_text(
            AUTH_STRINGS_PATH, AUTH_STRINGS.replace("'success.login'", "'success.log-in'")
        )
        result = update_key(registry, "auth.success.login", ["Welcome!"])
        assert result.constants_outcome == "replaced"
        assert workspace.read_text(AUTH_STRINGS_PATH) == AUTH_STRINGS

    def test_unmirrored_constant_is_warning(self, catalog, registry, workspace):
        workspace.write_text(
            AUTH_STRINGS_PATH, AUTH_STRINGS.replace("  login: 'success.login',\n", "")
        )
        result = update_key(registry, "auth.success.login", ["Welcome!"])
        assert result.warnings == ["Property login not found in constant AUTH_SUCCESS"]
        assert leaves(workspace, EN_AUTH)["auth.success.login"] == "Welcome!"


class TestDelete:
    def test_delete_everywhere(self, catalog, registry, workspace):
        result = delete_key(registry, "auth.labels.email-label")

        assert "auth.labels.email-label" not in leaves(workspace, EN_AUTH)
        assert "auth.labels.email-label" not in leaves(workspace, HU_AUTH)
        assert "emailLabel" not in workspace.read_text(AUTH_STRINGS_PATH)
        assert result.constants_outcome == "deleted"

    def test_delete_missing_key(self, catalog, registry, workspace):
        with pytest.raises(NotFoundError):
            delete_key(registry, "auth.labels.nope")
        assert workspace.read_text(AUTH_STRINGS_PATH) == AUTH_STRINGS

    def test_partial_failure_leaves_earlier_languages(self, catalog, registry, workspace):
        """Languages are written one by one; there is no rollback."""
        hu = workspace.read_json(HU_AUTH)
        del hu["auth"]["errors"]["invalid-email"]
        workspace.write_json(HU_AUTH, hu)

        with pytest.raises(NotFoundError):
            delete_key(registry, "auth.errors.invalid-email")
        assert "auth.errors.invalid-email" not in leaves(workspace, EN_AUTH)
        assert workspace.read_text(AUTH_STRINGS_PATH) == AUTH_STRINGS
