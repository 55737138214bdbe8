"""Tests for key parsing and constant naming."""

import pytest

from locsync.core.errors import FormatError, I18nError
from locsync.core.keys import (
    get_constant_name,
    get_property_name,
    get_relative_key,
    kebab_to_camel,
    parse_key,
)


class TestParseKey:
    def test_domain_category_key(self):
        """A three-part key splits into domain, category and key."""
        parsed = parse_key("auth.errors.invalid-email")
        assert parsed.domain == "auth"
        assert parsed.category == "errors"
        assert parsed.key == "invalid-email"
        assert parsed.full_path == ("auth", "errors", "invalid-email")
        assert not parsed.is_flat

    def test_deeper_key_keeps_remainder(self):
        parsed = parse_key("auth.labels.form.email-label")
        assert parsed.category == "labels"
        assert parsed.key == "form.email-label"
        assert parsed.dotted == "auth.labels.form.email-label"

    def test_flat_errors_domain(self):
        """errors.x.y always has category 'errors' and key 'x.y'."""
        parsed = parse_key("errors.network.timeout")
        assert parsed.domain == "errors"
        assert parsed.category == "errors"
        assert parsed.key == "network.timeout"
        assert parsed.is_flat

    def test_two_part_errors_key(self):
        parsed = parse_key("errors.not-found")
        assert parsed.key == "not-found"
        assert parsed.full_path == ("errors", "not-found")

    @pytest.mark.parametrize("key", ["", "single", "two.parts", "auth..key", "auth.errors.", "errors."])
    def test_malformed_keys_rejected(self, key):
        with pytest.raises(FormatError):
            parse_key(key)

    def test_format_error_is_catalog_error(self):
        with pytest.raises(I18nError, match="domain.category.key"):
            parse_key("two.parts")


class TestNaming:
    def test_core_constant_name(self):
        assert get_constant_name("errors", "errors") == "CORE_ERRORS"
        assert get_constant_name("errors", "anything") == "CORE_ERRORS"

    def test_mapped_categories(self):
        assert get_constant_name("auth", "errors") == "AUTH_ERRORS"
        assert get_constant_name("auth", "labels") == "AUTH_LABELS"
        assert get_constant_name("billing", "success") == "BILLING_SUCCESS"

    def test_unknown_category_is_upper_cased(self):
        assert get_constant_name("auth", "hints") == "AUTH_HINTS"

    def test_kebab_case_domain(self):
        assert get_constant_name("user-profile", "labels") == "USER_PROFILE_LABELS"

    def test_relative_key(self):
        assert get_relative_key("auth.errors.invalid-email", "auth") == "errors.invalid-email"
        assert get_relative_key("common.actions.save", "auth") == "common.actions.save"

    def test_kebab_to_camel(self):
        assert kebab_to_camel("verify-2fa-code-sent") == "verify2faCodeSent"
        assert kebab_to_camel("simple") == "simple"
        assert kebab_to_camel("email-label") == "emailLabel"

    def test_property_name_folds_nested_segments(self):
        assert get_property_name("form.email-label") == "formEmailLabel"
        assert get_property_name("not-found") == "notFound"
