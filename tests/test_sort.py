"""Tests for the sort engine."""

from locsync.locales.sort import (
    compare_default,
    compare_label_keys,
    comparator_for_constant,
    comparator_for_path,
    get_label_suffix_rank,
    group_breaks,
    sort_keys,
    sort_object_keys,
)


class TestSortObjectKeys:
    def test_top_level_alphabetical(self):
        result = sort_object_keys({"z": 1, "a": 2, "m": 3})
        assert list(result) == ["a", "m", "z"]
        assert result == {"a": 2, "m": 3, "z": 1}

    def test_nested_levels_sort_independently(self):
        result = sort_object_keys({"b": {"y": 1, "x": 2}, "a": {"d": 3, "c": 4}})
        assert list(result) == ["a", "b"]
        assert list(result["a"]) == ["c", "d"]
        assert list(result["b"]) == ["x", "y"]

    def test_non_objects_pass_through(self):
        assert sort_object_keys("text") == "text"
        assert sort_object_keys([3, 1, 2]) == [3, 1, 2]

    def test_labels_children_sorted_by_suffix(self):
        tree = {"auth": {"labels": {"submit-button": "S", "email-label": "E", "login-title": "L"}}}
        result = sort_object_keys(tree)
        assert list(result["auth"]["labels"]) == ["login-title", "email-label", "submit-button"]

    def test_case_insensitive_lowercase_first(self):
        assert sort_keys(["b", "B", "a", "A"]) == ["a", "A", "b", "B"]


class TestLabelRanks:
    def test_suffix_ranks(self):
        assert get_label_suffix_rank("loginTitle") == 0
        assert get_label_suffix_rank("email-label") == 4
        assert get_label_suffix_rank("submit_button") == 6

    def test_first_suffix_in_table_wins(self):
        """'subtitle' also ends in 'title', which comes first in the table."""
        assert get_label_suffix_rank("signupSubtitle") == 0
        assert get_label_suffix_rank("page-subtitle") == 0
        assert get_label_suffix_rank("signupSubtitle") == get_label_suffix_rank("loginTitle")

    def test_unknown_and_bare_suffix_fall_back(self):
        fallback = get_label_suffix_rank("whatever")
        assert fallback == 15
        assert get_label_suffix_rank("title") == fallback

    def test_label_order(self):
        """title=0, label=4, button=6."""
        ordered = sort_keys(["loginButton", "emailLabel", "loginTitle"], compare_label_keys)
        assert ordered == ["loginTitle", "emailLabel", "loginButton"]

    def test_same_rank_falls_back_to_alphabetical(self):
        assert compare_label_keys("passwordLabel", "emailLabel") > 0
        assert compare_default("a", "b") < 0

    def test_comparator_selection(self):
        assert comparator_for_path(("auth", "labels")) is compare_label_keys
        assert comparator_for_path(("auth", "errors")) is compare_default
        assert comparator_for_path(()) is compare_default
        assert comparator_for_constant("AUTH_LABELS") is compare_label_keys
        assert comparator_for_constant("AUTH_ERRORS") is compare_default


class TestGroupBreaks:
    def test_break_on_every_rank_change(self):
        keys = ["loginTitle", "emailLabel", "passwordLabel", "submitButton"]
        assert group_breaks(keys) == [False, True, False, True]

    def test_singleton_groups_still_separated(self):
        assert group_breaks(["loginTitle", "submitButton"]) == [False, True]

    def test_empty(self):
        assert group_breaks([]) == []

    def test_subtitle_shares_the_title_group(self):
        keys = sort_keys(["signupSubtitle", "emailLabel", "loginTitle"], compare_label_keys)
        assert keys == ["loginTitle", "signupSubtitle", "emailLabel"]
        assert group_breaks(keys) == [False, False, True]
