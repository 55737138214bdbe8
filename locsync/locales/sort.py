"""locsync – Sort Engine.

Canonical ordering shared by JSON locale trees and constant blocks.

Default order is a locale-style alphabetical order. UI label keys (children
of a ``labels`` object, or entries of a ``*_LABELS`` block) are ordered by
their semantic suffix first, e.g.::

    loginTitle, signupSubtitle, emailLabel, passwordPlaceholder, loginButton
"""

from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Callable, Sequence

# Lower index = earlier. '' is the bucket for keys without a known suffix.
LABEL_SUFFIX_ORDER: tuple[str, ...] = (
    "title",
    "subtitle",
    "description",
    "tab",
    "label",
    "placeholder",
    "button",
    "link",
    "name",
    "text",
    "message",
    "error",
    "success",
    "info",
    "warning",
    "",
)

LABELS_SEGMENT = "labels"
LABELS_CONSTANT_SUFFIX = "_LABELS"

_FALLBACK_RANK = LABEL_SUFFIX_ORDER.index("")

Comparator = Callable[[str, str], int]


def locale_sort_key(value: str) -> tuple[str, str]:
    """Case-insensitive first, lowercase before uppercase on ties."""
    return value.casefold(), value.swapcase()


def compare_default(a: str, b: str) -> int:
    ka, kb = locale_sort_key(a), locale_sort_key(b)
    return (ka > kb) - (ka < kb)


def get_label_suffix_rank(key: str) -> int:
    """Rank of a label key's semantic suffix (lower sorts first).

    The table is scanned in order and the first suffix the key ends with
    wins, so ``signupSubtitle`` ranks as 'title'. A key equal to a suffix
    (``title``) has no suffix of its own and takes the fallback rank.
    """
    normalized = key.lower()
    for rank, suffix in enumerate(LABEL_SUFFIX_ORDER):
        if suffix and len(normalized) > len(suffix) and normalized.endswith(suffix):
            return rank
    return _FALLBACK_RANK


def compare_label_keys(a: str, b: str) -> int:
    rank_a = get_label_suffix_rank(a)
    rank_b = get_label_suffix_rank(b)
    if rank_a != rank_b:
        return rank_a - rank_b
    return compare_default(a, b)


def is_labels_constant(constant_name: str) -> bool:
    return constant_name.endswith(LABELS_CONSTANT_SUFFIX)


def comparator_for_path(path: Sequence[str]) -> Comparator:
    """Label comparator when the immediate parent segment is ``labels``."""
    if path and path[-1] == LABELS_SEGMENT:
        return compare_label_keys
    return compare_default


def comparator_for_constant(constant_name: str) -> Comparator:
    return compare_label_keys if is_labels_constant(constant_name) else compare_default


def sort_keys(keys: Sequence[str], comparator: Comparator = compare_default) -> list[str]:
    return sorted(keys, key=cmp_to_key(comparator))


def sort_object_keys(value: Any, path: Sequence[str] = ()) -> Any:
    """Recursively reorder dict keys; non-dict values pass through unchanged."""
    if not isinstance(value, dict):
        return value

    comparator = comparator_for_path(path)
    return {
        key: sort_object_keys(value[key], (*path, key))
        for key in sort_keys(list(value), comparator)
    }


def group_breaks(keys: Sequence[str]) -> list[bool]:
    """For each key, whether a blank separator line precedes it.

    A separator is emitted whenever the suffix rank changes from the
    previously emitted key, regardless of group size.
    """
    breaks: list[bool] = []
    prev_rank: int | None = None
    for key in keys:
        rank = get_label_suffix_rank(key)
        breaks.append(prev_rank is not None and rank != prev_rank)
        prev_rank = rank
    return breaks
