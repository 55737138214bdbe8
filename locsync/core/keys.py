"""locsync – Translation Key Model.

Parses dotted keys and derives the names used by the generated constants.

    auth.errors.invalid-email  ->  domain=auth, category=errors, key=invalid-email
    errors.not-found           ->  domain=errors, category=errors, key=not-found (flat)
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from locsync.core.errors import FormatError

# The flat core domain: keys are errors.<key> without a category segment.
CORE_DOMAIN = "errors"
CORE_CONSTANT_NAME = "CORE_ERRORS"

CATEGORY_MAPPING: dict[str, str] = {
    "errors": "ERRORS",
    "success": "SUCCESS",
    "labels": "LABELS",
    "warnings": "WARNINGS",
    "info": "INFO",
}

_DASH_CHAR_RE = re.compile(r"-([a-z0-9])")


@dataclass(frozen=True)
class ParsedKey:
    """A translation key split into its addressing parts."""
    domain: str
    category: str
    key: str
    full_path: tuple[str, ...]

    @property
    def dotted(self) -> str:
        return ".".join(self.full_path)

    @property
    def is_flat(self) -> bool:
        return self.domain == CORE_DOMAIN


def parse_key(key: str) -> ParsedKey:
    """Parse a dotted translation key.

    Raises:
        FormatError: If the key has too few segments or an empty segment.
    """
    parts = key.split(".")

    if parts[0] == CORE_DOMAIN:
        if len(parts) < 2 or not all(parts):
            raise FormatError(
                f"Invalid key format for errors domain: '{key}'. "
                "Expected: errors.key (e.g., errors.not-found)"
            )
        return ParsedKey(
            domain=CORE_DOMAIN,
            category=CORE_DOMAIN,
            key=".".join(parts[1:]),
            full_path=tuple(parts),
        )

    if len(parts) < 3:
        raise FormatError(
            f"Invalid key format: '{key}'. "
            "Expected: domain.category.key (e.g., auth.errors.invalid-email)"
        )
    if not all(parts):
        raise FormatError(
            f"Invalid key format: '{key}'. Domain, category and key segments are required."
        )

    return ParsedKey(
        domain=parts[0],
        category=parts[1],
        key=".".join(parts[2:]),
        full_path=tuple(parts),
    )


def get_constant_name(domain: str, category: str) -> str:
    """Return the constant block name for a domain/category pair.

    ``errors``/* -> ``CORE_ERRORS``; ``auth``/``errors`` -> ``AUTH_ERRORS``.
    """
    if domain == CORE_DOMAIN:
        return CORE_CONSTANT_NAME

    category_name = CATEGORY_MAPPING.get(category) or category.upper()
    return f"{_upper_snake(domain)}_{_upper_snake(category_name)}"


def get_relative_key(full_key: str, domain: str) -> str:
    """Strip a leading ``{domain}.`` prefix from a dotted key."""
    prefix = f"{domain}."
    if full_key.startswith(prefix):
        return full_key[len(prefix):]
    return full_key


def kebab_to_camel(value: str) -> str:
    """Convert kebab-case to camelCase; digits after a dash stay as they are."""
    return _DASH_CHAR_RE.sub(lambda m: m.group(1).upper(), value)


def get_property_name(key: str) -> str:
    """Constant property name for a key relative to its category.

    Nested segments are folded in: ``form.email-label`` -> ``formEmailLabel``.
    """
    return kebab_to_camel(key.replace(".", "-"))


def _upper_snake(value: str) -> str:
    return value.replace("-", "_").upper()
