"""URL-friendly slug helpers used when a person is created without a slug."""

import re

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_EDGE_HYPHENS = re.compile(r"^-+|-+$")


def slugify(value: str, fallback: str = "user") -> str:
    """
    Build a slug from an email address or a display name.

    Only the part before "@" is used, lowercased, with every character
    outside [a-z0-9] replaced by "-" and leading/trailing hyphens stripped.

    >>> slugify("John.Doe+test@example.com")
    'john-doe-test'
    >>> slugify("Albert Einstein")
    'albert-einstein'
    >>> slugify("@example.com", "anonymous")
    'anonymous'
    """
    prefix = (value or "").split("@")[0]
    if not prefix:
        return fallback

    slug = _EDGE_HYPHENS.sub("", _NON_ALNUM.sub("-", prefix.lower()))
    return slug or fallback
