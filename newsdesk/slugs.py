"""
URL slugs for post titles and tag names.
"""

from __future__ import annotations

import re

_DISALLOWED = re.compile(r"[^A-Za-z0-9_\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(text: str | None) -> str:
    """Turn arbitrary text into a lowercase, hyphen-delimited token.

    Never raises. Input with no word characters yields ``""``. Applying the
    function to its own output returns the output unchanged.

    >>> slugify("Belfast Storm Warning")
    'belfast-storm-warning'
    >>> slugify("Local News!")
    'local-news'
    >>> slugify("  ")
    ''
    """
    if not text:
        return ""
    value = _DISALLOWED.sub("", text.lower().strip())
    value = _SEPARATORS.sub("-", value)
    return value.strip("-")
