"""Derive stable, document-unique heading identifiers.

Heading ids double as link fragments, so they must be stable across renders
and unique within one rendered document. Uniqueness is tracked in a ``seen``
set owned by the caller; each full document render starts with a fresh set.

Examples
--------
>>> seen: set[str] = set()
>>> [slugify("Setup", seen) for _ in range(3)]
['setup', 'setup-2', 'setup-3']
>>> slugify("What's new in v2.0?", set())
'whats-new-in-v20'
"""

from __future__ import annotations

import re
import unicodedata

PUNCTUATION_PATTERN = re.compile(r"[^\w\s-]")
SEPARATOR_PATTERN = re.compile(r"[\s-]+")
FALLBACK_SLUG = "section"


def slug_base(text: str) -> str:
    """Return the slug for ``text`` without collision handling."""
    normalized = unicodedata.normalize("NFKC", text).strip().lower()
    no_punctuation = PUNCTUATION_PATTERN.sub("", normalized)
    slug = SEPARATOR_PATTERN.sub("-", no_punctuation).strip("-")
    return slug or FALLBACK_SLUG


def slugify(text: str, seen: set[str]) -> str:
    """Return a slug for ``text`` that is not yet in ``seen``.

    Parameters
    ----------
    text : str
        Plain heading text.
    seen : set[str]
        Ids already assigned in the current document render. The returned id
        is added to it.

    Returns
    -------
    str
        The lower-cased, punctuation-free, hyphen-separated slug, suffixed with
        ``-2``, ``-3``, ... when an earlier heading already claimed it.
    """
    base = slug_base(text)
    candidate = base
    suffix = 2
    while candidate in seen:
        candidate = f"{base}-{suffix}"
        suffix += 1
    seen.add(candidate)
    return candidate


__all__ = ["slug_base", "slugify"]
