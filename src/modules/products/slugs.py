"""URL slug derivation for catalog entries."""

from __future__ import annotations

import re

from django.utils.text import slugify

_SEPARATOR_RUN = re.compile(r"[-_]+")


def derive_slug(name: str) -> str:
    """Return the URL-safe slug for ``name``.

    Accents are transliterated to ASCII, everything is lowercased and any
    run of separators collapses into a single ``-``.  ``@`` reads as "at",
    so ``"Support@Home"`` becomes ``"support-at-home"``.  Characters with
    no ASCII form are dropped, which can leave an empty slug.
    """
    value = slugify(name.replace("@", " at "))
    return _SEPARATOR_RUN.sub("-", value).strip("-")
