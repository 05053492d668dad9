from __future__ import annotations

import re

# ASCII so accented letters are dropped rather than kept
_UNSAFE = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")

PERSON_NAME_MAX = 50


def generate_slug(item_id: int, title: str | None) -> str:
    """Stable slug stored at import time, e.g. ``42-the-matrix``."""
    if not title:
        return f"{item_id}"
    cleaned = _UNSAFE.sub("", title.lower().strip())
    cleaned = _DASHES.sub("-", _WHITESPACE.sub("-", cleaned)).strip("-")
    return f"{item_id}-{cleaned}" if cleaned else f"{item_id}"


def person_slug(person_id: int, name: str | None) -> str:
    """Slug derived on the fly for people, who are never persisted."""
    cleaned = _UNSAFE.sub("", (name or "").lower())
    cleaned = _DASHES.sub("-", _WHITESPACE.sub("-", cleaned))
    return f"{person_id}-{cleaned[:PERSON_NAME_MAX]}"
