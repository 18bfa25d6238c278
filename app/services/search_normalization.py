from __future__ import annotations

import re

LIKE_ESCAPE = "\\"
TITLE_PADDING_CHARS = "- "

_LIKE_SPECIAL_RE = re.compile(r"([\\%_])")


def normalize_term(value: str | None) -> str:
    if value is None:
        return ""
    return value.strip()


def escape_like(term: str) -> str:
    """Escape LIKE metacharacters so ``%`` and ``_`` only ever match literally."""
    return _LIKE_SPECIAL_RE.sub(r"\\\1", term)


def contains_pattern(term: str) -> str:
    return f"%{escape_like(term)}%"


def display_title(title: str | None) -> str:
    """Strip the dash/space padding that encodes visual depth in raw titles."""
    if not title:
        return ""
    return title.lstrip(TITLE_PADDING_CHARS)
