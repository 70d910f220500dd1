"""Title canonicalization used by every comparison in the matcher."""

from __future__ import annotations

import re
import unicodedata
from typing import Final

# Combining marks are only dropped from Latin letters; kana voicing marks and
# similar must survive so native-script titles stay distinguishable.
_LATIN_UPPER_BOUND: Final[int] = 0x024F

_AMPERSAND = re.compile(r"\s*&\s*")
_NON_ALNUM = re.compile(r"[\W_]+")
_VOLUME_MARKER = re.compile(r"\b(?:tome|volume|vol|t)\b\s*\d+")
_WHITESPACE = re.compile(r"\s+")


def normalize_title(title: str) -> str:
    """Return the comparison key for ``title``.

    Two titles are the same work only if their keys are equal. The empty key is
    never considered equal to anything, see :func:`titles_equal`.
    """

    if not title:
        return ""
    value = _strip_latin_diacritics(title.casefold())
    value = _AMPERSAND.sub(" and ", value)
    value = _NON_ALNUM.sub(" ", value)
    return _drop_volume_markers(value)


def titles_equal(left: str, right: str) -> bool:
    left_key = normalize_title(left)
    return bool(left_key) and left_key == normalize_title(right)


def _strip_latin_diacritics(value: str) -> str:
    kept: list[str] = []
    base: str | None = None
    for char in unicodedata.normalize("NFD", value):
        if unicodedata.combining(char):
            if base is not None and ord(base) <= _LATIN_UPPER_BOUND:
                continue
        else:
            base = char
        kept.append(char)
    return unicodedata.normalize("NFC", "".join(kept))


def _drop_volume_markers(value: str) -> str:
    # Removing one marker can expose another ("vol vol 1 2"), iterate to a fixpoint
    # so that normalization stays idempotent.
    current = _WHITESPACE.sub(" ", value).strip()
    while True:
        stripped = _WHITESPACE.sub(" ", _VOLUME_MARKER.sub(" ", current)).strip()
        if stripped == current:
            return current
        current = stripped
