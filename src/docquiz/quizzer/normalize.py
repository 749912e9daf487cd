"""Collapse raw document text into a single tag-bearing line."""

from __future__ import annotations

import re

CLOSING_MARKERS = ("</variant>", "</variantright>", "</question>")

_newline_re = re.compile(r"[\r\n]+")
_space_re = re.compile(r"\s+")


def normalize(raw: str) -> str:
    """Return ``raw`` as one whitespace-normalized line.

    Newline runs become a single space, whitespace runs collapse to one
    space, closing markers are removed and the result is trimmed. Markers
    go after the collapse, so ``a </variant> b`` keeps both spaces.
    Input that is blank or only noise comes back as ``""``.
    """

    if not raw:
        return ""
    text = _space_re.sub(" ", _newline_re.sub(" ", raw))
    for marker in CLOSING_MARKERS:
        text = text.replace(marker, "")
    return text.strip()
