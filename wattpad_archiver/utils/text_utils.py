# -*- coding: utf-8 -*-
"""
Text utilities - normalize typographic characters in scraped story text
"""

import re

# Ký tự typographic của Wattpad -> ASCII
TYPOGRAPHIC_REPLACEMENTS = (
    ("…", "..."),   # …
    ("“", '"'),     # “
    ("”", '"'),     # ”
    ("’", "'"),     # ’
)

_NON_ASCII = re.compile(r"[^\x00-\x7F]")


def normalize_typography(text: str) -> str:
    """Replace ellipsis, curly quotes and curly apostrophes with plain ASCII."""
    if not text:
        return ""
    for glyph, plain in TYPOGRAPHIC_REPLACEMENTS:
        text = text.replace(glyph, plain)
    return text


def strip_non_ascii(text: str) -> str:
    """Drop every character outside the ASCII table."""
    if not text:
        return ""
    return _NON_ASCII.sub("", text)


def clean_summary(text: str) -> str:
    """
    Summary text: normalize typography first (so … becomes ... instead of
    disappearing), then remove whatever non-ASCII is left.
    """
    return strip_non_ascii(normalize_typography(text))
