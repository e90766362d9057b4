#!/usr/bin/env python3
"""
slugify.py
----------
Slug generation for tags and accessibility features.

A slug is the canonical, URL-safe deduplication key of a label: two labels
whose names produce the same slug are the same label.

Rules, applied in order:
    - Lowercase
    - Trim surrounding whitespace
    - Drop every character that is not a word character, whitespace or hyphen
    - Collapse runs of whitespace, underscores and hyphens into one hyphen
    - Strip leading/trailing hyphens

Usage:
    from accessdb.utils.slugify import slugify

    slugify("Screen Reader Support!")         # "screen-reader-support"
    slugify("  multiple   spaces--here  ")    # "multiple-spaces-here"
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
from typing import Optional

# ASCII word characters, but any Unicode whitespace counts as a separator
_DISALLOWED = re.compile(r"[^A-Za-z0-9_\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(name: Optional[str]) -> str:
    """
    Convert a label name to its slug.

    Total and deterministic; applying it to its own output returns the
    same value.

    Args:
        name: Display name of a tag or feature

    Returns:
        Slug string (possibly empty)

    Examples:
        >>> slugify("Screen Reader Support!")
        'screen-reader-support'
        >>> slugify("High_Contrast Mode")
        'high-contrast-mode'
        >>> slugify("!!!")
        ''
    """
    if not name:
        return ""

    text = name.lower().strip()
    text = _DISALLOWED.sub("", text)
    text = _SEPARATORS.sub("-", text)
    return text.strip("-")
