"""Text normalization helpers."""

import re

_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(value: str) -> str:
    """Strip and collapse internal runs of whitespace to a single space."""
    return _WHITESPACE.sub(" ", value).strip()


def normalize_description(value: str) -> str:
    """Normalize a description for duplicate comparison.

    Comparison is case-insensitive and ignores whitespace differences.
    """
    return collapse_whitespace(value).casefold()
