"""Cleanup of text read from a payslip region."""

import re

_WHITESPACE_RE = re.compile(r"\s+")
# Anything other than word characters, whitespace, comma, period and hyphen
_DISALLOWED_RE = re.compile(r"[^\w\s,.-]")


def _collapse(text: str) -> str:
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_text(text: str | None) -> str | None:
    """Normalize an extracted field for the report.

    Trims, collapses whitespace runs to a single space, uppercases, and drops
    punctuation other than comma, period and hyphen. Accented letters and Ñ
    are word characters and are kept.

    Args:
        text: Raw text from the extractor, or None when nothing was found.

    Returns:
        The normalized string, or None when nothing meaningful remains.
    """
    if not text:
        return None

    # str.upper() can emit combining marks ("ǰ" -> "J" + caron); uppercase
    # before stripping so they go in the same pass
    cleaned = _collapse(text).upper()
    # Removing characters can leave doubled or edge spaces behind
    cleaned = _collapse(_DISALLOWED_RE.sub("", cleaned))
    return cleaned or None
