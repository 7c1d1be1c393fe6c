"""
Location name normalization.

The normalized name is a grouping key only; it is never displayed.
"""

import re
import unicodedata

APOSTROPHE_VARIANTS = re.compile(r"[\u2018\u2019`]")
DOUBLE_QUOTE_VARIANTS = re.compile(r"[\u201c\u201d]")
WHITESPACE_RUN = re.compile(r"\s+")

# Anything outside ASCII alphanumerics and the CJK punctuation..ideograph range
EDGE_NOISE = re.compile(r"^[^a-zA-Z0-9\u3000-\u9fff]+|[^a-zA-Z0-9\u3000-\u9fff]+$")


def normalize_location_name(name: str | None) -> str:
    """Normalize a location name for duplicate matching.

    Applies the following transformations, in order:
    - Lowercase and strip whitespace
    - Unicode NFKC normalization (collapses full-width/half-width variants)
    - Curly apostrophes and backticks become a straight apostrophe
    - Curly double quotes become a straight double quote
    - Whitespace runs collapse to a single space
    - Leading/trailing punctuation is removed

    NFKC can produce capitals from compatibility characters (``ℍ`` -> ``H``),
    so the result is lowercased again after it. This keeps the function
    idempotent.

    Args:
        name: The display name to normalize

    Returns:
        Normalized key, or empty string if input is empty/None
    """
    if not name:
        return ""

    key = name.lower().strip()
    key = unicodedata.normalize("NFKC", key).lower()
    key = APOSTROPHE_VARIANTS.sub("'", key)
    key = DOUBLE_QUOTE_VARIANTS.sub('"', key)
    key = WHITESPACE_RUN.sub(" ", key)
    return EDGE_NOISE.sub("", key)
