"""Text comparison utility functions for the data pipeline."""

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(a: str, b: str) -> int:
    """Classic edit distance: insertions, deletions and substitutions each cost 1."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Edit-distance similarity between two strings.

    Defined as ``(max_len - distance) / max_len`` where ``max_len`` is the
    length of the longer string. Identical strings (including two empty
    strings) score 1.0.

    Args:
        a: First string
        b: Second string

    Returns:
        Similarity in [0.0, 1.0], symmetric in its arguments
    """
    if a == b:
        return 1.0

    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0

    return (max_len - levenshtein_distance(a, b)) / max_len


def truncate(text: str | None, max_length: int = 50) -> str:
    """Shorten text for console tables, marking the cut with an ellipsis."""
    if not text:
        return ""
    if len(text) > max_length:
        return text[:max_length - 3] + "..."
    return text
