"""
String and set similarity primitives.

Edit distance is the classic Levenshtein distance (unit cost for insert,
delete and substitute), computed by rapidfuzz.
"""

from typing import Iterable
from rapidfuzz.distance import Levenshtein


def normalize_name(name: str) -> str:
    """Lowercase and trim a display name for comparison."""
    if not name:
        return ""
    return name.strip().lower()


def edit_distance(a: str, b: str) -> int:
    """
    Minimum number of single-character edits turning a into b.

    Args:
        a: First string
        b: Second string

    Returns:
        Non-negative edit distance
    """
    return Levenshtein.distance(a or "", b or "")


def name_similarity(a: str, b: str) -> float:
    """
    Similarity of two names in [0, 1].

    Defined as 1 - distance / max(len) over the trimmed, lowercased names.
    Returns 0.0 if either name is empty after trimming.
    """
    str1 = normalize_name(a)
    str2 = normalize_name(b)

    if not str1 or not str2:
        return 0.0

    distance = edit_distance(str1, str2)
    max_length = max(len(str1), len(str2))
    return 1.0 - (distance / max_length)


def shares_any(values1: Iterable[str], values2: Iterable[str]) -> bool:
    """True if the two collections have at least one value in common."""
    return not set(values1).isdisjoint(values2)
