"""
Jaccard similarity between token sets.

Formula:
    J(A, B) = |A ∩ B| / |A ∪ B|

Properties:
    - Bounded: 0.0 <= J <= 1.0
    - Symmetric: J(A, B) == J(B, A)
    - J(A, A) == 1.0 for any non-empty A
    - Empty union (both sets empty) is defined as 0.0, not an error
"""

from typing import AbstractSet


def jaccard_similarity(a: AbstractSet[str], b: AbstractSet[str]) -> float:
    """
    Compute Jaccard similarity of two token sets.

    Args:
        a: First token set
        b: Second token set

    Returns:
        Overlap score in [0, 1]

    Example:
        >>> jaccard_similarity({"the", "cat", "sat"}, {"cat"})
        0.3333333333333333
        >>> jaccard_similarity(set(), set())
        0.0
    """
    union = len(a | b)
    if union == 0:
        return 0.0

    return len(a & b) / union
