from typing import Iterable


def jaccard_similarity(first: Iterable[str], second: Iterable[str]) -> float:
    """
    Set overlap between two token collections.

    Order and duplicates are ignored. Returns 0.0 when either side is empty.
    """
    a = set(first)
    b = set(second)
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)
