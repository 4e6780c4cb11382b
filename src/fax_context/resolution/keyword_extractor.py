"""
Keyword extraction for lexical comparison of fax text.
"""
import re
from typing import FrozenSet, List

STOP_WORDS: FrozenSet[str] = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for",
    "of", "with", "by", "is", "are", "was", "were", "be", "been", "have",
    "has", "had", "do", "does", "did", "will", "would", "could", "should",
})

DEFAULT_MAX_KEYWORDS = 20

_NON_WORD = re.compile(r"[^\w]")


def extract_keywords(text: str, max_keywords: int = DEFAULT_MAX_KEYWORDS) -> List[str]:
    """
    Reduce free text to a short list of meaningful tokens.

    Tokens keep their order of appearance; the cut-off keeps the first
    `max_keywords` survivors, not the most frequent ones.

    Example:
        extract_keywords("Please order the Green Tea!") -> ["please", "order", "green", "tea"]

    :param text: Raw text
    :param max_keywords: Maximum number of tokens to keep
    :return: Lowercase tokens longer than two characters, stop words removed
    """
    if not text:
        return []

    keywords = []
    for word in text.split():
        token = _NON_WORD.sub("", word).lower()
        if len(token) <= 2 or token in STOP_WORDS:
            continue
        keywords.append(token)
        if len(keywords) >= max_keywords:
            break

    return keywords
