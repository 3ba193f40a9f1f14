"""Query tokenization for keyword search."""

import re
from typing import List

_SPLIT = re.compile(r"[^a-z0-9]+")

MIN_TOKEN_LENGTH = 2

STOP_WORDS = frozenset([
    # articles, conjunctions, prepositions
    "an", "and", "as", "at", "but", "by", "for", "from", "if", "in", "into",
    "nor", "of", "on", "or", "so", "than", "that", "the", "then", "there",
    "this", "to", "upon", "when", "which", "with", "about",
    # pronouns
    "all", "he", "her", "him", "his", "it", "its", "me", "my", "our", "she",
    "their", "them", "they", "we", "you", "your",
    # auxiliaries
    "am", "are", "be", "been", "could", "did", "do", "does", "had", "has",
    "have", "is", "not", "no", "shall", "should", "was", "were", "will",
    "would",
    # archaic
    "doth", "hath", "shalt", "thee", "thine", "thou", "thy", "unto", "ye",
])


def tokenize(query: str) -> List[str]:
    """Split a query into lowercase keywords.

    Tokens shorter than two characters and stop words are dropped; repeats
    keep their first position. An empty list means the query carries no
    keyword signal.
    """
    tokens = []
    seen = set()
    for token in _SPLIT.split(query.lower()):
        if len(token) < MIN_TOKEN_LENGTH or token in STOP_WORDS or token in seen:
            continue
        seen.add(token)
        tokens.append(token)
    return tokens
