"""Keyword scoring for topical index entries.

Each keyword scores a topic by its strongest match:

==========================================  =====
exact match of the primary label            1.0
primary label starts with the keyword       0.95
exact match of the secondary label          0.9
keyword inside either label                 0.85
keyword inside the display name             0.7
==========================================  =====

A topic's score is the best single-keyword score. Scores are never summed
across keywords, so one strong hit outranks several weak ones.
"""

from typing import Iterable, List, Sequence, Tuple

from ..models import ScoredTopic, Topic

EXACT_LABEL = 1.0
LABEL_PREFIX = 0.95
EXACT_SUB_LABEL = 0.9
LABEL_SUBSTRING = 0.85
NAME_SUBSTRING = 0.7


def keyword_score(keyword: str, topic: Topic) -> float:
    """Score one keyword against one topic; 0.0 when nothing matches."""
    keyword = keyword.lower()
    label = (topic.label or "").lower()
    sub_label = (topic.sub_label or "").lower()
    name = (topic.name or "").lower()

    if label == keyword:
        return EXACT_LABEL
    if label.startswith(keyword):
        return LABEL_PREFIX
    if sub_label == keyword:
        return EXACT_SUB_LABEL
    if keyword in label or keyword in sub_label:
        return LABEL_SUBSTRING
    if keyword in name:
        return NAME_SUBSTRING
    return 0.0


def score_topic(keywords: Sequence[str], topic: Topic) -> Tuple[float, Tuple[str, ...]]:
    """Return the best single-keyword score and the keywords that matched."""
    best = 0.0
    matched = []
    for keyword in keywords:
        score = keyword_score(keyword, topic)
        if score > 0:
            matched.append(keyword)
            best = max(best, score)
    return best, tuple(matched)


def rank_topics(
    candidates: Iterable[Tuple[Topic, int]],
    keywords: Sequence[str],
    limit: int,
) -> List[ScoredTopic]:
    """Score ``(topic, verse_count)`` candidates and keep the best ``limit``.

    Topics without verses or without any keyword match are dropped. Ties on
    score go to the topic with more verses; remaining ties keep input order.
    """
    scored = []
    for topic, verse_count in candidates:
        if verse_count <= 0:
            continue
        score, matched = score_topic(keywords, topic)
        if score <= 0:
            continue
        scored.append(ScoredTopic(
            topic=topic,
            verse_count=verse_count,
            score=score,
            matched_words=matched,
        ))

    scored.sort(key=lambda t: (-t.score, -t.verse_count))
    return scored[:limit]
