"""PostgreSQL implementation of the topical index.

Tables (maintained by offline import tooling):
- ``api.topics``: ``id, name, slug, source, topic, sub_topic, category,
  chapter_refs``
- ``api.topic_verses``: ``topic_id, verse_id, importance_tier``
  (1 = essential, 2 = important, 3 = supporting)
- ``api.verses`` / ``api.books``: verse text and canonical book order
"""

from typing import List, Sequence

import structlog

from ..common.database import DatabaseError, PostgresPool
from ..models import Citation, ScoredTopic, Topic
from .base import TopicIndex, TopicIndexError
from .scoring import rank_topics

logger = structlog.get_logger("topic_index.postgres")

CANDIDATE_TOPICS_SQL = """
    SELECT t.id::text AS topic_id,
           COALESCE(t.name, '') AS name,
           COALESCE(t.source, '') AS source,
           COALESCE(t.topic, '') AS label,
           COALESCE(t.sub_topic, '') AS sub_label,
           t.category,
           t.chapter_refs,
           COUNT(tv.verse_id) AS verse_count
    FROM api.topics t
    JOIN api.topic_verses tv ON tv.topic_id = t.id
    WHERE t.topic ILIKE ANY($1::text[])
       OR t.sub_topic ILIKE ANY($1::text[])
       OR t.name ILIKE ANY($1::text[])
    GROUP BY t.id
    ORDER BY t.id
"""

TOPIC_VERSES_SQL = """
    SELECT v.osis_verse_id AS verse_id,
           b.osis_id AS book,
           v.chapter,
           v.verse,
           v.text
    FROM api.topic_verses tv
    JOIN api.verses v ON tv.verse_id = v.id
    JOIN api.books b ON v.book_id = b.id
    WHERE tv.topic_id = ($1::text)::bigint
    ORDER BY COALESCE(tv.importance_tier, 3), b.book_order, v.chapter, v.verse
    LIMIT $2
"""


class PostgresTopicIndex(TopicIndex):
    """Topical index backed by the ``api`` schema."""

    def __init__(self, database: PostgresPool):
        self.database = database

    async def search_topics(self, keywords: Sequence[str], limit: int) -> List[ScoredTopic]:
        if not keywords:
            return []

        # Tokens are alphanumeric, so they need no LIKE escaping.
        patterns = [f"%{keyword}%" for keyword in keywords]
        try:
            rows = await self.database.fetch(CANDIDATE_TOPICS_SQL, patterns)
        except DatabaseError as e:
            logger.error("Topic search failed", keywords=list(keywords), error=str(e))
            raise TopicIndexError(f"search topics by words: {e}") from e

        candidates = [
            (
                Topic(
                    topic_id=row["topic_id"],
                    name=row["name"] or "",
                    source=row["source"] or "",
                    label=row["label"] or "",
                    sub_label=row["sub_label"] or "",
                    category=row["category"] or None,
                    chapter_refs=tuple(row["chapter_refs"] or ()),
                ),
                int(row["verse_count"]),
            )
            for row in rows
        ]
        topics = rank_topics(candidates, keywords, limit)

        logger.info(
            "Topic search completed",
            keywords=list(keywords),
            candidates=len(candidates),
            results_count=len(topics)
        )
        return topics

    async def get_topic_verses(self, topic_id: str, limit: int) -> List[Citation]:
        try:
            rows = await self.database.fetch(TOPIC_VERSES_SQL, topic_id, limit)
        except DatabaseError as e:
            logger.error("Topic verse lookup failed", topic_id=topic_id, error=str(e))
            raise TopicIndexError(f"get topic verses: {e}") from e

        return [
            Citation(
                verse_id=row["verse_id"],
                book=row["book"],
                chapter=int(row["chapter"]),
                verse=int(row["verse"]),
                text=row["text"],
            )
            for row in rows
        ]
