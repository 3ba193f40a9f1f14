"""Topic card selection.

Picks at most one matched topic to feature next to the raw results. Curated
sources are preferred over legacy reference works: every topic from the most
preferred source is checked before any topic from the next one, so a
qualifying topic from a better source wins regardless of score.
"""

from typing import List, Optional, Sequence

import structlog

from sola_libs.models import ScoredTopic, TopicCard
from sola_libs.topic_index.base import TopicIndex

from ..hybrid.exceptions import TopicCardError

logger = structlog.get_logger("search_service.topic_card")


class TopicCardSelector:
    """Select and build the featured topic card.

    Parameters
    - topic_index: Source of the selected topic's verses
    - preferred_sources: Source labels, most preferred first
    """

    def __init__(self, topic_index: TopicIndex, preferred_sources: Sequence[str]):
        self.topic_index = topic_index
        self.preferred_sources = list(preferred_sources)

    def choose(self, topics: List[ScoredTopic], min_score: float) -> Optional[ScoredTopic]:
        """Return the topic to feature, or ``None`` when none qualifies.

        ``topics`` must already be ordered by score descending.
        """
        if not topics:
            return None

        for source in self.preferred_sources:
            for topic in topics:
                if topic.source == source and topic.score >= min_score:
                    return topic

        if topics[0].score >= min_score:
            return topics[0]
        return None

    async def select_card(
        self,
        topics: List[ScoredTopic],
        min_score: float,
        verse_limit: int,
    ) -> Optional[TopicCard]:
        """Choose a topic and fetch its top verses.

        A failed verse fetch raises ``TopicCardError``; a card is never built
        from a partial fetch.
        """
        selected = self.choose(topics, min_score)
        if selected is None:
            return None

        try:
            verses = await self.topic_index.get_topic_verses(selected.topic_id, verse_limit)
        except Exception as e:
            logger.error(
                "Failed to fetch topic card verses",
                topic_id=selected.topic_id,
                error=str(e)
            )
            raise TopicCardError(f"get topic verses for {selected.topic_id}: {e}") from e

        logger.info(
            "Topic card selected",
            topic_id=selected.topic_id,
            source=selected.source,
            score=selected.score,
            verses_count=len(verses)
        )
        return TopicCard(topic=selected, top_verses=verses)
