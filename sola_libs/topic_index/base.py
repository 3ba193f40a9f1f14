"""Topical index interface."""

from abc import ABC, abstractmethod
from typing import List, Sequence

from ..models import Citation, ScoredTopic


class TopicIndex(ABC):
    """Keyword search over the curated topical index.

    ``search_topics`` returns only topics with at least one mapped verse,
    ordered by score descending then verse count descending.
    """

    @abstractmethod
    async def search_topics(self, keywords: Sequence[str], limit: int) -> List[ScoredTopic]:
        """Return up to ``limit`` topics matching any of ``keywords``."""
        pass

    @abstractmethod
    async def get_topic_verses(self, topic_id: str, limit: int) -> List[Citation]:
        """Return a topic's verses by importance tier, then canonical order."""
        pass


class TopicIndexError(Exception):
    """Raised when the topical index cannot be queried."""
    pass
