"""Base vector store interface.

Defines the similarity-search contract the search service depends on,
independent of the backing implementation (pgvector or OpenSearch).

All methods are asynchronous to support concurrent requests.
"""

from abc import ABC, abstractmethod
from typing import List

import numpy as np

from ..models import ScoredPassage


class VectorStore(ABC):
    """Abstract base class for verse similarity search.

    Implementations return cosine similarity scores and preserve the engine's
    ranking. Failures are raised as ``VectorStoreError``; an empty list means
    the search succeeded with no hits.
    """

    @abstractmethod
    async def search_verses(
        self,
        query_vector: np.ndarray,
        limit: int = 10,
    ) -> List[ScoredPassage]:
        """Return up to ``limit`` verses, highest similarity first."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the vector store is healthy."""
        pass

    async def close(self) -> None:
        """Release client resources."""
        return None


class VectorStoreError(Exception):
    """Base exception for vector store operations."""
    pass


class VectorStoreConnectionError(VectorStoreError):
    """Connection error to vector store."""
    pass


class VectorStoreQueryError(VectorStoreError):
    """Query error in vector store."""
    pass
