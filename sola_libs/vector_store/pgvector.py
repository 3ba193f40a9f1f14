"""PgVector implementation of the vector store.

Verses and their embeddings live in PostgreSQL (pgvector extension), exposed
through the ``api_views.mv_verses_search`` materialized view. Cosine distance
is computed with the ``<=>`` operator and converted to a similarity score
(``1 - distance``).
"""

from typing import Iterable, List, Optional

import numpy as np
import structlog

from ..common.database import DatabaseConnectionError, DatabaseError, PostgresPool
from ..models import ScoredPassage
from .base import VectorStore, VectorStoreConnectionError, VectorStoreQueryError

logger = structlog.get_logger("vector_store.pgvector")

SEARCH_VERSES_SQL = """
    SELECT verse_id, book, chapter, verse, text,
           1 - (embedding <=> $1) AS similarity
    FROM api_views.mv_verses_search
    ORDER BY embedding <=> $1
    LIMIT $2
"""


class PgVectorStore(VectorStore):
    """PgVector implementation of the vector store."""

    def __init__(
        self,
        database: PostgresPool,
        vector_dimension: Optional[int] = None,
    ):
        """Configure a pgvector-backed store.

        Parameters
        - database: Shared ``PostgresPool``
        - vector_dimension: Expected dimensionality of query vectors
        """
        self.database = database
        self.vector_dimension = vector_dimension

    async def search_verses(
        self,
        query_vector: np.ndarray,
        limit: int = 10,
    ) -> List[ScoredPassage]:
        """Search verses by cosine similarity."""
        vector_array = self._ensure_vector_dimension(query_vector)

        try:
            rows = await self.database.fetch(SEARCH_VERSES_SQL, vector_array, limit)
        except DatabaseConnectionError as e:
            logger.error("Vector similarity search failed", error=str(e))
            raise VectorStoreConnectionError(f"Similarity search failed: {e}") from e
        except DatabaseError as e:
            logger.error("Vector similarity search failed", error=str(e))
            raise VectorStoreQueryError(f"Similarity search failed: {e}") from e

        passages = [
            ScoredPassage(
                passage_id=row["verse_id"],
                book=row["book"],
                chapter=int(row["chapter"]),
                verse=int(row["verse"]),
                text=row["text"],
                score=float(row["similarity"]),
            )
            for row in rows
        ]

        logger.info(
            "Vector similarity search completed",
            query_vector_dim=len(vector_array),
            limit=limit,
            results_count=len(passages)
        )
        return passages

    async def health_check(self) -> bool:
        """Check if the vector store is healthy."""
        return await self.database.health_check()

    def _ensure_vector_dimension(self, vector: Iterable[float]) -> np.ndarray:
        """Ensure a vector matches the expected dimensionality."""
        array = np.asarray(vector, dtype=np.float32)
        if array.ndim != 1:
            raise VectorStoreQueryError("Vector must be one-dimensional")

        if self.vector_dimension is not None and array.shape[0] != self.vector_dimension:
            raise VectorStoreQueryError(
                f"Expected vector dimension {self.vector_dimension}, "
                f"got {array.shape[0]}"
            )
        return array
