"""OpenSearch vector store implementation.

Queries a managed k-NN index whose documents carry the verse embedding along
with ``verse_id``, ``book``, ``chapter``, ``verse`` and ``text``. The index is
built offline; this adapter only reads it.
"""

import asyncio
from typing import Any, Dict, List, Optional

import numpy as np
import structlog
from opensearchpy import OpenSearch, exceptions

from ..models import ScoredPassage
from .base import VectorStore, VectorStoreConnectionError, VectorStoreQueryError

logger = structlog.get_logger("vector_store.opensearch")

SOURCE_FIELDS = ["verse_id", "book", "chapter", "verse", "text"]


def similarity_from_score(score: float) -> float:
    """Convert an OpenSearch ``cosinesimil`` score back to cosine similarity.

    The engine reports ``(2 - d) / 2`` with ``d = 1 - cos``.
    """
    return 2.0 * float(score) - 1.0


class OpenSearchVectorStore(VectorStore):
    """OpenSearch-based vector store implementation."""

    def __init__(
        self,
        hosts: List[str],
        index_name: str = "verse_embeddings",
        vector_field: str = "embedding",
        vector_dimension: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        verify_certs: bool = False,
        ssl_assert_hostname: bool = False,
        ssl_show_warn: bool = False,
        client: Optional[OpenSearch] = None,
    ):
        """Initialize OpenSearch vector store.

        Args:
            hosts: List of OpenSearch host URLs
            index_name: Name of the k-NN index holding verse vectors
            vector_field: Name of the ``knn_vector`` field
            vector_dimension: Expected dimension of query vectors
            username: OpenSearch username
            password: OpenSearch password
            verify_certs: Whether to verify SSL certificates
            ssl_assert_hostname: Whether to assert hostname
            ssl_show_warn: Whether to show SSL warnings
            client: Pre-built client, mainly for tests
        """
        self.hosts = hosts
        self.index_name = index_name
        self.vector_field = vector_field
        self.vector_dimension = vector_dimension

        self.client = client or OpenSearch(
            hosts=hosts,
            http_auth=(username, password) if username and password else None,
            verify_certs=verify_certs,
            ssl_assert_hostname=ssl_assert_hostname,
            ssl_show_warn=ssl_show_warn,
            use_ssl=True if hosts[0].startswith('https') else False,
        )

    def _build_query(self, query_vector: np.ndarray, limit: int) -> Dict[str, Any]:
        return {
            "size": limit,
            "_source": SOURCE_FIELDS,
            "query": {
                "knn": {
                    self.vector_field: {
                        "vector": query_vector.tolist(),
                        "k": limit,
                    }
                }
            },
        }

    async def search_verses(
        self,
        query_vector: np.ndarray,
        limit: int = 10,
    ) -> List[ScoredPassage]:
        """Search for similar verses using k-NN."""
        vector_array = np.asarray(query_vector, dtype=np.float32)
        if self.vector_dimension is not None and vector_array.shape[-1] != self.vector_dimension:
            raise VectorStoreQueryError(
                f"Expected vector dimension {self.vector_dimension}, "
                f"got {vector_array.shape[-1]}"
            )

        query = self._build_query(vector_array, limit)

        try:
            # The client is synchronous; keep it off the event loop.
            response = await asyncio.to_thread(
                self.client.search,
                index=self.index_name,
                body=query,
            )
        except exceptions.ConnectionError as e:
            logger.error("OpenSearch similarity search failed", error=str(e))
            raise VectorStoreConnectionError(f"Similarity search failed: {e}") from e
        except exceptions.OpenSearchException as e:
            logger.error("OpenSearch similarity search failed", error=str(e))
            raise VectorStoreQueryError(f"Similarity search failed: {e}") from e

        passages = []
        for hit in response['hits']['hits'][:limit]:
            source = hit['_source']
            passages.append(ScoredPassage(
                passage_id=source.get('verse_id', hit.get('_id')),
                book=source['book'],
                chapter=int(source['chapter']),
                verse=int(source['verse']),
                text=source['text'],
                score=similarity_from_score(hit['_score']),
            ))

        logger.info(
            "OpenSearch similarity search completed",
            index_name=self.index_name,
            limit=limit,
            results_count=len(passages)
        )
        return passages

    async def health_check(self) -> bool:
        """Check that the cluster answers and the index exists."""
        try:
            return bool(await asyncio.to_thread(self.client.indices.exists, index=self.index_name))
        except exceptions.OpenSearchException as e:
            logger.error("OpenSearch health check failed", error=str(e))
            return False

    async def close(self) -> None:
        """Close the OpenSearch client connection."""
        if hasattr(self.client, 'close'):
            self.client.close()
        logger.info("OpenSearch client connection closed")
