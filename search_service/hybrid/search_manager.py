"""Search manager for hybrid semantic and keyword search.

Runs two independent retrieval channels for a query:
- semantic: embed the query and search verse embeddings by cosine similarity
- keyword: tokenize the query and match it against the curated topical index

The channels are not fused into one score. Semantic results are the primary
answer, so a semantic failure fails the request; topic matches are an
enrichment, so a keyword failure is logged and yields no topics.
"""

import asyncio
import time
from typing import List, Optional

import structlog

from sola_libs.common.config import SearchConfig
from sola_libs.common.database import PostgresPool
from sola_libs.common.logging import log_performance
from sola_libs.common.metrics import MetricsCollector
from sola_libs.embeddings.base import Embedder
from sola_libs.embeddings.factory import create_embedder
from sola_libs.models import Citation, HybridSearchResult, ScoredTopic
from sola_libs.topic_index.base import TopicIndex
from sola_libs.topic_index.postgres import PostgresTopicIndex
from sola_libs.vector_store.base import VectorStore
from sola_libs.vector_store.factory import create_vector_store_from_env
from ..ranking.topic_card import TopicCardSelector
from .exceptions import InvalidQueryError, RetrievalError
from .limits import resolve_limit
from .tokenizer import tokenize

logger = structlog.get_logger("search_service.search_manager")


class SearchManager:
    """Manages hybrid search operations.

    Responsibilities
    - Validate queries and resolve result limits before any retrieval call
    - Run semantic and keyword retrieval concurrently
    - Apply the topic card policy to the keyword results

    All collaborators are passed in; the manager owns none of their pools
    beyond closing them on ``cleanup``.
    """

    def __init__(
        self,
        config: SearchConfig,
        embedder: Embedder,
        vector_store: VectorStore,
        topic_index: TopicIndex,
        card_selector: TopicCardSelector,
        metrics: Optional[MetricsCollector] = None,
        database: Optional[PostgresPool] = None,
    ):
        self.config = config
        self.embedder = embedder
        self.vector_store = vector_store
        self.topic_index = topic_index
        self.card_selector = card_selector
        self.metrics = metrics
        self.database = database

    def _validate_query(self, query: Optional[str]) -> str:
        if not query or not query.strip():
            raise InvalidQueryError("Query is required")
        return query

    def _verse_limit(self, value: Optional[int]) -> int:
        return resolve_limit(value, self.config.default_verse_limit, self.config.max_result_limit)

    def _topic_limit(self, value: Optional[int]) -> int:
        return resolve_limit(value, self.config.default_topic_limit, self.config.max_result_limit)

    async def _semantic(self, query: str, limit: int) -> List[Citation]:
        try:
            vector = await self.embedder.embed_query(query)
            passages = await self.vector_store.search_verses(vector, limit)
        except Exception as e:
            logger.error("Semantic search failed", query=query, error=str(e))
            raise RetrievalError(str(e)) from e

        return [Citation.from_passage(p) for p in passages]

    async def _topics_or_empty(self, keywords: List[str], limit: int) -> List[ScoredTopic]:
        try:
            return await self.topic_index.search_topics(keywords, limit)
        except Exception as e:
            logger.warning("Topic search failed, continuing without topics", keywords=keywords, error=str(e))
            if self.metrics:
                self.metrics.record_topic_search_degraded()
            return []

    async def semantic_search(self, query: Optional[str], verse_limit: Optional[int] = None) -> List[Citation]:
        """Return verses most similar to ``query``, highest similarity first.

        Raises ``InvalidQueryError`` for a blank query and ``RetrievalError``
        when embedding or similarity search fails.
        """
        query = self._validate_query(query)
        return await self._semantic(query, self._verse_limit(verse_limit))

    async def search_topics(self, query: Optional[str], topic_limit: Optional[int] = None) -> List[ScoredTopic]:
        """Return topics matching the query's keywords.

        A query with no keywords returns ``[]`` without touching the index.
        Index errors propagate.
        """
        query = self._validate_query(query)
        keywords = tokenize(query)
        if not keywords:
            return []
        return await self.topic_index.search_topics(keywords, self._topic_limit(topic_limit))

    async def hybrid_search(
        self,
        query: Optional[str],
        verse_limit: Optional[int] = None,
        topic_limit: Optional[int] = None,
    ) -> HybridSearchResult:
        """Run both channels concurrently and select a topic card.

        If the semantic channel fails the keyword task is cancelled and
        ``RetrievalError`` propagates. Cancelling the caller cancels both.
        """
        query = self._validate_query(query)
        verse_limit = self._verse_limit(verse_limit)
        topic_limit = self._topic_limit(topic_limit)
        keywords = tokenize(query)
        start_time = time.time()

        tasks = [asyncio.ensure_future(self._semantic(query, verse_limit))]
        if keywords:
            tasks.append(asyncio.ensure_future(self._topics_or_empty(keywords, topic_limit)))

        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise

        verses = results[0]
        topics = results[1] if keywords else []

        card = await self.card_selector.select_card(
            topics,
            self.config.topic_card_min_score,
            self.config.topic_card_verse_limit,
        )
        if self.metrics:
            self.metrics.record_topic_card("selected" if card else "none")

        log_performance(
            "hybrid_search",
            (time.time() - start_time) * 1000,
            query=query,
            keywords=keywords,
            verses_count=len(verses),
            topics_count=len(topics),
            topic_card=card.topic.topic_id if card else None
        )

        return HybridSearchResult(
            query=query,
            verses=verses,
            topics=topics,
            topic_card=card,
        )

    async def health_check(self) -> bool:
        """Check that the topical index database answers."""
        if self.database is None:
            return False
        return await self.database.health_check()

    async def cleanup(self) -> None:
        """Close adapter clients and the shared database pool."""
        await self.embedder.close()
        await self.vector_store.close()
        if self.database is not None:
            await self.database.close()
        logger.info("Search manager cleaned up")


def create_search_manager(
    config: SearchConfig,
    metrics: Optional[MetricsCollector] = None,
) -> SearchManager:
    """Build a ``SearchManager`` and its adapters from configuration.

    The pgvector backend and the topical index share one database pool.
    """
    database = PostgresPool(
        dsn=config.postgres_uri,
        pool_size=config.postgres_pool_size,
        max_queries=config.postgres_max_queries,
        command_timeout=config.postgres_command_timeout,
    )
    vector_store = create_vector_store_from_env(config.vector_store_settings(), database=database)
    embedder = create_embedder(config)
    topic_index = PostgresTopicIndex(database)
    card_selector = TopicCardSelector(topic_index, config.topic_card_preferred_sources)

    logger.info(
        "Search manager created",
        vector_backend=config.vector_backend,
        embedding_provider=config.embedding_provider
    )

    return SearchManager(
        config=config,
        embedder=embedder,
        vector_store=vector_store,
        topic_index=topic_index,
        card_selector=card_selector,
        metrics=metrics,
        database=database,
    )
