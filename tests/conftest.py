"""Shared fixtures for search tests."""

import pytest
from prometheus_client import CollectorRegistry

from sola_libs.common.config import SearchConfig
from sola_libs.common.metrics import MetricsCollector
from search_service.hybrid.search_manager import SearchManager
from search_service.ranking.topic_card import TopicCardSelector
from tests.fakes import (
    PREFERRED_SOURCES,
    FakeEmbedder,
    FakeTopicIndex,
    FakeVectorStore,
    make_citation,
    make_topic,
)


@pytest.fixture
def config():
    """Default search configuration."""
    return SearchConfig()


@pytest.fixture
def metrics():
    """Metrics collector with an isolated registry."""
    return MetricsCollector("test-service", registry=CollectorRegistry())


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def vector_store():
    return FakeVectorStore()


@pytest.fixture
def topic_index():
    trinity = make_topic("42", "Trinity", source="claude_4.5_opus", score=1.0, verse_count=12)
    return FakeTopicIndex(
        topics=[trinity],
        verses={"42": [make_citation("Matt.28.19"), make_citation("2Cor.13.14")]},
    )


@pytest.fixture
def build_manager(config, metrics, embedder, vector_store, topic_index):
    """Return a builder for ``SearchManager`` with fakes, overridable per test."""

    def _build(**overrides) -> SearchManager:
        index = overrides.pop("topic_index", topic_index)
        parts = {
            "config": config,
            "embedder": embedder,
            "vector_store": vector_store,
            "topic_index": index,
            "card_selector": TopicCardSelector(index, PREFERRED_SOURCES),
            "metrics": metrics,
        }
        parts.update(overrides)
        return SearchManager(**parts)

    return _build
