"""Tests for the search API routes."""

import pytest
from fastapi.testclient import TestClient

from search_service.api.routes import get_config, get_metrics, get_search_manager
from search_service.main import create_app
from sola_libs.topic_index.base import TopicIndexError
from sola_libs.vector_store.base import VectorStoreConnectionError
from tests.fakes import FakeDatabase, FakeTopicIndex, FakeVectorStore, make_topic


@pytest.fixture
def client_for(config, metrics):
    """Return a builder for a test client wired to a given manager."""

    def _client(manager, search_config=None):
        search_config = search_config or config
        app = create_app(search_config)
        app.dependency_overrides[get_search_manager] = lambda: manager
        app.dependency_overrides[get_config] = lambda: search_config
        app.dependency_overrides[get_metrics] = lambda: metrics
        return TestClient(app)

    return _client


def test_semantic_search(client_for, build_manager):
    """Test the semantic search response shape."""
    client = client_for(build_manager())

    response = client.post("/api/v1/search", json={"query": "God so loved", "limit": 2})

    assert response.status_code == 200
    data = response.json()
    assert data["query"] == "God so loved"
    assert data["results"] == [
        {
            "verse_id": "John.3.16",
            "text": "Text of John.3.16",
            "book": "John",
            "chapter": 3,
            "verse": 16,
            "relevance_score": pytest.approx(0.91),
        },
        {
            "verse_id": "Rom.5.8",
            "text": "Text of Rom.5.8",
            "book": "Rom",
            "chapter": 5,
            "verse": 8,
            "relevance_score": pytest.approx(0.87),
        },
    ]


@pytest.mark.parametrize("body", [{}, {"query": ""}, {"query": "   "}])
def test_missing_query_is_bad_request(client_for, build_manager, vector_store, body):
    """Test that missing or blank queries are rejected with 400."""
    client = client_for(build_manager())

    assert client.post("/api/v1/search", json=body).status_code == 400
    assert client.post("/api/v1/search/hybrid", json=body).status_code == 400
    assert vector_store.limits == []


@pytest.mark.parametrize("limit", [0, -5, 51, 1000])
def test_out_of_range_limit_is_not_rejected(client_for, build_manager, vector_store, limit):
    """Test that out-of-range limits are accepted and replaced by the default."""
    client = client_for(build_manager())

    response = client.post("/api/v1/search", json={"query": "grace", "limit": limit})

    assert response.status_code == 200
    assert vector_store.limits == [10]


def test_semantic_failure_is_server_error(client_for, build_manager):
    """Test that retrieval failures map to 500."""
    manager = build_manager(vector_store=FakeVectorStore(error=VectorStoreConnectionError("refused")))
    client = client_for(manager)

    response = client.post("/api/v1/search", json={"query": "grace"})

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Search failed: ")


def test_hybrid_search_with_card(client_for, build_manager):
    """Test the hybrid response with a topic card."""
    client = client_for(build_manager())

    response = client.post("/api/v1/search/hybrid", json={"query": "trinity", "verse_limit": 2, "topic_limit": 5})

    assert response.status_code == 200
    data = response.json()
    assert data["query"] == "trinity"

    card = data["topic_card"]
    assert card["topic_id"] == "42"
    assert card["name"] == "Trinity"
    assert card["source"] == "claude_4.5_opus"
    assert card["verse_count"] == 12
    assert card["score"] == 1.0
    assert [v["verse_id"] for v in card["top_verses"]] == ["Matt.28.19", "2Cor.13.14"]
    assert all("relevance_score" not in v for v in card["top_verses"])
    assert "category" not in card

    topics = data["resource_matches"]["topics"]
    assert [t["topic_id"] for t in topics] == ["42"]
    assert [v["verse_id"] for v in data["semantic_matches"]["verses"]] == ["John.3.16", "Rom.5.8"]


def test_hybrid_search_without_matches_keeps_lists(client_for, build_manager):
    """Test that empty channels are present as empty lists."""
    manager = build_manager(
        vector_store=FakeVectorStore(passages=[]),
        topic_index=FakeTopicIndex(),
    )
    client = client_for(manager)

    response = client.post("/api/v1/search/hybrid", json={"query": "the and but"})

    assert response.status_code == 200
    data = response.json()
    assert "topic_card" not in data
    assert data["resource_matches"] == {"topics": []}
    assert data["semantic_matches"] == {"verses": []}


def test_hybrid_search_keyword_failure_still_succeeds(client_for, build_manager):
    """Test that a topic index failure degrades to no topics."""
    manager = build_manager(topic_index=FakeTopicIndex(search_error=TopicIndexError("down")))
    client = client_for(manager)

    response = client.post("/api/v1/search/hybrid", json={"query": "trinity"})

    assert response.status_code == 200
    assert response.json()["resource_matches"]["topics"] == []


def test_hybrid_search_card_failure_is_server_error(client_for, build_manager):
    """Test that a topic card failure maps to 500."""
    index = FakeTopicIndex(
        topics=[make_topic("42", "Trinity", source="claude_4.5_opus")],
        verses_error=TopicIndexError("down"),
    )
    client = client_for(build_manager(topic_index=index))

    response = client.post("/api/v1/search/hybrid", json={"query": "trinity"})

    assert response.status_code == 500
    assert response.json()["detail"].startswith("Search failed: ")


def test_search_timeout_is_gateway_timeout(client_for, build_manager, config):
    """Test that a search exceeding the deadline maps to 504."""
    manager = build_manager(vector_store=FakeVectorStore(delay=1.0))
    fast_config = config.model_copy(update={"search_timeout_seconds": 0.05})
    client = client_for(manager, search_config=fast_config)

    response = client.post("/api/v1/search", json={"query": "grace"})

    assert response.status_code == 504


def test_postgres_health(client_for, build_manager):
    """Test the database health probe."""
    healthy = client_for(build_manager(database=FakeDatabase(healthy=True)))
    unhealthy = client_for(build_manager(database=FakeDatabase(healthy=False)))

    response = healthy.get("/api/v1/health/postgres")
    assert response.status_code == 200
    assert response.json() == {"status": "connected", "database": "postgres"}

    response = unhealthy.get("/api/v1/health/postgres")
    assert response.status_code == 503
    assert response.json()["status"] == "error"


def test_health_and_root(client_for, build_manager):
    """Test liveness and service info endpoints."""
    client = client_for(build_manager())

    assert client.get("/health").json() == {"status": "healthy", "service": "search-service"}

    info = client.get("/").json()
    assert info["service"] == "search-service"
    assert info["status"] == "running"
    assert info["endpoints"]["hybrid_search"] == "/api/v1/search/hybrid"


def test_process_time_and_request_id_headers(client_for, build_manager):
    """Test that responses carry timing and a request ID."""
    client = client_for(build_manager())

    response = client.get("/health")
    assert "X-Process-Time" in response.headers
    assert len(response.headers["X-Request-ID"]) == 32

    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_cors_allows_configured_origin(client_for, build_manager):
    """Test that configured origins pass CORS preflight."""
    client = client_for(build_manager())

    response = client.options(
        "/api/v1/search",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_metrics_endpoint(client_for, build_manager, metrics):
    """Test that HTTP and search metrics are exposed for scraping."""
    client = client_for(build_manager())
    client.app.state.metrics_collector = metrics

    client.post("/api/v1/search/hybrid", json={"query": "trinity"})
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text
    assert "search_requests_total" in response.text

    http_labels = {"method": "POST", "endpoint": "/api/v1/search/hybrid", "status": "200"}
    search_labels = {"query_type": "hybrid", "status": "success"}
    assert metrics.registry.get_sample_value("http_requests_total", http_labels) == 1.0
    assert metrics.registry.get_sample_value("search_requests_total", search_labels) == 1.0
