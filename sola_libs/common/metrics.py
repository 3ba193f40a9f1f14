"""Metrics collection for the search service.

A thin wrapper around ``prometheus_client`` so HTTP and search metrics are
recorded with consistent label sets.

Design notes
- Metrics and labels are predeclared to keep cardinality bounded
- Each collector owns its registry; build one at startup and pass it along
"""

from typing import Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
import structlog

logger = structlog.get_logger("metrics")


class MetricsCollector:
    """Centralized metrics collection.

    Parameters
    - service_name: Logical name of the owning service
    - registry: Optional custom ``CollectorRegistry`` (e.g. for testing)
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry or CollectorRegistry()

        self.request_count = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'endpoint', 'status'],
            registry=self.registry
        )

        self.request_duration = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration',
            ['method', 'endpoint'],
            registry=self.registry
        )

        self.search_requests = Counter(
            'search_requests_total',
            'Total search requests',
            ['query_type', 'status'],
            registry=self.registry
        )

        self.search_duration = Histogram(
            'search_duration_seconds',
            'Search duration',
            ['query_type'],
            registry=self.registry
        )

        self.topic_search_degraded = Counter(
            'topic_search_degraded_total',
            'Hybrid searches answered without topics because keyword search failed',
            registry=self.registry
        )

        self.topic_cards = Counter(
            'topic_cards_total',
            'Topic card selection outcomes',
            ['outcome'],
            registry=self.registry
        )

    def record_http_request(
        self,
        method: str,
        endpoint: str,
        status: int,
        duration: float
    ) -> None:
        """Record HTTP request metrics.

        duration is expected in seconds to match Prometheus histogram units.
        """
        self.request_count.labels(method=method, endpoint=endpoint, status=status).inc()
        self.request_duration.labels(method=method, endpoint=endpoint).observe(duration)

    def record_search(
        self,
        query_type: str,
        duration: float,
        status: str = "success"
    ) -> None:
        """Record search metrics."""
        self.search_requests.labels(query_type=query_type, status=status).inc()
        self.search_duration.labels(query_type=query_type).observe(duration)

    def record_topic_search_degraded(self) -> None:
        """Record a keyword-channel failure that was tolerated."""
        self.topic_search_degraded.inc()

    def record_topic_card(self, outcome: str) -> None:
        """Record a topic card outcome: ``selected`` or ``none``."""
        self.topic_cards.labels(outcome=outcome).inc()

    def get_metrics(self) -> str:
        """Get metrics in Prometheus exposition format for scraping."""
        return generate_latest(self.registry).decode('utf-8')
