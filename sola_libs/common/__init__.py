"""Common utilities shared by the service and the retrieval adapters.

Includes:
- ``config``: pydantic-settings configuration read from the environment.
- ``logging``: structured logging setup with structlog.
- ``metrics``: Prometheus metrics helpers.
- ``database``: the shared asyncpg pool.

Import pattern:
- from sola_libs.common.config import SearchConfig
- from sola_libs.common.logging import configure_logging
"""
