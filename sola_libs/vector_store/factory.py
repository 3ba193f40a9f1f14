"""Vector store factory.

Centralizes creation of concrete ``VectorStore`` backends so the search
service never branches on the backend itself. The backend is chosen once, at
startup, from configuration.
"""

from enum import Enum
from typing import Any, Dict, Optional

import structlog

from ..common.database import PostgresPool
from .base import VectorStore
from .opensearch import OpenSearchVectorStore
from .pgvector import PgVectorStore

logger = structlog.get_logger("vector_store.factory")


class VectorStoreType(Enum):
    """Supported vector store types."""
    PGVECTOR = "pgvector"
    OPENSEARCH = "opensearch"


class VectorStoreFactory:
    """Factory for creating vector store instances."""

    @staticmethod
    def create(
        store_type: VectorStoreType,
        config: Dict[str, Any],
        database: Optional[PostgresPool] = None,
    ) -> VectorStore:
        """Create a vector store instance.

        Parameters
        - store_type: A ``VectorStoreType`` enum value
        - config: Backend-specific parameters (e.g. DSN for pgvector)
        - database: Shared pool for pgvector; built from ``dsn`` when omitted
        """

        if store_type == VectorStoreType.PGVECTOR:
            if database is None:
                dsn = config.get("dsn")
                if not dsn:
                    raise ValueError("PgVector requires 'dsn' in config or a shared database pool")
                database = PostgresPool(
                    dsn=dsn,
                    pool_size=config.get("pool_size", 10),
                    max_queries=config.get("max_queries", 50000),
                    command_timeout=config.get("command_timeout", 60),
                )

            return PgVectorStore(
                database=database,
                vector_dimension=config.get("vector_dimension"),
            )

        elif store_type == VectorStoreType.OPENSEARCH:
            hosts = config.get("hosts")
            if not hosts:
                raise ValueError("OpenSearch requires 'hosts' in config")

            return OpenSearchVectorStore(
                hosts=hosts,
                index_name=config.get("index_name", "verse_embeddings"),
                vector_dimension=config.get("vector_dimension"),
                username=config.get("username"),
                password=config.get("password"),
                verify_certs=config.get("verify_certs", False),
                ssl_assert_hostname=config.get("ssl_assert_hostname", False),
                ssl_show_warn=config.get("ssl_show_warn", False)
            )

        else:
            raise ValueError(f"Unsupported vector store type: {store_type}")


def _flag(value: Optional[str]) -> bool:
    return (value or "false").lower() == "true"


def create_vector_store_from_env(
    env_config: Dict[str, Optional[str]],
    database: Optional[PostgresPool] = None,
) -> VectorStore:
    """Create a vector store from flat environment-style settings.

    Parameters
    - env_config: Mapping of environment variable names to values
    - database: Shared pool reused by the pgvector backend

    Returns
    - A ``VectorStore`` for the backend named by ``VECTOR_BACKEND``
    """
    backend = env_config.get("VECTOR_BACKEND") or "pgvector"
    dimension = env_config.get("EMBEDDING_DIMENSIONS")

    try:
        store_type = VectorStoreType(backend)
    except ValueError:
        raise ValueError(f"Unsupported vector backend: {backend}")

    if store_type == VectorStoreType.PGVECTOR:
        config = {
            "dsn": env_config.get("POSTGRES_URI"),
            "pool_size": int(env_config.get("POSTGRES_POOL_SIZE") or "10"),
            "max_queries": int(env_config.get("POSTGRES_MAX_QUERIES") or "50000"),
            "command_timeout": int(env_config.get("POSTGRES_COMMAND_TIMEOUT") or "60"),
            "vector_dimension": int(dimension) if dimension else None,
        }
        if database is None and not config["dsn"]:
            raise ValueError("POSTGRES_URI environment variable is required")
    else:
        config = {
            "hosts": (env_config.get("OPENSEARCH_HOSTS") or "http://localhost:9200").split(","),
            "index_name": env_config.get("OPENSEARCH_INDEX") or "verse_embeddings",
            "vector_dimension": int(dimension) if dimension else None,
            "username": env_config.get("OPENSEARCH_USERNAME"),
            "password": env_config.get("OPENSEARCH_PASSWORD"),
            "verify_certs": _flag(env_config.get("OPENSEARCH_VERIFY_CERTS")),
            "ssl_assert_hostname": _flag(env_config.get("OPENSEARCH_SSL_ASSERT_HOSTNAME")),
            "ssl_show_warn": _flag(env_config.get("OPENSEARCH_SSL_SHOW_WARN")),
        }

    logger.info("Creating vector store", backend=store_type.value)
    return VectorStoreFactory.create(store_type, config, database=database)
