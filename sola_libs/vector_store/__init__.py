"""Verse similarity search backends.

Primary components:
- ``base``: abstract ``VectorStore`` interface and common exceptions.
- ``pgvector``: PostgreSQL/pgvector implementation.
- ``opensearch``: managed k-NN implementation on OpenSearch.
- ``factory``: helpers to construct a store from typed config or env.

Guidance:
- Construct via ``factory.create_vector_store_from_env`` so the service stays
  decoupled from the backend.
"""
