"""Shared libraries for the scripture search service.

Subpackages:
- ``sola_libs.common``: configuration, logging, metrics, and the Postgres pool.
- ``sola_libs.embeddings``: query embedding providers.
- ``sola_libs.vector_store``: verse similarity search backends.
- ``sola_libs.topic_index``: keyword search over the curated topical index.

Notes:
- Keep service orchestration out of here; adapters only talk to their
  backing systems and raise their own error types.
"""
