"""Query embedding providers.

- ``base``: the ``Embedder`` interface and ``EmbeddingError``.
- ``http``: clients for the supported HTTP embedding services.
- ``factory``: ``create_embedder(config)`` picks one at startup.
"""
