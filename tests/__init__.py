"""Tests for the scripture search service.

Collaborators (embedder, vector store, topical index, database) are replaced
by the in-memory fakes in ``tests.fakes``; no external services are needed.
"""
