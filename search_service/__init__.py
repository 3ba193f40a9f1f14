"""Scripture search service package.

Layout:
- ``api``: HTTP endpoints for semantic and hybrid search.
- ``hybrid``: query tokenization and two-channel search orchestration.
- ``ranking``: topic card selection.
"""
