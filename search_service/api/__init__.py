"""API subpackage for the search service.

Routers expose semantic and hybrid search plus a database health probe. The
transport layer stays thin and delegates to ``SearchManager``.
"""
