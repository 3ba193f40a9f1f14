"""Keyword search over the curated topical index.

- ``base``: the ``TopicIndex`` interface and ``TopicIndexError``.
- ``scoring``: the keyword scoring rule and candidate ranking.
- ``postgres``: the PostgreSQL-backed index.
"""
