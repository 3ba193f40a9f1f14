"""Hybrid search components.

Includes the ``SearchManager`` which runs semantic (embedding similarity) and
keyword (topical index) retrieval side by side and assembles one response.
The two channels keep their own score scales; nothing here fuses them.
"""
