"""Ranking policy for hybrid search.

Contents
- ``topic_card``: source-preference selection of the featured topic
"""
