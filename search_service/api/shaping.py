"""Mapping of search records to API response models."""

from typing import List

from sola_libs.models import Citation, HybridSearchResult, ScoredTopic, TopicCard

from .schemas import (
    CitationModel,
    HybridSearchResponse,
    ResourceMatches,
    ScoredTopicModel,
    SemanticMatches,
    SemanticSearchResponse,
    TopicCardModel,
)


def citation_model(citation: Citation) -> CitationModel:
    return CitationModel(
        verse_id=citation.verse_id,
        text=citation.text,
        book=citation.book,
        chapter=citation.chapter,
        verse=citation.verse,
        relevance_score=citation.relevance_score,
    )


def scored_topic_model(topic: ScoredTopic) -> ScoredTopicModel:
    return ScoredTopicModel(
        topic_id=topic.topic_id,
        name=topic.topic.name,
        source=topic.source,
        category=topic.topic.category,
        chapter_refs=list(topic.topic.chapter_refs) or None,
        verse_count=topic.verse_count,
        score=topic.score,
        matched_words=list(topic.matched_words) or None,
    )


def topic_card_model(card: TopicCard) -> TopicCardModel:
    topic = card.topic
    return TopicCardModel(
        topic_id=topic.topic_id,
        name=topic.topic.name,
        category=topic.topic.category,
        source=topic.source or None,
        verse_count=topic.verse_count,
        score=topic.score,
        top_verses=[citation_model(c) for c in card.top_verses],
    )


def semantic_response(query: str, citations: List[Citation]) -> SemanticSearchResponse:
    """Shape a semantic search result."""
    return SemanticSearchResponse(
        query=query,
        results=[citation_model(c) for c in citations],
    )


def hybrid_response(result: HybridSearchResult) -> HybridSearchResponse:
    """Shape a hybrid search result; absent channels become empty lists."""
    return HybridSearchResponse(
        query=result.query,
        topic_card=topic_card_model(result.topic_card) if result.topic_card else None,
        resource_matches=ResourceMatches(
            topics=[scored_topic_model(t) for t in result.topics or []],
        ),
        semantic_matches=SemanticMatches(
            verses=[citation_model(c) for c in result.verses or []],
        ),
    )
