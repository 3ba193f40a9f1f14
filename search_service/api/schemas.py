"""Request and response models for the search API.

Optional fields are left out of responses when unset (routes serialize with
``response_model_exclude_none``). Result lists are always present, even when
empty.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class SemanticSearchRequest(BaseModel):
    """Request model for semantic search."""
    query: Optional[str] = Field(None, description="Search query")
    limit: Optional[int] = Field(None, description="Maximum number of verses (1-50, else default)")


class HybridSearchRequest(BaseModel):
    """Request model for hybrid search."""
    query: Optional[str] = Field(None, description="Search query")
    verse_limit: Optional[int] = Field(None, description="Maximum number of verses (1-50, else default)")
    topic_limit: Optional[int] = Field(None, description="Maximum number of topics (1-50, else default)")


class CitationModel(BaseModel):
    """A cited verse."""
    verse_id: str = Field(..., description="OSIS verse ID")
    text: str = Field(..., description="Verse text")
    book: str = Field(..., description="OSIS book ID")
    chapter: int = Field(..., description="Chapter number")
    verse: int = Field(..., description="Verse number")
    relevance_score: Optional[float] = Field(None, description="Cosine similarity to the query")


class ScoredTopicModel(BaseModel):
    """A topic matched by keyword search."""
    topic_id: str = Field(..., description="Topic ID")
    name: str = Field(..., description="Display name")
    source: str = Field(..., description="Source of the topical entry")
    category: Optional[str] = Field(None, description="Topic category")
    chapter_refs: Optional[List[str]] = Field(None, description="Related chapter references")
    verse_count: int = Field(..., description="Number of mapped verses")
    score: float = Field(..., description="Keyword match score")
    matched_words: Optional[List[str]] = Field(None, description="Query keywords that matched")


class TopicCardModel(BaseModel):
    """A featured topic with its key verses."""
    topic_id: str = Field(..., description="Topic ID")
    name: str = Field(..., description="Display name")
    category: Optional[str] = Field(None, description="Topic category")
    source: Optional[str] = Field(None, description="Source of the topical entry")
    verse_count: int = Field(..., description="Number of mapped verses")
    score: float = Field(..., description="Keyword match score")
    top_verses: List[CitationModel] = Field(default_factory=list, description="Most important verses")


class ResourceMatches(BaseModel):
    """Matches from the curated topical index."""
    topics: List[ScoredTopicModel] = Field(default_factory=list, description="Matched topics")


class SemanticMatches(BaseModel):
    """Matches from embedding similarity search."""
    verses: List[CitationModel] = Field(default_factory=list, description="Similar verses")


class SemanticSearchResponse(BaseModel):
    """Response model for semantic search."""
    query: str = Field(..., description="Original query")
    results: List[CitationModel] = Field(default_factory=list, description="Similar verses")


class HybridSearchResponse(BaseModel):
    """Response model for hybrid search."""
    query: str = Field(..., description="Original query")
    topic_card: Optional[TopicCardModel] = Field(None, description="Featured topic, if any qualified")
    resource_matches: ResourceMatches = Field(default_factory=ResourceMatches)
    semantic_matches: SemanticMatches = Field(default_factory=SemanticMatches)
