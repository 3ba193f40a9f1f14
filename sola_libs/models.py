"""Request-scoped records passed between the retrieval ports and the service.

All records are immutable. They are produced fresh for every query and never
cached or shared across requests.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class ScoredPassage:
    """A verse returned by similarity search.

    ``score`` is cosine similarity, typically in ``[0, 1]`` for normalized
    embeddings.
    """
    passage_id: str
    book: str
    chapter: int
    verse: int
    text: str
    score: float

    @property
    def location(self) -> Tuple[str, int, int]:
        return (self.book, self.chapter, self.verse)


@dataclass(frozen=True)
class Citation:
    """A verse projected for output.

    ``relevance_score`` is ``None`` where relevance is undefined, e.g. the
    verses attached to a topic card.
    """
    verse_id: str
    book: str
    chapter: int
    verse: int
    text: str
    relevance_score: Optional[float] = None

    @classmethod
    def from_passage(cls, passage: ScoredPassage) -> "Citation":
        return cls(
            verse_id=passage.passage_id,
            book=passage.book,
            chapter=passage.chapter,
            verse=passage.verse,
            text=passage.text,
            relevance_score=passage.score,
        )


@dataclass(frozen=True)
class Topic:
    """An entry of the curated topical index.

    ``label`` and ``sub_label`` are the primary and secondary label fields
    used for keyword scoring; ``name`` is the display name.
    """
    topic_id: str
    name: str
    source: str
    label: str = ""
    sub_label: str = ""
    category: Optional[str] = None
    chapter_refs: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ScoredTopic:
    """A topic matched by keyword search."""
    topic: Topic
    verse_count: int
    score: float
    matched_words: Tuple[str, ...] = ()

    @property
    def topic_id(self) -> str:
        return self.topic.topic_id

    @property
    def source(self) -> str:
        return self.topic.source


@dataclass(frozen=True)
class TopicCard:
    """A featured topic plus its top representative verses."""
    topic: ScoredTopic
    top_verses: List[Citation] = field(default_factory=list)


@dataclass(frozen=True)
class HybridSearchResult:
    """Combined output of both retrieval channels for one query."""
    query: str
    verses: List[Citation] = field(default_factory=list)
    topics: List[ScoredTopic] = field(default_factory=list)
    topic_card: Optional[TopicCard] = None
