"""Query embedding interface."""

from abc import ABC, abstractmethod

import numpy as np


class Embedder(ABC):
    """Turns query text into a dense vector.

    Implementations raise ``EmbeddingError`` on any failure; they never
    return an empty or partial vector.
    """

    @abstractmethod
    async def embed_query(self, text: str) -> np.ndarray:
        """Embed a search query."""
        pass

    async def close(self) -> None:
        """Release client resources."""
        return None


class EmbeddingError(Exception):
    """Raised when a query embedding cannot be produced."""
    pass
