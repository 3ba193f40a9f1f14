"""Embedder selection from configuration."""

from ..common.config import BaseConfig
from .base import Embedder
from .http import EmbeddingServiceEmbedder, InstructionEmbedder


def create_embedder(config: BaseConfig) -> Embedder:
    """Build the embedder named by ``embedding_provider``.

    ``custom`` selects the instruction-tuned service, ``service`` the
    platform embedding service.
    """
    provider = config.embedding_provider.lower()

    if provider == "custom":
        return InstructionEmbedder(
            base_url=config.embedding_service_url,
            timeout=config.embedding_timeout,
        )
    if provider == "service":
        return EmbeddingServiceEmbedder(
            base_url=config.embedding_service_url,
            model=config.embedding_model,
            timeout=config.embedding_timeout,
        )

    raise ValueError(f"Unsupported embedding provider: {config.embedding_provider}")
