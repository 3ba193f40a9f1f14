"""HTTP embedding providers.

Two wire protocols are supported:

- ``InstructionEmbedder`` talks to an instruction-tuned embedding service:
  ``POST {base_url}/embed`` with ``{"text", "instruction"}``, answered by
  ``{"embedding": [...]}``.
- ``EmbeddingServiceEmbedder`` talks to the platform embedding service:
  ``POST {base_url}/api/v1/embed`` with ``{"items": [{"text"}], "model"}``,
  answered by ``{"vectors": [[...]]}``.

Both share one ``httpx.AsyncClient`` per process.
"""

from abc import abstractmethod
from typing import Any, Dict, Optional

import httpx
import numpy as np
import structlog

from .base import Embedder, EmbeddingError

logger = structlog.get_logger("embeddings.http")

QUERY_INSTRUCTION = "Represent the question for retrieving relevant Bible verses: "


class _HttpEmbedder(Embedder):
    """Shared request handling for JSON-over-HTTP embedding services."""

    endpoint = ""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.http_client = client or httpx.AsyncClient(timeout=timeout)

    @abstractmethod
    def _payload(self, text: str) -> Dict[str, Any]:
        """Build the JSON request body for one query."""

    @abstractmethod
    def _extract(self, data: Dict[str, Any]) -> Any:
        """Pull the raw vector out of a decoded response."""

    async def embed_query(self, text: str) -> np.ndarray:
        url = f"{self.base_url}{self.endpoint}"
        try:
            response = await self.http_client.post(url, json=self._payload(text))
        except httpx.HTTPError as e:
            logger.error("Embedding service call failed", url=url, error=str(e))
            raise EmbeddingError(f"Failed to call embedding service: {e}") from e

        if response.status_code != 200:
            logger.error(
                "Embedding service returned an error",
                url=url,
                status_code=response.status_code
            )
            raise EmbeddingError(
                f"Embedding service returned status {response.status_code}: {response.text}"
            )

        try:
            vector = self._extract(response.json())
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise EmbeddingError(f"Malformed embedding response: {e}") from e

        if not vector:
            raise EmbeddingError("Embedding service returned an empty vector")

        return np.asarray(vector, dtype=np.float32)

    async def close(self) -> None:
        await self.http_client.aclose()


class InstructionEmbedder(_HttpEmbedder):
    """Instruction-tuned embedding service client."""

    endpoint = "/embed"

    def __init__(
        self,
        base_url: str,
        instruction: str = QUERY_INSTRUCTION,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(base_url, timeout=timeout, client=client)
        self.instruction = instruction

    def _payload(self, text: str) -> Dict[str, Any]:
        return {"text": text, "instruction": self.instruction}

    def _extract(self, data: Dict[str, Any]) -> Any:
        return data["embedding"]


class EmbeddingServiceEmbedder(_HttpEmbedder):
    """Platform embedding service client."""

    endpoint = "/api/v1/embed"

    def __init__(
        self,
        base_url: str,
        model: str = "default",
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(base_url, timeout=timeout, client=client)
        self.model = model

    def _payload(self, text: str) -> Dict[str, Any]:
        return {"items": [{"text": text}], "model": self.model}

    def _extract(self, data: Dict[str, Any]) -> Any:
        return data["vectors"][0]
