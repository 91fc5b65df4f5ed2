from __future__ import annotations

import logging
from typing import List, Optional

from openai import OpenAI

from ..config import LlmSettings
from ..domain import EmbeddingGenerationFailed

logger = logging.getLogger(__name__)


def build_embedding_text(message: str, conversation_context: str, *, tail_chars: int, max_chars: int) -> str:
    """Join the user message with the tail of the conversation, bounded for the embedding model."""

    tail = conversation_context[-tail_chars:] if tail_chars > 0 else ""
    text = f"{message}\n{tail}" if tail else message
    return text[:max_chars]


class OpenAIEmbedder:
    def __init__(self, settings: LlmSettings, client: Optional[OpenAI] = None) -> None:
        self.settings = settings
        self._client = client

    def _ensure_client(self) -> OpenAI:
        if self._client is None:
            if not self.settings.is_configured:
                missing = ", ".join(self.settings.missing_env_vars)
                raise EmbeddingGenerationFailed(f"OpenAI is not configured. Missing: {missing}")
            self._client = OpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                organization=self.settings.organization,
            )
        return self._client

    def embed(self, text: str) -> List[float]:
        client = self._ensure_client()
        try:
            response = client.embeddings.create(model=self.settings.embedding_model, input=text)
        except Exception as exc:  # noqa: BLE001
            raise EmbeddingGenerationFailed(f"Embedding request failed: {exc}") from exc
        if not response.data:
            raise EmbeddingGenerationFailed("Embedding response contained no vectors.")
        vector = list(response.data[0].embedding)
        logger.debug("Generated %d-dimension embedding", len(vector))
        return vector
