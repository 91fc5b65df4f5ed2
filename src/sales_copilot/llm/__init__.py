"""OpenAI-backed collaborators: query embeddings and the reply model."""

from __future__ import annotations

from .embeddings import OpenAIEmbedder, build_embedding_text
from .responder import OpenAIResponder, render_context_sections

__all__ = ["OpenAIEmbedder", "OpenAIResponder", "build_embedding_text", "render_context_sections"]
