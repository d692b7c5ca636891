"""Embedding backends and backend selection."""

from debuggo.services.embedding.base import Embedder, EmbeddingVector
from debuggo.services.embedding.exceptions import (
    EmbeddingDependencyError,
    EmbeddingError,
    EmbeddingRuntimeError,
    NoEmbeddingError,
)
from debuggo.services.embedding.factory import create_embedder
from debuggo.services.embedding.local import LocalEmbedder
from debuggo.services.embedding.remote import RemoteEmbedder

__all__ = [
    "Embedder",
    "EmbeddingVector",
    "EmbeddingDependencyError",
    "EmbeddingError",
    "EmbeddingRuntimeError",
    "NoEmbeddingError",
    "create_embedder",
    "LocalEmbedder",
    "RemoteEmbedder",
]
