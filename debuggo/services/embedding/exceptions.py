"""Errors raised by the embedding backends."""

from typing import Optional


class EmbeddingError(Exception):
    """Base class for embedding failures."""


class EmbeddingDependencyError(EmbeddingError):
    """The local backend's runtime or embedding library is missing."""

    def __init__(self, message: str, remediation: Optional[str] = None):
        super().__init__(message)
        self.remediation = remediation


class EmbeddingRuntimeError(EmbeddingError):
    """The backend was available but failed to produce an embedding."""


class NoEmbeddingError(EmbeddingError):
    """An empty vector reached a step that needs a real one."""
