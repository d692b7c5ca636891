"""Embedding capability shared by every backend."""

from typing import List, Optional, Protocol, runtime_checkable

EmbeddingVector = List[float]


@runtime_checkable
class Embedder(Protocol):
    """Anything that turns text into a fixed-length vector."""

    def get_embedding(self, text: str) -> Optional[EmbeddingVector]:
        """
        Embed a single text.

        :param text: Text to embed
        :returns: The vector, or None when the backend produced nothing
        """
        ...
