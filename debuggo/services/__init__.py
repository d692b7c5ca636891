"""Services package for debuggo."""

from debuggo.services import ai, embedding, vector_db

__all__ = [
    "ai",
    "embedding",
    "vector_db",
]
