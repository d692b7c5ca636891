"""Vector database services module."""

# Export types first to avoid circular imports
from debuggo.services.vector_db.types import (
    NO_RESULTS_MESSAGE,
    SearchResult,
    StoredPoint,
)
from debuggo.services.vector_db.exceptions import (
    VectorStoreError,
    VectorStoreProtocolError,
    VectorStoreTransportError,
)

# Export the client implementations
from debuggo.services.vector_db.qdrant_client import (
    QdrantClient,
    get_qdrant_client,
)

__all__ = [
    "NO_RESULTS_MESSAGE",
    "QdrantClient",
    "SearchResult",
    "StoredPoint",
    "VectorStoreError",
    "VectorStoreProtocolError",
    "VectorStoreTransportError",
    "get_qdrant_client",
]
