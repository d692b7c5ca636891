"""Shared types for vector database module."""

from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field

NO_RESULTS_MESSAGE = "No similar errors found in the database."
UNKNOWN_CONTENT = "Unknown content"
UNKNOWN_TIME = "Unknown time"


class StoredPoint(BaseModel):
    """Point written to a collection."""

    id: int
    vector: List[float]
    payload: Dict[str, Any]
    collection: str


class SearchResult(BaseModel):
    """Single hit of a similarity search."""

    id: Union[int, str]
    score: float
    payload: Dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        value = self.payload.get("text")
        return value if isinstance(value, str) else UNKNOWN_CONTENT

    @property
    def timestamp(self) -> str:
        value = self.payload.get("timestamp")
        return value if isinstance(value, str) else UNKNOWN_TIME

    def format(self) -> str:
        """Render the hit as a display document."""
        return (
            f"Similarity: {self.score:.2f}\n"
            f"Content: {self.text}\n"
            f"Timestamp: {self.timestamp}\n"
        )
