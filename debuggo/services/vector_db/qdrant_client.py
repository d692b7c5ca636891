"""Qdrant vector database client implementation."""

import re
import time
from datetime import datetime
from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, TypeVar

from loguru import logger
from pydantic import ValidationError
from qdrant_client import QdrantClient as QdrantBaseClient
from qdrant_client.http import models as qdrant_models
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse

from debuggo.services.embedding import Embedder, EmbeddingVector, NoEmbeddingError
from debuggo.services.vector_db.exceptions import (
    VectorStoreProtocolError,
    VectorStoreTransportError,
)
from debuggo.services.vector_db.types import (
    NO_RESULTS_MESSAGE,
    SearchResult,
    StoredPoint,
)
from debuggo.settings import settings

T = TypeVar("T")

_last_point_id = 0


def _next_point_id() -> int:
    """Nanosecond timestamp, bumped if the clock did not move since the last call."""
    global _last_point_id
    point_id = time.time_ns()
    if point_id <= _last_point_id:
        point_id = _last_point_id + 1
    _last_point_id = point_id
    return point_id


class QdrantClient:
    """Client for Qdrant vector database."""

    def __init__(
        self,
        url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[int] = None,
        collection_base_name: Optional[str] = None,
        stats_vector_size: Optional[int] = None,
        client: Optional[QdrantBaseClient] = None,
    ):
        """
        Initialize Qdrant client.

        Collections are partitioned by vector size: a vector of length N
        always goes to ``<collection_base_name>_<N>``.

        :param url: Qdrant REST URL
        :param api_key: API key for authentication
        :param timeout: Request timeout in seconds
        :param collection_base_name: Prefix of every collection name
        :param stats_vector_size: Vector size of the partition reported by get_stats
        :param client: Preconfigured qdrant-client instance
        """
        self.url = url or settings.qdrant_url
        self.api_key = api_key or settings.qdrant_api_key
        self.timeout = timeout or settings.qdrant_timeout
        self.collection_base_name = (
            collection_base_name or settings.qdrant_collection_base_name
        )
        self.stats_vector_size = stats_vector_size or settings.qdrant_stats_vector_size
        self.client = client or self._build_client()
        self._partition_pattern = re.compile(
            rf"^{re.escape(self.collection_base_name)}_(\d+)$"
        )
        logger.info(f"Initialized Qdrant client: {self.url}")

    def _build_client(self) -> QdrantBaseClient:
        return QdrantBaseClient(
            url=self.url,
            api_key=self.api_key,
            timeout=self.timeout,
            check_compatibility=False,
        )

    def connect(self, url: str) -> None:
        """
        Point the client at another Qdrant instance.

        :param url: Qdrant REST URL, ``http://`` is assumed without a scheme
        """
        if "://" not in url:
            url = f"http://{url}"
        self.close()
        self.url = url
        self.client = self._build_client()
        logger.info(f"Connected Qdrant client to {self.url}")

    def close(self) -> None:
        """Release the underlying transport."""
        self.client.close()

    def collection_name_for(self, vector_size: int) -> str:
        """
        Name of the partition holding vectors of the given size.

        :param vector_size: Embedding dimension
        :returns: Collection name
        """
        return f"{self.collection_base_name}_{vector_size}"

    def _request(self, action: str, func: Callable[[], T]) -> T:
        try:
            return func()
        except UnexpectedResponse as e:
            raise VectorStoreTransportError(
                f"failed to {action}, status: {e.status_code}",
                status_code=e.status_code,
            ) from e
        except ResponseHandlingException as e:
            if isinstance(e.source, ValueError):
                raise VectorStoreProtocolError(
                    f"unexpected response while trying to {action}: {e.source}"
                ) from e
            raise VectorStoreTransportError(f"failed to {action}: {e.source}") from e
        except ValueError as e:
            # 2xx bodies are decoded with response.json() before validation
            raise VectorStoreProtocolError(
                f"unexpected response while trying to {action}: {e}"
            ) from e

    def _get_collection(self, collection_name: str) -> Optional[Any]:
        try:
            return self._request(
                f"check collection {collection_name}",
                lambda: self.client.get_collection(collection_name),
            )
        except VectorStoreTransportError as e:
            if e.status_code == 404:
                return None
            raise

    def collection_exists(self, collection_name: str) -> bool:
        """
        Check if a collection exists.

        :param collection_name: Name of the collection
        :returns: True if the collection exists
        """
        return self._get_collection(collection_name) is not None

    def ensure_collection(self, collection_name: str, vector_size: int) -> None:
        """
        Ensure a collection exists, creating it if necessary.

        An existing collection is left untouched, even if it was created
        with another vector size.

        :param collection_name: Name of the collection
        :param vector_size: Dimension of vectors to store
        """
        if self.collection_exists(collection_name):
            logger.debug(f"[VECTOR_DB] Collection {collection_name} already exists")
            return

        self._request(
            f"create collection {collection_name}",
            lambda: self.client.create_collection(
                collection_name=collection_name,
                vectors_config=qdrant_models.VectorParams(
                    size=vector_size,
                    distance=qdrant_models.Distance.COSINE,
                ),
            ),
        )
        logger.info(f"Created collection: {collection_name}, vector_size: {vector_size}")

    def store_embedding(
        self,
        embedder: Embedder,
        text: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> StoredPoint:
        """
        Embed text and upsert it into the partition matching its size.

        Metadata keys override ``text`` and ``timestamp`` on collision.

        :param embedder: Embedder producing the vector
        :param text: Source text
        :param metadata: Extra payload fields
        :returns: The stored point
        """
        vector = embedder.get_embedding(text)
        if not vector:
            raise NoEmbeddingError("embedder produced no vector, nothing was stored")

        collection_name = self.collection_name_for(len(vector))
        self.ensure_collection(collection_name, len(vector))

        payload: Dict[str, Any] = {
            "text": text,
            "timestamp": datetime.now().astimezone().isoformat(timespec="seconds"),
        }
        payload.update(metadata or {})
        point = StoredPoint(
            id=_next_point_id(),
            vector=vector,
            payload=payload,
            collection=collection_name,
        )

        logger.debug(
            f"[VECTOR_DB] Upserting point {point.id} to {collection_name}, payload keys: {sorted(payload)}"
        )
        self._request(
            f"store embedding in {collection_name}",
            lambda: self.client.upsert(
                collection_name=collection_name,
                points=[
                    qdrant_models.PointStruct(
                        id=point.id,
                        vector=point.vector,
                        payload=point.payload,
                    )
                ],
            ),
        )
        logger.info(f"Upserted point {point.id} to {collection_name}")
        return point

    def search(self, vector: EmbeddingVector, limit: int) -> List[SearchResult]:
        """
        Search the partition matching the query vector's size.

        :param vector: Query vector
        :param limit: Maximum number of results to return
        :returns: Hits sorted by cosine similarity
        """
        if not vector:
            raise NoEmbeddingError("cannot search without a query vector")

        collection_name = self.collection_name_for(len(vector))
        self.ensure_collection(collection_name, len(vector))

        logger.debug(
            f"[VECTOR_DB] Starting vector search: collection={collection_name}, limit={limit}"
        )
        response = self._request(
            f"search {collection_name}",
            lambda: self.client.query_points(
                collection_name=collection_name,
                query=vector,
                limit=limit,
                with_payload=True,
            ),
        )

        try:
            results = [
                SearchResult(id=hit.id, score=hit.score, payload=hit.payload or {})
                for hit in response.points
            ]
        except (AttributeError, ValidationError) as e:
            raise VectorStoreProtocolError(
                f"unexpected search response from {collection_name}: {e}"
            ) from e

        logger.debug(f"[VECTOR_DB] Search completed, found {len(results)} results")
        return results

    def search_similar(self, vector: EmbeddingVector, k: int) -> List[str]:
        """
        Search and render the hits as display documents.

        :param vector: Query vector
        :param k: Maximum number of results to return
        :returns: Formatted hits, or ``[NO_RESULTS_MESSAGE]`` when nothing matched
        """
        results = self.search(vector, k)
        if not results:
            return [NO_RESULTS_MESSAGE]
        return [result.format() for result in results]

    def get_stats(self) -> Dict[str, Any]:
        """
        Report the point count of the default partition.

        Only the ``stats_vector_size`` partition is inspected, see
        get_partition_stats for every partition.

        :returns: Stats dictionary
        """
        collection_name = self.collection_name_for(self.stats_vector_size)
        info = self._get_collection(collection_name)
        if info is None:
            return {
                "total_embeddings": 0,
                "collection": collection_name,
                "status": "collection_not_found",
            }

        return {
            "total_embeddings": info.points_count or 0,
            "collection": collection_name,
            "vector_size": self._vector_size(info),
            "status": "ok",
        }

    def get_partition_stats(self) -> Dict[str, Any]:
        """
        Report point counts for every dimension partition.

        :returns: Total count and one entry per partition, smallest size first
        """
        collections = self._request(
            "list collections",
            lambda: self.client.get_collections().collections,
        )

        partitions = []
        for description in collections:
            match = self._partition_pattern.match(description.name)
            if not match:
                continue
            info = self._get_collection(description.name)
            if info is None:
                continue
            partitions.append(
                {
                    "collection": description.name,
                    "vector_size": self._vector_size(info) or int(match.group(1)),
                    "total_embeddings": info.points_count or 0,
                }
            )

        partitions.sort(key=lambda partition: partition["vector_size"])
        return {
            "total_embeddings": sum(p["total_embeddings"] for p in partitions),
            "partitions": partitions,
        }

    @staticmethod
    def _vector_size(info: Any) -> Optional[int]:
        # Named vectors come back as a dict, which has no single size
        vectors = info.config.params.vectors
        return getattr(vectors, "size", None)


@lru_cache()
def get_qdrant_client() -> QdrantClient:
    """
    Get a singleton instance of the Qdrant client.

    :returns: QdrantClient instance
    """
    return QdrantClient(
        url=settings.qdrant_url,
        api_key=settings.qdrant_api_key,
        timeout=settings.qdrant_timeout,
        collection_base_name=settings.qdrant_collection_base_name,
        stats_vector_size=settings.qdrant_stats_vector_size,
    )
