"""Shared fakes for the debuggo test suite."""

import math
import subprocess
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import httpx
import pytest
from qdrant_client.http import models as qdrant_models
from qdrant_client.http.exceptions import UnexpectedResponse

from debuggo.services.embedding.local import CHECK_SCRIPT
from debuggo.services.vector_db import QdrantClient


def cosine(a: List[float], b: List[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class FakeQdrant:
    """In-memory stand-in for qdrant_client.QdrantClient."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, Any]] = {}
        self.get_calls: List[str] = []
        self.create_calls: List[tuple] = []
        self.upsert_calls: List[tuple] = []
        self.query_calls: List[dict] = []
        self.closed = False

    def get_collection(self, collection_name: str):
        self.get_calls.append(collection_name)
        if collection_name not in self.collections:
            raise UnexpectedResponse(404, "Not Found", b"", httpx.Headers())
        collection = self.collections[collection_name]
        return SimpleNamespace(
            points_count=len(collection["points"]),
            config=SimpleNamespace(
                params=SimpleNamespace(
                    vectors=qdrant_models.VectorParams(
                        size=collection["size"], distance=qdrant_models.Distance.COSINE
                    )
                )
            ),
        )

    def get_collections(self):
        return SimpleNamespace(
            collections=[SimpleNamespace(name=name) for name in self.collections]
        )

    def create_collection(self, collection_name: str, vectors_config):
        self.create_calls.append((collection_name, vectors_config))
        self.collections[collection_name] = {"size": vectors_config.size, "points": {}}
        return True

    def upsert(self, collection_name: str, points):
        self.upsert_calls.append((collection_name, points))
        collection = self.collections[collection_name]
        for point in points:
            assert len(point.vector) == collection["size"]
            collection["points"][point.id] = (list(point.vector), dict(point.payload))

    def query_points(self, collection_name: str, query, limit: int, with_payload: bool):
        self.query_calls.append(
            {
                "collection_name": collection_name,
                "query": query,
                "limit": limit,
                "with_payload": with_payload,
            }
        )
        hits = [
            SimpleNamespace(id=point_id, score=cosine(query, vector), payload=payload)
            for point_id, (vector, payload) in self.collections[collection_name][
                "points"
            ].items()
        ]
        hits.sort(key=lambda hit: hit.score, reverse=True)
        return SimpleNamespace(points=hits[:limit])

    def close(self):
        self.closed = True


class FakeEmbedder:
    """Embedder returning a fixed vector per text."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, default=None):
        self.vectors = vectors or {}
        self.default = default if default is not None else [1.0, 0.0, 0.0]
        self.calls: List[str] = []

    def get_embedding(self, text: str):
        self.calls.append(text)
        return self.vectors.get(text, self.default)


class FakeRunner:
    """Stands in for subprocess.run."""

    def __init__(self, check_output: str = "OK\n", embed_output: str = "", error=None):
        self.check_output = check_output
        self.embed_output = embed_output
        self.error = error
        self.calls: List[tuple] = []

    def __call__(self, args, **kwargs):
        self.calls.append((args, kwargs))
        if self.error is not None:
            raise self.error
        stdout = self.check_output if args[2] == CHECK_SCRIPT else self.embed_output
        return subprocess.CompletedProcess(args, 0, stdout=stdout, stderr="")


class FakeOpenAI:
    """Minimal OpenAI client with embeddings and chat completions."""

    def __init__(self, embeddings=None, choices=None, error=None):
        self.embedding_data = [] if embeddings is None else embeddings
        self.choices = [] if choices is None else choices
        self.error = error
        self.embedding_requests: List[dict] = []
        self.chat_requests: List[dict] = []
        self.embeddings = SimpleNamespace(create=self._create_embedding)
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create_chat))

    def _create_embedding(self, **kwargs):
        self.embedding_requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            data=[SimpleNamespace(embedding=vector) for vector in self.embedding_data]
        )

    def _create_chat(self, **kwargs):
        self.chat_requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            choices=[
                SimpleNamespace(message=SimpleNamespace(content=content))
                for content in self.choices
            ]
        )


@pytest.fixture
def fake_qdrant() -> FakeQdrant:
    return FakeQdrant()


@pytest.fixture
def vector_db(fake_qdrant: FakeQdrant) -> QdrantClient:
    return QdrantClient(
        url="http://qdrant.test:6333",
        collection_base_name="debug_errors",
        stats_vector_size=384,
        client=fake_qdrant,
    )
