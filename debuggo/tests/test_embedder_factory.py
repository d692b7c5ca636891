import pytest
from openai import OpenAIError

from debuggo.services.embedding import (
    EmbeddingDependencyError,
    LocalEmbedder,
    RemoteEmbedder,
    create_embedder,
)
from debuggo.settings import settings

from .conftest import FakeOpenAI


class StubLocal(LocalEmbedder):
    def __init__(self, available: bool):
        super().__init__(model_name="all-MiniLM-L6-v2", python_executable="python3")
        self.available = available
        self.checks = 0

    def check_dependencies(self) -> None:
        self.checks += 1
        if not self.available:
            raise EmbeddingDependencyError(
                "sentence-transformers not installed",
                remediation="./scripts/install_local_embeddings.sh",
            )


def test_prefers_local_when_available():
    local = StubLocal(available=True)

    embedder = create_embedder(True, "sk-test", local_embedder=local)

    assert embedder is local
    assert local.checks == 1


def test_falls_back_to_remote_when_local_missing():
    local = StubLocal(available=False)

    embedder = create_embedder(True, "sk-test", local_embedder=local)

    assert isinstance(embedder, RemoteEmbedder)
    assert embedder.api_key == "sk-test"


def test_fallback_embedder_is_usable():
    embedder = create_embedder(True, "sk-test", local_embedder=StubLocal(available=False))
    embedder._client = FakeOpenAI(embeddings=[[0.3, 0.4]])

    assert embedder.get_embedding("connection refused") == [0.3, 0.4]


def test_remote_only_skips_dependency_check():
    local = StubLocal(available=True)

    embedder = create_embedder(False, "sk-test", local_embedder=local)

    assert isinstance(embedder, RemoteEmbedder)
    assert local.checks == 0


def test_remote_model_is_forwarded():
    embedder = create_embedder(False, "sk-test", remote_model="text-embedding-3-small")

    assert embedder.model == "text-embedding-3-small"


def test_no_usable_backend_still_returns_remote():
    local = StubLocal(available=False)

    embedder = create_embedder(True, None, local_embedder=local)

    assert isinstance(embedder, RemoteEmbedder)
    assert local.checks == 1


def test_remote_without_key_fails_on_first_embedding(monkeypatch):
    monkeypatch.setattr(settings, "openai_api_key", None)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    embedder = create_embedder(False, "")

    assert isinstance(embedder, RemoteEmbedder)
    with pytest.raises(OpenAIError):
        embedder.get_embedding("connection refused")
