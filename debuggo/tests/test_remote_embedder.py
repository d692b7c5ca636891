import pytest

from debuggo.services.embedding import RemoteEmbedder

from .conftest import FakeOpenAI


def test_returns_first_vector_with_configured_model():
    client = FakeOpenAI(embeddings=[[0.1, 0.2], [0.9, 0.9]])
    embedder = RemoteEmbedder(api_key="sk-test", model="text-embedding-ada-002", client=client)

    assert embedder.get_embedding("disk full") == [0.1, 0.2]
    assert client.embedding_requests == [
        {"model": "text-embedding-ada-002", "input": ["disk full"]}
    ]


def test_empty_provider_response_is_none_not_error():
    embedder = RemoteEmbedder(api_key="sk-test", client=FakeOpenAI(embeddings=[]))

    assert embedder.get_embedding("disk full") is None


def test_provider_errors_propagate_unchanged():
    error = RuntimeError("401 invalid api key")
    embedder = RemoteEmbedder(api_key="sk-test", client=FakeOpenAI(error=error))

    with pytest.raises(RuntimeError) as excinfo:
        embedder.get_embedding("disk full")

    assert excinfo.value is error


def test_construction_does_not_validate_key():
    embedder = RemoteEmbedder(api_key="not-a-real-key")

    assert embedder._client is None
