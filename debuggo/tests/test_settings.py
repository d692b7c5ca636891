from debuggo.settings import LogLevel, Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("DEBUGGO_OPENAI_API_KEY", raising=False)

    config = Settings(_env_file=None)

    assert config.log_level == LogLevel.INFO
    assert config.qdrant_url == "http://localhost:6333"
    assert config.qdrant_timeout == 30
    assert config.qdrant_collection_base_name == "debug_errors"
    assert config.qdrant_stats_vector_size == 384
    assert config.search_limit == 3
    assert config.local_embedding_model == "all-MiniLM-L6-v2"
    assert config.openai_api_key is None


def test_prefixed_environment(monkeypatch):
    monkeypatch.setenv("DEBUGGO_QDRANT_HOST", "qdrant")
    monkeypatch.setenv("DEBUGGO_SEARCH_LIMIT", "5")
    monkeypatch.setenv("DEBUGGO_PREFER_LOCAL_EMBEDDINGS", "false")

    config = Settings(_env_file=None)

    assert config.qdrant_url == "http://qdrant:6333"
    assert config.search_limit == 5
    assert config.prefer_local_embeddings is False


def test_plain_openai_key_is_accepted(monkeypatch):
    monkeypatch.delenv("DEBUGGO_OPENAI_API_KEY", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-plain")

    assert Settings(_env_file=None).openai_api_key == "sk-plain"
