"""Pick the embedding backend for an operation."""

from typing import Optional

from loguru import logger

from debuggo.services.embedding.base import Embedder
from debuggo.services.embedding.exceptions import EmbeddingDependencyError
from debuggo.services.embedding.local import LocalEmbedder
from debuggo.services.embedding.remote import RemoteEmbedder


def create_embedder(
    prefer_local: bool,
    remote_api_key: Optional[str],
    local_embedder: Optional[LocalEmbedder] = None,
    remote_model: Optional[str] = None,
) -> Embedder:
    """
    Create the embedder to use for a single operation.

    The local backend is returned when preferred and its dependencies
    check out, otherwise the remote one. The remote backend is returned
    even without a key: a missing or bad key surfaces as an OpenAI error
    on the first embedding request. Nothing is cached, so every call
    makes a fresh choice.

    :param prefer_local: Try the free local backend first
    :param remote_api_key: OpenAI API key for the remote backend
    :param local_embedder: Local backend to check, built from settings if omitted
    :param remote_model: Remote embedding model, from settings if omitted
    :returns: Embedder instance
    """
    if prefer_local:
        local = local_embedder or LocalEmbedder()
        try:
            local.check_dependencies()
        except EmbeddingDependencyError as e:
            logger.warning(f"Local embedder not available: {e}")
        else:
            logger.info(f"Using local embeddings with model {local.model_name}")
            return local

    if not remote_api_key:
        logger.warning("OpenAI API key is not configured, embedding requests will fail")
    logger.info("Using OpenAI embeddings")
    return RemoteEmbedder(api_key=remote_api_key, model=remote_model)
