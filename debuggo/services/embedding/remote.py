"""OpenAI hosted embeddings."""

from typing import Optional

from loguru import logger
from openai import OpenAI

from debuggo.services.embedding.base import EmbeddingVector
from debuggo.settings import settings


class RemoteEmbedder:
    """Embedder backed by the OpenAI embeddings endpoint (costs money)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize the remote embedder.

        The OpenAI client is built on first use, so a bad key only
        surfaces when an embedding is requested.

        :param api_key: OpenAI API key
        :param model: Embedding model identifier
        :param client: Preconfigured OpenAI client
        """
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.openai_embedding_model
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def get_embedding(self, text: str) -> Optional[EmbeddingVector]:
        """
        Embed text with the hosted model.

        :param text: Text to embed
        :returns: Embedding vector, or None if the provider returned no data
        """
        response = self.client.embeddings.create(model=self.model, input=[text])
        if not response.data:
            logger.warning(f"Embedding provider returned no data for model {self.model}")
            return None
        return list(response.data[0].embedding)
