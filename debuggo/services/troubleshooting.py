"""Troubleshooting service: log errors and ask for solutions."""

from typing import Any, Callable, Dict, List, Optional

from loguru import logger
from openai import OpenAIError
from pydantic import BaseModel

from debuggo.services.ai import DiagnosisError, DiagnosisGenerator, OpenAIDiagnosisGenerator
from debuggo.services.embedding import (
    Embedder,
    LocalEmbedder,
    NoEmbeddingError,
    create_embedder,
)
from debuggo.services.vector_db import NO_RESULTS_MESSAGE, QdrantClient
from debuggo.settings import settings

EmbedderFactory = Callable[[bool, Optional[str]], Embedder]


class LoggedError(BaseModel):
    """Result of logging a new error."""

    point_id: int
    collection: str
    backend: str
    error_text: str
    solution_text: str


class SolutionResult(BaseModel):
    """Result of asking for a solution."""

    query: str
    backend: str
    similar_documents: List[str]
    has_matches: bool
    diagnosis: Optional[str] = None
    diagnosis_error: Optional[str] = None


def backend_name(embedder: Embedder) -> str:
    """Short label of the embedding backend."""
    return "local" if isinstance(embedder, LocalEmbedder) else "openai"


def format_error_document(error_text: str, solution_text: str) -> str:
    """Text that is embedded for a logged error."""
    return f"Error: {error_text}\nSolution: {solution_text}"


class TroubleshootingService:
    """
    Ties embedder selection, the vector store and diagnosis together.

    The embedder is chosen again for every operation, so logging and
    asking may end up on different backends (and partitions).
    """

    def __init__(
        self,
        vector_db: QdrantClient,
        openai_api_key: Optional[str] = None,
        prefer_local: Optional[bool] = None,
        search_limit: Optional[int] = None,
        embedder_factory: EmbedderFactory = create_embedder,
        diagnosis_generator: Optional[DiagnosisGenerator] = None,
    ):
        """
        Initialize the troubleshooting service.

        :param vector_db: Vector store client
        :param openai_api_key: OpenAI API key, diagnosis is skipped without one
        :param prefer_local: Try the local embedder first
        :param search_limit: Number of similar errors to retrieve
        :param embedder_factory: Callable choosing the embedder
        :param diagnosis_generator: Diagnosis generator, OpenAI when omitted
        """
        self.vector_db = vector_db
        self.openai_api_key = openai_api_key or settings.openai_api_key
        self.prefer_local = (
            settings.prefer_local_embeddings if prefer_local is None else prefer_local
        )
        self.search_limit = search_limit or settings.search_limit
        self.embedder_factory = embedder_factory
        self._diagnosis_generator = diagnosis_generator

    @property
    def can_diagnose(self) -> bool:
        return self._diagnosis_generator is not None or bool(self.openai_api_key)

    @property
    def diagnosis_generator(self) -> DiagnosisGenerator:
        if self._diagnosis_generator is None:
            self._diagnosis_generator = OpenAIDiagnosisGenerator(api_key=self.openai_api_key)
        return self._diagnosis_generator

    def select_embedder(self) -> Embedder:
        """Choose the embedder for one operation."""
        embedder = self.embedder_factory(self.prefer_local, self.openai_api_key)
        logger.debug(f"Selected {backend_name(embedder)} embedder")
        return embedder

    def log_error(self, error_text: str, solution_text: str) -> LoggedError:
        """
        Store an error together with the fix that solved it.

        :param error_text: The error as the user saw it
        :param solution_text: How it was fixed
        :return: Summary of the stored point
        """
        embedder = self.select_embedder()
        metadata: Dict[str, Any] = {
            "error_type": "user_logged",
            "has_solution": True,
            "original_error": error_text,
            "solution": solution_text,
        }

        point = self.vector_db.store_embedding(
            embedder, format_error_document(error_text, solution_text), metadata
        )
        logger.info(f"Logged error as point {point.id} in {point.collection}")

        return LoggedError(
            point_id=point.id,
            collection=point.collection,
            backend=backend_name(embedder),
            error_text=error_text,
            solution_text=solution_text,
        )

    def ask_for_solution(self, query_text: str, diagnose: bool = True) -> SolutionResult:
        """
        Retrieve similar past errors and optionally a model diagnosis.

        A failed diagnosis is reported in ``diagnosis_error`` and does not
        discard the retrieved documents.

        :param query_text: Description of the new error
        :param diagnose: Ask the language model for a diagnosis
        :return: Retrieved documents and diagnosis
        """
        embedder = self.select_embedder()
        vector = embedder.get_embedding(query_text)
        if not vector:
            raise NoEmbeddingError("embedder produced no vector for the query")

        documents = self.vector_db.search_similar(vector, self.search_limit)
        has_matches = documents != [NO_RESULTS_MESSAGE]
        logger.info(
            f"Found {len(documents) if has_matches else 0} similar error(s) for query"
        )

        result = SolutionResult(
            query=query_text,
            backend=backend_name(embedder),
            similar_documents=documents,
            has_matches=has_matches,
        )

        if not diagnose:
            return result
        if not self.can_diagnose:
            logger.warning("OpenAI API key not configured, skipping diagnosis")
            return result

        try:
            result.diagnosis = self.diagnosis_generator.generate_fix(
                query_text, documents if has_matches else []
            )
        except (DiagnosisError, OpenAIError) as e:
            logger.error(f"Error generating diagnosis: {e}")
            result.diagnosis_error = str(e)

        return result

    def get_stats(self) -> Dict[str, Any]:
        """Stats of the default partition."""
        return self.vector_db.get_stats()

    def get_partition_stats(self) -> Dict[str, Any]:
        """Stats of every vector size partition."""
        return self.vector_db.get_partition_stats()
