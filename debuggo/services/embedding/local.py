"""Local embeddings computed by sentence-transformers in a separate interpreter."""

import json
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

from loguru import logger

from debuggo.services.embedding.base import EmbeddingVector
from debuggo.services.embedding.exceptions import (
    EmbeddingDependencyError,
    EmbeddingRuntimeError,
)
from debuggo.settings import settings

VENV_PYTHON = Path(".venv") / "bin" / "python"

# Reads the text from stdin, the model name is argv[1]
EMBED_SCRIPT = """
import json
import sys
try:
    from sentence_transformers import SentenceTransformer
    model = SentenceTransformer(sys.argv[1])
    text = sys.stdin.read()
    embedding = model.encode(text).tolist()
    print(json.dumps({"embedding": embedding}))
except Exception as e:
    print(json.dumps({"error": str(e)}))
"""

CHECK_SCRIPT = """
try:
    import sentence_transformers
    print("OK")
except ImportError:
    print("MISSING")
"""

Runner = Callable[..., subprocess.CompletedProcess]


class LocalEmbedder:
    """Embedder that runs a pinned sentence-transformers model out of process."""

    def __init__(
        self,
        model_name: Optional[str] = None,
        python_executable: Optional[str] = None,
        install_script: Optional[str] = None,
        runner: Runner = subprocess.run,
    ):
        """
        Initialize the local embedder.

        :param model_name: sentence-transformers model to load
        :param python_executable: Interpreter to run, autodetected when omitted
        :param install_script: Script suggested when dependencies are missing
        :param runner: Callable with the signature of subprocess.run
        """
        self.model_name = model_name or settings.local_embedding_model
        self.python_executable = python_executable or settings.local_python_executable
        self.install_script = install_script or settings.local_install_script
        self._run = runner

    def _python(self) -> str:
        if self.python_executable:
            return self.python_executable
        if VENV_PYTHON.exists():
            return str(VENV_PYTHON)
        return "python3"

    def _execute(self, args: List[str], stdin: str = "") -> str:
        result = self._run(
            [self._python(), "-c", *args],
            input=stdin,
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout

    def check_dependencies(self) -> None:
        """
        Verify the interpreter and sentence-transformers are installed.

        :raises EmbeddingDependencyError: if either one is missing
        """
        try:
            output = self._execute([CHECK_SCRIPT])
        except (OSError, subprocess.CalledProcessError) as e:
            raise EmbeddingDependencyError(
                f"python not available: {e}", remediation=self.install_script
            ) from e

        if output.strip() != "OK":
            raise EmbeddingDependencyError(
                f"sentence-transformers not installed. Run: {self.install_script}",
                remediation=self.install_script,
            )
        logger.debug(f"Local embedding dependencies available via {self._python()}")

    def get_embedding(self, text: str) -> Optional[EmbeddingVector]:
        """
        Embed text with the local model.

        :param text: Text to embed
        :returns: Embedding vector
        :raises EmbeddingRuntimeError: if the subprocess fails or misbehaves
        """
        try:
            output = self._execute([EMBED_SCRIPT, self.model_name], stdin=text)
        except OSError as e:
            raise EmbeddingRuntimeError(f"failed to execute python script: {e}") from e
        except subprocess.CalledProcessError as e:
            raise EmbeddingRuntimeError(
                f"python script exited with status {e.returncode}: {(e.stderr or '').strip()}"
            ) from e

        try:
            response = json.loads(output)
        except ValueError as e:
            raise EmbeddingRuntimeError(
                f"failed to parse embedding response: {e}"
            ) from e

        if not isinstance(response, dict):
            raise EmbeddingRuntimeError(
                f"unexpected embedding response: {type(response).__name__}"
            )
        if response.get("error"):
            raise EmbeddingRuntimeError(f"python embedding error: {response['error']}")

        embedding = response.get("embedding")
        if not isinstance(embedding, list):
            raise EmbeddingRuntimeError("embedding response is missing 'embedding'")

        logger.debug(
            f"Generated local embedding with {self.model_name}, size: {len(embedding)}"
        )
        return [float(value) for value in embedding]
