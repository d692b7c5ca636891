import enum
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, enum.Enum):  # noqa: WPS600
    """Possible log levels."""

    NOTSET = "NOTSET"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    FATAL = "FATAL"


class Settings(BaseSettings):
    """
    Application settings.

    These parameters can be configured
    with environment variables.
    """

    log_level: LogLevel = LogLevel.INFO
    enable_file_logging: bool = False
    logs_dir: Optional[str] = None
    structured_logging: bool = False

    # Qdrant Vector DB settings
    qdrant_host: str = "localhost"
    qdrant_port: int = 6333
    qdrant_api_key: Optional[str] = None
    qdrant_timeout: int = 30  # Seconds

    # Base name of the collections, the vector size is appended to it
    qdrant_collection_base_name: str = "debug_errors"
    # Partition reported by the stats banner (all-MiniLM-L6-v2 output size)
    qdrant_stats_vector_size: int = 384
    search_limit: int = 3

    # Local embedding settings
    prefer_local_embeddings: bool = True
    local_embedding_model: str = "all-MiniLM-L6-v2"
    local_python_executable: Optional[str] = None
    local_install_script: str = "./scripts/install_local_embeddings.sh"

    # OpenAI settings
    openai_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("DEBUGGO_OPENAI_API_KEY", "OPENAI_API_KEY"),
    )
    openai_embedding_model: str = "text-embedding-ada-002"
    openai_completion_model: str = "gpt-4o"
    openai_temperature: float = 0.3

    @property
    def qdrant_url(self) -> str:
        """
        Assemble Qdrant URL from settings.

        :return: Qdrant REST URL.
        """
        return f"http://{self.qdrant_host}:{self.qdrant_port}"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DEBUGGO_",
        extra="ignore",
    )


settings = Settings()
