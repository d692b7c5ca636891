"""
Diagnosis Generator Module

This module asks a chat model for a root cause and fix for a new error,
given the similar past errors retrieved from the vector database.
"""

from typing import List, Optional, Protocol, Sequence

from loguru import logger
from openai import OpenAI

from debuggo.services.ai.exceptions import DiagnosisError
from debuggo.settings import settings

SYSTEM_PROMPT = (
    "You are a senior DevOps engineer. Help troubleshoot infra issues like logs, "
    "Kubernetes configs, and Terraform plans."
)


class DiagnosisGenerator(Protocol):
    """Anything that turns a query and retrieved documents into a diagnosis."""

    def generate_fix(self, user_input: str, similar_docs: Sequence[str]) -> str:
        ...


def build_prompt(user_input: str, similar_docs: Sequence[str]) -> str:
    """
    Build the user message sent to the model.

    :param user_input: Error description from the user
    :param similar_docs: Formatted similar past errors
    :return: Prompt text
    """
    lines: List[str] = [
        "You are an infrastructure assistant. A user has pasted a log/config "
        "snippet and you must help debug it.",
        "",
        "New issue:",
        user_input,
        "",
    ]

    if similar_docs:
        lines.append("Similar past issues:")
        for index, doc in enumerate(similar_docs, start=1):
            lines.append(f"{index}. {doc}")

    lines.extend(["", "---", "Please respond with:", "- Likely Root Cause", "- Suggested Fix"])
    return "\n".join(lines) + "\n"


class OpenAIDiagnosisGenerator:
    """Diagnosis generator backed by OpenAI chat completions (costs money)."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        client: Optional[OpenAI] = None,
    ):
        """
        Initialize the diagnosis generator.

        :param api_key: OpenAI API key
        :param model: Chat model to use
        :param temperature: Sampling temperature
        :param client: Preconfigured OpenAI client
        """
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.openai_completion_model
        self.temperature = (
            settings.openai_temperature if temperature is None else temperature
        )
        self._client = client

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def generate_fix(self, user_input: str, similar_docs: Sequence[str]) -> str:
        """
        Generate a diagnosis for a new error.

        :param user_input: Error description from the user
        :param similar_docs: Formatted similar past errors, may be empty
        :return: Diagnosis text
        :raises DiagnosisError: if the model returned no choices
        """
        logger.info(
            f"Generating diagnosis with {self.model} from {len(similar_docs)} similar document(s)"
        )
        response = self.client.chat.completions.create(
            model=self.model,
            temperature=self.temperature,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": build_prompt(user_input, similar_docs)},
            ],
        )

        if not response.choices:
            raise DiagnosisError("no response from the model")

        return (response.choices[0].message.content or "").strip()
