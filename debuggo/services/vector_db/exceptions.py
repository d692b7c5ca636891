"""Errors raised by the vector store client."""

from typing import Optional


class VectorStoreError(Exception):
    """Base class for vector store failures."""


class VectorStoreTransportError(VectorStoreError):
    """The store could not be reached or answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class VectorStoreProtocolError(VectorStoreError):
    """The store replied with something that could not be parsed."""
