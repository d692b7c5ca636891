"""Errors raised by the AI services."""


class DiagnosisError(Exception):
    """The language model did not produce a diagnosis."""
