"""
AI Services Module for DebugGo

This module provides the language-model diagnosis used after retrieval.
"""

from .diagnosis_generator import DiagnosisGenerator, OpenAIDiagnosisGenerator, build_prompt
from .exceptions import DiagnosisError

__all__ = [
    "DiagnosisError",
    "DiagnosisGenerator",
    "OpenAIDiagnosisGenerator",
    "build_prompt",
]
