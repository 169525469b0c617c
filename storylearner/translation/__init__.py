"""Completion backends and model output handling."""

from storylearner.translation.base import (
    CompletionBackend,
    CompletionRequest,
    CompletionResponse,
)
from storylearner.translation.output_cleaner import clean_completion_output

__all__ = [
    "CompletionBackend",
    "CompletionRequest",
    "CompletionResponse",
    "clean_completion_output",
]
