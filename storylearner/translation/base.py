"""
Base completion backend interface.
All language model providers must inherit from CompletionBackend.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional
from dataclasses import dataclass


@dataclass
class CompletionRequest:
    """Request for a text completion."""
    prompt: str
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    model: Optional[str] = None  # Overrides the backend's configured model


@dataclass
class CompletionResponse:
    """Raw completion returned by a backend."""
    content: str
    provider: str
    model: str
    prompt_tokens: int = 0
    completion_tokens: int = 0
    latency: float = 0.0
    finish_reason: Optional[str] = None  # "stop", "length", ...

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


class CompletionBackend(ABC):
    """Abstract base class for completion backends."""

    provider = "abstract"
    default_max_tokens = 4096
    default_temperature = 0.3

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key
        self.model = model
        self.name = self.__class__.__name__

    @abstractmethod
    async def complete(self, request: CompletionRequest) -> CompletionResponse:
        """
        Generate a completion asynchronously.

        Args:
            request: Completion request with prompt and parameters

        Returns:
            CompletionResponse with the raw generated text
        """
        pass

    @abstractmethod
    def complete_sync(self, request: CompletionRequest) -> CompletionResponse:
        """
        Generate a completion synchronously.

        Args:
            request: Completion request with prompt and parameters

        Returns:
            CompletionResponse with the raw generated text
        """
        pass

    def resolve_parameters(self, request: CompletionRequest) -> Dict:
        """Fill unset request parameters with backend defaults."""
        return {
            "model": request.model or self.model,
            "max_tokens": request.max_tokens if request.max_tokens is not None else self.default_max_tokens,
            "temperature": request.temperature if request.temperature is not None else self.default_temperature,
        }

    def is_available(self) -> bool:
        """Check if backend is available and configured."""
        return self.api_key is not None

    def get_info(self) -> Dict:
        """Get backend information."""
        return {
            "name": self.name,
            "provider": self.provider,
            "model": self.model,
            "available": self.is_available()
        }
