"""Completion backend implementations."""

from typing import Dict, List, Optional

from ..base import CompletionBackend
from ...core.exceptions import ConfigurationError
from .openai_backend import OpenAIBackend
from .anthropic_backend import AnthropicBackend
from .local_backend import LocalBackend

BACKENDS = {
    "openai": OpenAIBackend,
    "anthropic": AnthropicBackend,
    "local": LocalBackend,
}


def create_backend(
    name: str,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    **kwargs
) -> CompletionBackend:
    """
    Create a backend instance by name.

    Args:
        name: Backend name (openai, anthropic, local)
        api_key: API key; backends fall back to their environment variable
        model: Model name; None keeps the backend default
        **kwargs: Extra backend-specific options

    Raises:
        ConfigurationError: If the backend name is unknown
    """
    backend_name = name.lower()
    backend_cls = BACKENDS.get(backend_name)
    if backend_cls is None:
        raise ConfigurationError(
            f"Unknown backend: {name}",
            config_key="backend",
            invalid_value=name,
            valid_values=list(BACKENDS),
        )

    if model:
        kwargs["model"] = model
    return backend_cls(api_key=api_key, **kwargs)


def get_available_backends() -> List[Dict]:
    """Info for every backend, configured from the environment."""
    return [create_backend(name).get_info() for name in BACKENDS]


__all__ = [
    'OpenAIBackend',
    'AnthropicBackend',
    'LocalBackend',
    'BACKENDS',
    'create_backend',
    'get_available_backends',
]
