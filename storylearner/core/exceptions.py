"""
Exception hierarchy for StoryLearner.

Provides specific exception types for better error handling and user feedback.
"""

from __future__ import annotations
from typing import Optional, Dict, Any, List


class StoryLearnerError(Exception):
    """Base exception for all StoryLearner errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
        suggestion: Optional[str] = None
    ):
        """
        Initialize error.

        Args:
            message: Human-readable error message
            details: Additional error details
            recoverable: Whether error can be recovered from
            suggestion: Suggested fix or workaround
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable
        self.suggestion = suggestion

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary for JSON serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "recoverable": self.recoverable,
            "suggestion": self.suggestion
        }

    def __str__(self) -> str:
        """String representation with suggestion if available."""
        result = self.message
        if self.suggestion:
            result += f"\nSuggestion: {self.suggestion}"
        return result


class TokenValidationError(StoryLearnerError):
    """Raised when a structured model response fails a required check.

    Never escapes ``validator.validate``: the validator converts it into an
    invalid ``ValidationResult`` so the pipeline can fall back.
    """

    def __init__(self, message: str, index: Optional[int] = None):
        details = {"index": index}
        super().__init__(message, details, recoverable=True)
        self.index = index


class ReconstructionError(StoryLearnerError):
    """Raised when fallback tokens do not reproduce their source text."""

    def __init__(self, original: str, reconstructed: str):
        """
        Initialize reconstruction error.

        Args:
            original: Text handed to the fallback generator
            reconstructed: Concatenated token values
        """
        message = (
            f"Token reconstruction failed: expected {len(original)} chars, "
            f"got {len(reconstructed)}"
        )
        details = {
            "original_length": len(original),
            "reconstructed_length": len(reconstructed),
        }
        suggestion = "Disable strict_reconstruction to render the tokens anyway"

        super().__init__(message, details, recoverable=False, suggestion=suggestion)
        self.original = original
        self.reconstructed = reconstructed


class BackendError(StoryLearnerError):
    """Raised when a completion backend fails."""

    def __init__(
        self,
        backend: str,
        message: str,
        original_error: Optional[Exception] = None
    ):
        """
        Initialize backend error.

        Args:
            backend: Backend name
            message: Error message
            original_error: Original exception if any
        """
        full_message = f"Backend '{backend}' failed: {message}"
        details = {
            "backend": backend,
            "original_error": str(original_error) if original_error else None,
        }

        suggestion = None
        if backend in ["openai", "anthropic"]:
            suggestion = f"Check API key for {backend}. Set it in the config file or via environment variable."

        super().__init__(full_message, details, recoverable=True, suggestion=suggestion)
        self.backend = backend
        self.original_error = original_error


class ConfigurationError(StoryLearnerError):
    """Raised when configuration is invalid."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        invalid_value: Optional[Any] = None,
        valid_values: Optional[List[Any]] = None
    ):
        """
        Initialize configuration error.

        Args:
            message: Error message
            config_key: Configuration key that's invalid
            invalid_value: Invalid value provided
            valid_values: List of valid values
        """
        details = {
            "config_key": config_key,
            "invalid_value": invalid_value,
            "valid_values": valid_values
        }

        suggestion = None
        if config_key and valid_values:
            suggestion = f"Valid values for {config_key}: {', '.join(map(str, valid_values))}"
        elif config_key:
            suggestion = f"Check configuration for '{config_key}'"

        super().__init__(message, details, recoverable=True, suggestion=suggestion)
        self.config_key = config_key
        self.invalid_value = invalid_value
        self.valid_values = valid_values
