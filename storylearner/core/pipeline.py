"""
Translation-with-tokens pipeline for StoryLearner.

Requests a completion, validates it as a structured token response and, when
that fails, tokenizes the raw text instead. Exactly one of the two paths is
taken per request; the reader always gets a renderable token stream.

Backend errors are not handled here. They propagate to the caller unchanged,
as do cancellations of the awaiting task.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from storylearner.core.exceptions import ConfigurationError, ReconstructionError
from storylearner.core.fallback import generate_tokens, validate_reconstruction
from storylearner.core.models import (
    TranslationMetadata,
    TranslationWithTokens,
    token_text,
)
from storylearner.core.validator import validate
from storylearner.translation.base import CompletionBackend, CompletionRequest, CompletionResponse
from storylearner.utils.logger import EventLogger, get_event_logger

LOG_CATEGORY = "llm"


@dataclass
class PipelineConfig:
    """Configuration for the translation pipeline."""

    # Completion backend
    backend: str = "openai"  # openai, anthropic, local
    model_name: Optional[str] = None  # None keeps the backend default
    api_key: Optional[str] = None

    # Generation defaults; None defers to the backend
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None

    # Raise instead of logging when fallback tokens lose characters
    strict_reconstruction: bool = False

    def __post_init__(self):
        if self.max_tokens is not None and self.max_tokens <= 0:
            raise ConfigurationError(
                f"max_tokens must be positive, got {self.max_tokens}",
                config_key="max_tokens",
                invalid_value=self.max_tokens,
            )
        if self.temperature is not None and not 0.0 <= self.temperature <= 2.0:
            raise ConfigurationError(
                f"temperature must be between 0 and 2, got {self.temperature}",
                config_key="temperature",
                invalid_value=self.temperature,
            )

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> PipelineConfig:
        """Build from a loaded configuration dictionary (see utils.config_loader)."""
        llm = config.get("llm") or {}
        pipeline = config.get("pipeline") or {}
        backend = llm.get("backend", cls.backend)
        api_keys = config.get("api_keys") or {}
        return cls(
            backend=backend,
            model_name=llm.get("model") or None,
            api_key=api_keys.get(backend) or None,
            max_tokens=llm.get("max_tokens"),
            temperature=llm.get("temperature"),
            strict_reconstruction=bool(pipeline.get("strict_reconstruction", False)),
        )


class TranslationPipeline:
    """
    Turns a translation prompt into a token stream for the interactive reader.

    The pipeline holds no per-request state, so one instance can serve any
    number of concurrent requests.
    """

    def __init__(
        self,
        backend: Optional[CompletionBackend] = None,
        config: Optional[PipelineConfig] = None,
        logger: Optional[EventLogger] = None,
    ):
        self.config = config or PipelineConfig()
        self.logger = logger or get_event_logger()
        if backend is None:
            from storylearner.translation.backends import create_backend
            backend = create_backend(
                self.config.backend,
                api_key=self.config.api_key,
                model=self.config.model_name,
            )
        self.backend = backend

    def _build_request(
        self,
        prompt: str,
        max_tokens: Optional[int],
        temperature: Optional[float],
    ) -> CompletionRequest:
        request = CompletionRequest(
            prompt=prompt,
            max_tokens=max_tokens if max_tokens is not None else self.config.max_tokens,
            temperature=temperature if temperature is not None else self.config.temperature,
        )
        self.logger.debug(
            LOG_CATEGORY,
            "Requesting translation from LLM",
            prompt_length=len(prompt),
            max_tokens=request.max_tokens,
            temperature=request.temperature,
        )
        return request

    async def generate_translation_with_tokens(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> TranslationWithTokens:
        """
        Generate a translation with structured tokens.

        Args:
            prompt: Complete translation prompt
            max_tokens: Maximum tokens for the completion
            temperature: Sampling temperature

        Returns:
            Translation with validated or fallback tokens

        Raises:
            Whatever the backend raises; nothing is caught here
        """
        request = self._build_request(prompt, max_tokens, temperature)
        with self.logger.timed(LOG_CATEGORY, "translation-with-tokens"):
            response = await self.backend.complete(request)
            return self.process_response(response)

    def generate_translation_with_tokens_sync(
        self,
        prompt: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
    ) -> TranslationWithTokens:
        """Blocking variant of ``generate_translation_with_tokens``."""
        request = self._build_request(prompt, max_tokens, temperature)
        with self.logger.timed(LOG_CATEGORY, "translation-with-tokens"):
            response = self.backend.complete_sync(request)
            return self.process_response(response)

    def process_response(self, response: CompletionResponse) -> TranslationWithTokens:
        """Validate a completion and fall back to plain tokenization if needed."""
        self.logger.debug(
            LOG_CATEGORY,
            "Received LLM response",
            content_length=len(response.content),
            provider=response.provider,
            model=response.model,
        )

        result = validate(response.content, logger=self.logger)

        if result.is_valid and result.data is not None:
            if result.warnings:
                self.logger.warning(
                    LOG_CATEGORY,
                    "Validation succeeded with warnings",
                    warning_count=len(result.warnings),
                    warnings=result.warnings,
                )
            self.logger.info(
                LOG_CATEGORY,
                "Structured response validated successfully",
                token_count=len(result.data.tokens),
                has_warnings=bool(result.warnings),
            )
            return TranslationWithTokens(
                translation=result.data.translation,
                tokens=result.data.tokens,
                metadata=TranslationMetadata(
                    has_warnings=bool(result.warnings),
                    warnings=list(result.warnings),
                    used_fallback=False,
                ),
            )

        self.logger.warning(
            LOG_CATEGORY,
            "Structured response validation failed, using fallback",
            errors=result.errors,
        )
        return self._fallback(response.content)

    def _fallback(self, raw_content: str) -> TranslationWithTokens:
        translation = raw_content.strip()
        tokens = generate_tokens(translation, logger=self.logger)

        reconstruction_valid = validate_reconstruction(translation, tokens, logger=self.logger)
        if not reconstruction_valid:
            self.logger.error(
                LOG_CATEGORY,
                "Fallback token reconstruction failed - tokens may not match original text",
            )
            if self.config.strict_reconstruction:
                raise ReconstructionError(translation, "".join(token_text(t) for t in tokens))

        self.logger.info(
            LOG_CATEGORY,
            "Fallback tokens generated successfully",
            token_count=len(tokens),
            reconstruction_valid=reconstruction_valid,
        )
        return TranslationWithTokens(
            translation=translation,
            tokens=tokens,
            metadata=TranslationMetadata(has_warnings=False, warnings=[], used_fallback=True),
        )


async def generate_translation_with_tokens(
    backend: CompletionBackend,
    prompt: str,
    max_tokens: Optional[int] = None,
    temperature: Optional[float] = None,
    logger: Optional[EventLogger] = None,
) -> TranslationWithTokens:
    """Run a single request through a default-configured pipeline."""
    pipeline = TranslationPipeline(backend=backend, logger=logger)
    return await pipeline.generate_translation_with_tokens(prompt, max_tokens, temperature)
