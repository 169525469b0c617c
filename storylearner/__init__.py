"""
StoryLearner Tokens: model translations as tap-to-translate token streams.

Validates the structured token output of a language model and falls back to
deterministic plain-text tokenization when the model returns prose, so the
interactive reader always receives a text-faithful token stream.

Usage:
    from storylearner import TranslationPipeline, PipelineConfig

    pipeline = TranslationPipeline(config=PipelineConfig(backend="openai"))
    result = await pipeline.generate_translation_with_tokens(prompt)
"""

__version__ = "1.0.0"
__license__ = "MIT"

from storylearner.core.models import (
    TokenType,
    PartOfSpeech,
    DifficultyLevel,
    WordToken,
    PunctuationToken,
    WhitespaceToken,
    Token,
    TranslationMetadata,
    TranslationWithTokens,
    ValidatedTokens,
    ValidationResult,
    token_text,
)
from storylearner.core.validator import validate
from storylearner.core.fallback import generate_tokens, validate_reconstruction
from storylearner.core.pipeline import (
    TranslationPipeline,
    PipelineConfig,
    generate_translation_with_tokens,
)
from storylearner.translation.base import (
    CompletionBackend,
    CompletionRequest,
    CompletionResponse,
)

__all__ = [
    "__version__",
    "__license__",
    "TokenType", "PartOfSpeech", "DifficultyLevel",
    "WordToken", "PunctuationToken", "WhitespaceToken", "Token",
    "TranslationMetadata", "TranslationWithTokens", "ValidatedTokens", "ValidationResult",
    "token_text",
    "validate", "generate_tokens", "validate_reconstruction",
    "TranslationPipeline", "PipelineConfig", "generate_translation_with_tokens",
    "CompletionBackend", "CompletionRequest", "CompletionResponse",
]
