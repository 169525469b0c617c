# -*- coding: utf-8 -*-
"""
Translation Token Validator.

Parses a raw model response and checks it against the token schema using two
tiers of strictness:

1. Required fields (structure, token types, word/lemma pairs, punctuation and
   whitespace values). Any failure rejects the whole response so the pipeline
   falls back to plain-text tokenization.
2. Metadata fields (pos, difficulty, from_definition). A failure resets the
   field to None and records a warning; validation continues.

Tier-1 failures are raised as ``TokenValidationError`` inside this module and
converted to an invalid ``ValidationResult`` at the ``validate`` boundary.
Tier-2 failures only ever append to the warnings list.
"""

import json
from typing import Any, Dict, List, Optional

from storylearner.core.exceptions import TokenValidationError
from storylearner.core.models import (
    DifficultyLevel,
    PartOfSpeech,
    PunctuationToken,
    Token,
    TokenType,
    ValidatedTokens,
    ValidationResult,
    WhitespaceToken,
    WordToken,
)
from storylearner.utils.logger import EventLogger, get_event_logger

LOG_CATEGORY = "llm"

REQUIRED_WORD_FIELDS = ("to_word", "to_lemma", "from_word", "from_lemma")

VALID_POS = {pos.value: pos for pos in PartOfSpeech}
VALID_CEFR = {level.value: level for level in DifficultyLevel}


def _reject_constant(name: str) -> None:
    raise ValueError(f"Invalid JSON constant: {name}")


def validate(raw_response: str, logger: Optional[EventLogger] = None) -> ValidationResult:
    """
    Validate and parse a model response into structured tokens.

    Never raises: every structural problem is reported through the result.

    Args:
        raw_response: Text returned by the completion backend
        logger: Event logger (defaults to the shared loguru sinks)

    Returns:
        ValidationResult with ``data`` set only when the response is valid
    """
    logger = logger or get_event_logger()
    warnings: List[str] = []

    with logger.timed(LOG_CATEGORY, "token-validation"):
        try:
            data = _validate_document(raw_response, warnings, logger)
        except TokenValidationError as e:
            logger.warning(LOG_CATEGORY, "Token validation failed", error=e.message, index=e.index)
            return ValidationResult(is_valid=False, errors=[e.message], warnings=warnings, data=None)

    logger.info(
        LOG_CATEGORY,
        "Token validation successful",
        token_count=len(data.tokens),
        word_count=sum(1 for t in data.tokens if t.type is TokenType.WORD),
        warning_count=len(warnings),
    )
    return ValidationResult(is_valid=True, errors=[], warnings=warnings, data=data)


def _validate_document(raw_response: str, warnings: List[str], logger: EventLogger) -> ValidatedTokens:
    try:
        parsed = json.loads(raw_response, parse_constant=_reject_constant)
    except (TypeError, ValueError, RecursionError) as e:
        logger.error(LOG_CATEGORY, "JSON parse error", parse_error=str(e))
        raise TokenValidationError("Failed to parse JSON response")

    if not isinstance(parsed, dict):
        raise TokenValidationError("Response is not a valid object")

    translation = parsed.get("translation")
    if not isinstance(translation, str) or not translation:
        raise TokenValidationError("Missing or invalid translation field")

    raw_tokens = parsed.get("tokens")
    if not isinstance(raw_tokens, list):
        raise TokenValidationError("Missing or invalid tokens array")

    if not raw_tokens:
        logger.warning(LOG_CATEGORY, "Structured response has no tokens", translation_length=len(translation))

    tokens = [_validate_token(raw, index, warnings) for index, raw in enumerate(raw_tokens)]
    return ValidatedTokens(translation=translation, tokens=tokens)


def _validate_token(raw: Any, index: int, warnings: List[str]) -> Token:
    if not isinstance(raw, dict):
        raise TokenValidationError(f"Token at index {index} is not an object", index)

    token_type = raw.get("type")
    if not isinstance(token_type, str) or not token_type:
        raise TokenValidationError(f"Token at index {index} missing or invalid type", index)

    if token_type == TokenType.WORD.value:
        return _validate_word_token(raw, index, warnings)
    if token_type == TokenType.PUNCTUATION.value:
        return PunctuationToken(value=_require_value(raw, index, "Punctuation"))
    if token_type == TokenType.WHITESPACE.value:
        return WhitespaceToken(value=_require_value(raw, index, "Whitespace"))
    raise TokenValidationError(f"Unknown token type at index {index}: {token_type}", index)


def _require_value(raw: Dict[str, Any], index: int, kind: str) -> str:
    value = raw.get("value")
    if not isinstance(value, str) or not value:
        raise TokenValidationError(f"{kind} token at index {index} missing or invalid value", index)
    return value


def _validate_word_token(raw: Dict[str, Any], index: int, warnings: List[str]) -> WordToken:
    # Tier 1
    for name in REQUIRED_WORD_FIELDS:
        value = raw.get(name)
        if not isinstance(value, str) or not value:
            raise TokenValidationError(
                f"Word token at index {index} missing or invalid required field: {name}", index
            )

    # Tier 2
    return WordToken(
        to_word=raw["to_word"],
        to_lemma=raw["to_lemma"],
        from_word=raw["from_word"],
        from_lemma=raw["from_lemma"],
        pos=_check_pos(raw.get("pos"), index, warnings),
        difficulty=_check_difficulty(raw.get("difficulty"), index, warnings),
        from_definition=_check_definition(raw.get("from_definition"), index, warnings),
    )


def _check_pos(value: Any, index: int, warnings: List[str]) -> Optional[PartOfSpeech]:
    if not isinstance(value, str) or not value:
        warnings.append(f"Word token at index {index} missing or invalid pos, setting to null")
        return None

    pos = VALID_POS.get(value.lower())
    if pos is None:
        warnings.append(f'Word token at index {index} has invalid pos "{value}", setting to null')
    return pos


def _check_difficulty(value: Any, index: int, warnings: List[str]) -> Optional[DifficultyLevel]:
    if value is None:
        return None
    if not isinstance(value, str) or not value:
        warnings.append(f"Word token at index {index} has invalid difficulty, setting to null")
        return None

    level = VALID_CEFR.get(value.lower())
    if level is None:
        warnings.append(f'Word token at index {index} has invalid difficulty "{value}", setting to null')
    return level


def _check_definition(value: Any, index: int, warnings: List[str]) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        warnings.append(f"Word token at index {index} has invalid from_definition, setting to null")
        return None
    if not value.strip():
        warnings.append(f"Word token at index {index} has empty from_definition, setting to null")
        return None
    return value


def generate_report(result: ValidationResult) -> str:
    """Generate human-readable validation report."""
    lines = []
    lines.append("=" * 60)
    lines.append("TOKEN VALIDATION REPORT")
    lines.append("=" * 60)
    lines.append("")

    status = "VALID" if result.is_valid else "INVALID"
    lines.append(f"Status: {status}")

    if result.data is not None:
        tokens = result.data.tokens
        words = [t for t in tokens if t.type is TokenType.WORD]
        lines.append(f"Tokens: {len(tokens)} ({len(words)} words)")
        with_pos = sum(1 for w in words if w.pos is not None)
        if words:
            lines.append(f"  Words with pos: {with_pos}/{len(words)}")
    lines.append("")

    if result.errors:
        lines.append(f"Errors: {len(result.errors)}")
        for error in result.errors[:10]:
            lines.append(f"  - {error}")

    if result.warnings:
        lines.append(f"Warnings: {len(result.warnings)}")
        for warning in result.warnings[:10]:
            lines.append(f"  - {warning}")
        if len(result.warnings) > 10:
            lines.append(f"  ... and {len(result.warnings) - 10} more")

    lines.append("=" * 60)

    return "\n".join(lines)
