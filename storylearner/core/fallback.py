"""
Fallback token generation from plain text.

Used when the model did not return a usable structured response. The split is
deterministic and keeps every character of the input: concatenating the
token values in order reproduces the text exactly.

Fallback word tokens carry no alignment metadata: ``from_word`` and
``from_lemma`` are empty and ``pos``, ``difficulty`` and ``from_definition``
are None.
"""

import re
from typing import List, Optional

from storylearner.core.models import (
    PunctuationToken,
    Token,
    TokenType,
    WhitespaceToken,
    WordToken,
    token_text,
)
from storylearner.utils.logger import EventLogger, get_event_logger

LOG_CATEGORY = "llm"

WHITESPACE_SPLIT_RE = re.compile(r"(\s+)")
# Letters and digits of any script, plus ASCII and typographic apostrophes
LEADING_WORD_RE = re.compile(r"^(?:[^\W_]|['’])+")


def generate_tokens(text: str, logger: Optional[EventLogger] = None) -> List[Token]:
    """
    Split plain text into word, punctuation and whitespace tokens.

    Args:
        text: Translation text without token structure
        logger: Event logger (defaults to the shared loguru sinks)

    Returns:
        Tokens in text order
    """
    logger = logger or get_event_logger()
    logger.warning(LOG_CATEGORY, "Using fallback token generation from plain text", text_length=len(text))

    tokens: List[Token] = []
    with logger.timed(LOG_CATEGORY, "fallback-token-generation"):
        for segment in WHITESPACE_SPLIT_RE.split(text):
            if not segment:
                continue

            if segment.isspace():
                tokens.append(WhitespaceToken(value=segment))
                continue

            match = LEADING_WORD_RE.match(segment)
            if match:
                core = match.group(0)
                tokens.append(WordToken(
                    to_word=core,
                    to_lemma=core.lower(),
                    from_word="",
                    from_lemma="",
                ))
                rest = segment[len(core):]
            else:
                rest = segment

            # One token per mark so each can be styled on its own
            tokens.extend(PunctuationToken(value=char) for char in rest)

    logger.info(
        LOG_CATEGORY,
        "Fallback tokens generated",
        token_count=len(tokens),
        word_count=sum(1 for t in tokens if t.type is TokenType.WORD),
        punctuation_count=sum(1 for t in tokens if t.type is TokenType.PUNCTUATION),
        whitespace_count=sum(1 for t in tokens if t.type is TokenType.WHITESPACE),
    )
    return tokens


def validate_reconstruction(
    original: str,
    tokens: List[Token],
    logger: Optional[EventLogger] = None,
) -> bool:
    """
    Check that tokens concatenate back to the original text.

    Args:
        original: Text the tokens were generated from
        tokens: Tokens in emission order
        logger: Event logger (defaults to the shared loguru sinks)

    Returns:
        True when the reconstruction matches exactly
    """
    reconstructed = "".join(token_text(t) for t in tokens)
    is_valid = reconstructed == original

    if not is_valid:
        logger = logger or get_event_logger()
        logger.error(
            LOG_CATEGORY,
            "Token reconstruction validation failed",
            original_length=len(original),
            reconstructed_length=len(reconstructed),
        )

    return is_valid
