"""
Core data models for StoryLearner translation tokens.

A translated text is delivered to the interactive reader as an ordered stream
of tokens. Every character of the translation belongs to exactly one token:
a word the reader can tap, a punctuation mark, or a run of whitespace.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Any, Union


class TokenType(str, Enum):
    """Discriminator of the token union."""
    WORD = "word"
    PUNCTUATION = "punctuation"
    WHITESPACE = "whitespace"


class PartOfSpeech(str, Enum):
    """Part-of-speech tags a word token may carry."""
    NOUN = "noun"
    VERB = "verb"
    ADJECTIVE = "adjective"
    ADVERB = "adverb"
    PRONOUN = "pronoun"
    PREPOSITION = "preposition"
    CONJUNCTION = "conjunction"
    INTERJECTION = "interjection"
    ARTICLE = "article"
    DETERMINER = "determiner"
    OTHER = "other"


class DifficultyLevel(str, Enum):
    """CEFR proficiency levels."""
    A1 = "a1"
    A2 = "a2"
    B1 = "b1"
    B2 = "b2"
    C1 = "c1"
    C2 = "c2"


@dataclass
class WordToken:
    """
    Word in the translated text with its alignment to the native language.

    ``to_*`` fields describe the word in the learning language, ``from_*``
    fields its counterpart in the reader's native language. Metadata fields
    are ``None`` when the model omitted them or supplied invalid values.
    """
    type: TokenType = field(default=TokenType.WORD, init=False)
    to_word: str
    to_lemma: str
    from_word: str
    from_lemma: str
    pos: Optional[PartOfSpeech] = None
    difficulty: Optional[DifficultyLevel] = None
    from_definition: Optional[str] = None

    @property
    def has_alignment(self) -> bool:
        """False for words produced by fallback tokenization."""
        return bool(self.from_word and self.from_lemma)


@dataclass
class PunctuationToken:
    """Orthographic mark (period, comma, quote, ...)."""
    type: TokenType = field(default=TokenType.PUNCTUATION, init=False)
    value: str


@dataclass
class WhitespaceToken:
    """Run of spaces, tabs or newlines."""
    type: TokenType = field(default=TokenType.WHITESPACE, init=False)
    value: str


Token = Union[WordToken, PunctuationToken, WhitespaceToken]


def token_text(token: Token) -> str:
    """Return the text a token contributes to the rendered translation."""
    if token.type is TokenType.WORD:
        return token.to_word
    if token.type is TokenType.PUNCTUATION or token.type is TokenType.WHITESPACE:
        return token.value
    raise TypeError(f"Unknown token type: {token.type!r}")


def token_to_dict(token: Token) -> Dict[str, Any]:
    """Serialize a token to its wire form."""
    if token.type is TokenType.WORD:
        return {
            "type": token.type.value,
            "to_word": token.to_word,
            "to_lemma": token.to_lemma,
            "from_word": token.from_word,
            "from_lemma": token.from_lemma,
            "pos": token.pos.value if token.pos else None,
            "difficulty": token.difficulty.value if token.difficulty else None,
            "from_definition": token.from_definition,
        }
    if token.type is TokenType.PUNCTUATION or token.type is TokenType.WHITESPACE:
        return {"type": token.type.value, "value": token.value}
    raise TypeError(f"Unknown token type: {token.type!r}")


@dataclass
class TranslationMetadata:
    """Hints for the reader UI about how the tokens were obtained."""
    has_warnings: bool = False
    warnings: List[str] = field(default_factory=list)
    used_fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hasWarnings": self.has_warnings,
            "warnings": list(self.warnings),
            "usedFallback": self.used_fallback,
        }


@dataclass
class ValidatedTokens:
    """Translation text and tokens accepted by the validator."""
    translation: str
    tokens: List[Token] = field(default_factory=list)


@dataclass
class TranslationWithTokens:
    """Unified pipeline output consumed by the interactive reader."""
    translation: str
    tokens: List[Token] = field(default_factory=list)
    metadata: TranslationMetadata = field(default_factory=TranslationMetadata)

    @property
    def word_count(self) -> int:
        return sum(1 for t in self.tokens if t.type is TokenType.WORD)

    def reconstructed_text(self) -> str:
        """Concatenate token values in order."""
        return "".join(token_text(t) for t in self.tokens)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON-ready wire form."""
        return {
            "translation": self.translation,
            "tokens": [token_to_dict(t) for t in self.tokens],
            "metadata": self.metadata.to_dict(),
        }


@dataclass
class ValidationResult:
    """Outcome of validating a raw model response.

    ``data`` is set only when ``is_valid`` is True; ``errors`` is empty in that
    case. ``warnings`` records metadata fields that were reset to ``None``.
    """
    is_valid: bool = False
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    data: Optional[ValidatedTokens] = None
