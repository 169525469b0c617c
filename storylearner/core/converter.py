"""
Conversion between stored token records and token objects.

Saved translations keep their tokens as plain dictionaries, grouped by kind.
Stored word records may lack metadata keys entirely; they load as None.
Unlike ``validator.validate``, loading trusts its input and raises on an
unknown token type instead of degrading.
"""

from typing import Any, Dict, Iterable, List

from storylearner.core.models import (
    DifficultyLevel,
    PartOfSpeech,
    PunctuationToken,
    Token,
    TokenType,
    WhitespaceToken,
    WordToken,
    token_to_dict,
)


def token_from_dict(record: Dict[str, Any]) -> Token:
    """Build a token from a stored record."""
    token_type = TokenType(record.get("type"))

    if token_type is TokenType.WORD:
        pos = record.get("pos")
        difficulty = record.get("difficulty")
        return WordToken(
            to_word=record["to_word"],
            to_lemma=record["to_lemma"],
            from_word=record["from_word"],
            from_lemma=record["from_lemma"],
            pos=PartOfSpeech(pos) if pos else None,
            difficulty=DifficultyLevel(difficulty) if difficulty else None,
            from_definition=record.get("from_definition"),
        )
    if token_type is TokenType.PUNCTUATION:
        return PunctuationToken(value=record["value"])
    return WhitespaceToken(value=record["value"])


def tokens_from_dicts(records: Iterable[Dict[str, Any]]) -> List[Token]:
    return [token_from_dict(r) for r in records]


def tokens_to_dicts(tokens: Iterable[Token]) -> List[Dict[str, Any]]:
    return [token_to_dict(t) for t in tokens]


def group_tokens_by_type(tokens: Iterable[Token]) -> Dict[str, List[Dict[str, Any]]]:
    """
    Split tokens into per-kind record lists for storage.

    Missing metadata is left out of word records rather than stored as null.

    Returns:
        Mapping of ``word``, ``punctuation`` and ``whitespace`` to records
    """
    grouped: Dict[str, List[Dict[str, Any]]] = {t.value: [] for t in TokenType}
    for token in tokens:
        record = token_to_dict(token)
        if token.type is TokenType.WORD:
            record = {k: v for k, v in record.items() if v is not None}
        grouped[token.type.value].append(record)
    return grouped


def validate_conversion(records: List[Dict[str, Any]], tokens: List[Token]) -> bool:
    """Check that loaded tokens carry exactly the data of their records."""
    if len(records) != len(tokens):
        return False

    for record, token in zip(records, tokens):
        if record.get("type") != token.type.value:
            return False
        expected = token_to_dict(token)
        for key, value in expected.items():
            if record.get(key) != value:
                return False

    return True
