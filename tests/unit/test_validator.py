"""
Tests for the translation token validator.

Covers:
- Whole-response rejection on structural errors
- Fail-fast on required word fields
- Soft degradation of metadata fields
- Determinism
"""

import json

import pytest

from storylearner.core.models import (
    DifficultyLevel,
    PartOfSpeech,
    PunctuationToken,
    TokenType,
    WhitespaceToken,
)
from storylearner.core.validator import generate_report, validate


def _response(*tokens, translation="texto"):
    return json.dumps({"translation": translation, "tokens": list(tokens)})


class TestStructure:
    """Top-level structure checks."""

    def test_valid_response(self, structured_response, event_logger):
        result = validate(structured_response, logger=event_logger)

        assert result.is_valid
        assert result.errors == []
        assert result.warnings == []
        assert result.data.translation == "Hola, mundo."
        assert [t.type for t in result.data.tokens] == [
            TokenType.WORD,
            TokenType.PUNCTUATION,
            TokenType.WHITESPACE,
            TokenType.WORD,
            TokenType.PUNCTUATION,
        ]
        first = result.data.tokens[0]
        assert first.pos is PartOfSpeech.INTERJECTION
        assert first.difficulty is DifficultyLevel.A1
        assert first.from_definition == "a greeting"

    def test_not_json(self, event_logger):
        result = validate("Hola, mundo.", logger=event_logger)

        assert not result.is_valid
        assert result.errors == ["Failed to parse JSON response"]
        assert result.data is None

    @pytest.mark.parametrize("raw", ["[" * 100000 + "]" * 100000, '{"translation": ' + "[" * 100000])
    def test_deeply_nested_json(self, raw, event_logger):
        result = validate(raw, logger=event_logger)

        assert not result.is_valid
        assert result.errors == ["Failed to parse JSON response"]
        assert result.data is None

    @pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
    def test_non_standard_constants_rejected(self, constant, event_logger):
        raw = '{"translation": "hi", "tokens": [], "score": %s}' % constant

        result = validate(raw, logger=event_logger)

        assert not result.is_valid
        assert result.errors == ["Failed to parse JSON response"]

    @pytest.mark.parametrize("raw", ["[]", "42", "null", '"text"'])
    def test_top_level_not_object(self, raw, event_logger):
        result = validate(raw, logger=event_logger)

        assert not result.is_valid
        assert result.data is None

    @pytest.mark.parametrize("translation", [None, "", 5, ["a"]])
    def test_invalid_translation_field(self, translation, event_logger):
        raw = json.dumps({"translation": translation, "tokens": []})

        result = validate(raw, logger=event_logger)

        assert not result.is_valid
        assert result.errors == ["Missing or invalid translation field"]

    def test_missing_translation_field(self, event_logger):
        result = validate(json.dumps({"tokens": []}), logger=event_logger)
        assert not result.is_valid

    @pytest.mark.parametrize("tokens", [None, "word", {"type": "word"}, 3])
    def test_tokens_not_a_list(self, tokens, event_logger):
        raw = json.dumps({"translation": "hi", "tokens": tokens})

        result = validate(raw, logger=event_logger)

        assert not result.is_valid
        assert result.errors == ["Missing or invalid tokens array"]
        assert result.data is None

    def test_empty_token_list_is_valid(self, event_logger):
        result = validate(_response(translation="hola"), logger=event_logger)

        assert result.is_valid
        assert result.data.tokens == []
        assert result.warnings == []
        assert any(e[2] == "Structured response has no tokens" for e in event_logger.events)


class TestTokenTypes:
    """Per-token type dispatch."""

    def test_token_not_an_object(self, event_logger):
        result = validate(_response("hola"), logger=event_logger)

        assert not result.is_valid
        assert result.errors == ["Token at index 0 is not an object"]

    @pytest.mark.parametrize("token", [{"value": "."}, {"type": 1, "value": "."}, {"type": "", "value": "."}])
    def test_missing_or_invalid_type(self, token, event_logger):
        result = validate(_response(token), logger=event_logger)

        assert not result.is_valid
        assert "missing or invalid type" in result.errors[0]

    def test_unknown_type_anywhere_rejects(self, word_record, event_logger):
        raw = _response(word_record, {"type": "whitespace", "value": " "}, {"type": "image", "value": "x"})

        result = validate(raw, logger=event_logger)

        assert not result.is_valid
        assert result.errors == ["Unknown token type at index 2: image"]
        assert result.data is None

    def test_punctuation_and_whitespace(self, event_logger):
        raw = _response({"type": "punctuation", "value": "¿"}, {"type": "whitespace", "value": "\n\n"})

        result = validate(raw, logger=event_logger)

        assert result.is_valid
        assert result.data.tokens == [PunctuationToken(value="¿"), WhitespaceToken(value="\n\n")]

    @pytest.mark.parametrize("kind", ["punctuation", "whitespace"])
    @pytest.mark.parametrize("value", [None, "", 7])
    def test_value_required(self, kind, value, event_logger):
        result = validate(_response({"type": kind, "value": value}), logger=event_logger)

        assert not result.is_valid
        assert result.errors == [f"{kind.capitalize()} token at index 0 missing or invalid value"]


class TestWordTokens:
    """Two-tier word token checks."""

    @pytest.mark.parametrize("field", ["to_word", "to_lemma", "from_word", "from_lemma"])
    def test_missing_required_field_rejects_whole_response(self, field, word_record, event_logger):
        broken = dict(word_record)
        del broken[field]
        raw = _response(word_record, {"type": "whitespace", "value": " "}, broken)

        result = validate(raw, logger=event_logger)

        assert not result.is_valid
        assert result.data is None
        assert result.errors == [f"Word token at index 2 missing or invalid required field: {field}"]

    @pytest.mark.parametrize("value", ["", None, 12, ["x"]])
    def test_invalid_required_field_value(self, value, word_record, event_logger):
        word_record["from_lemma"] = value

        result = validate(_response(word_record), logger=event_logger)

        assert not result.is_valid

    def test_warnings_from_earlier_tokens_are_kept_on_rejection(self, word_record, event_logger):
        first = dict(word_record, pos="thing")
        broken = dict(word_record)
        del broken["to_lemma"]

        result = validate(_response(first, broken), logger=event_logger)

        assert not result.is_valid
        assert len(result.warnings) == 1
        assert len(result.errors) == 1

    def test_minimal_word_token_warns_only_about_pos(self, event_logger):
        raw = ('{"translation":"hi","tokens":[{"type":"word","to_word":"hi",'
               '"to_lemma":"hi","from_word":"hola","from_lemma":"hola"}]}')

        result = validate(raw, logger=event_logger)

        assert result.is_valid
        assert result.warnings == ["Word token at index 0 missing or invalid pos, setting to null"]
        token = result.data.tokens[0]
        assert token.pos is None
        assert token.difficulty is None
        assert token.from_definition is None

    def test_pos_is_case_insensitive(self, word_record, event_logger):
        word_record["pos"] = "NOUN"

        result = validate(_response(word_record), logger=event_logger)

        assert result.data.tokens[0].pos is PartOfSpeech.NOUN
        assert result.warnings == []

    def test_invalid_pos_is_nulled(self, word_record, event_logger):
        word_record["pos"] = "gerund"

        result = validate(_response(word_record), logger=event_logger)

        assert result.is_valid
        assert result.data.tokens[0].pos is None
        assert result.warnings == ['Word token at index 0 has invalid pos "gerund", setting to null']

    def test_difficulty_is_case_insensitive(self, word_record, event_logger):
        word_record["difficulty"] = "C2"

        result = validate(_response(word_record), logger=event_logger)

        assert result.data.tokens[0].difficulty is DifficultyLevel.C2

    @pytest.mark.parametrize("value", ["d1", "", 3, "beginner"])
    def test_invalid_difficulty_is_nulled(self, value, word_record, event_logger):
        word_record["difficulty"] = value

        result = validate(_response(word_record), logger=event_logger)

        assert result.is_valid
        assert result.data.tokens[0].difficulty is None
        assert len(result.warnings) == 1
        assert "difficulty" in result.warnings[0]

    @pytest.mark.parametrize("value", ["", "   ", 4])
    def test_invalid_definition_is_nulled(self, value, word_record, event_logger):
        word_record["from_definition"] = value

        result = validate(_response(word_record), logger=event_logger)

        assert result.is_valid
        assert result.data.tokens[0].from_definition is None
        assert len(result.warnings) == 1
        assert "from_definition" in result.warnings[0]

    def test_each_bad_metadata_field_adds_one_warning(self, word_record, event_logger):
        word_record.update(pos="thing", difficulty="z9", from_definition=" ")

        result = validate(_response(word_record), logger=event_logger)

        token = result.data.tokens[0]
        assert result.is_valid
        assert len(result.warnings) == 3
        assert (token.pos, token.difficulty, token.from_definition) == (None, None, None)
        assert token.to_word == "Hola"

    def test_warnings_accumulate_across_tokens(self, word_record, event_logger):
        other = dict(word_record, pos=None)
        word_record["pos"] = "thing"

        result = validate(_response(word_record, other), logger=event_logger)

        assert [w.split(" ")[4] for w in result.warnings] == ["0", "1"]


def test_validation_is_deterministic(word_record, event_logger):
    """Same input, same result."""
    raw = _response(dict(word_record, pos="bad"))

    first = validate(raw, logger=event_logger)
    second = validate(raw, logger=event_logger)

    assert first.is_valid == second.is_valid
    assert first.data.tokens == second.data.tokens
    assert first.warnings == second.warnings


def test_validate_never_raises_on_garbage(event_logger):
    for raw in ["", "{", "{}", '{"translation": "x", "tokens": [null]}', "\x00"]:
        assert not validate(raw, logger=event_logger).is_valid


def test_validate_logs_success(structured_response, event_logger):
    validate(structured_response, logger=event_logger)

    infos = event_logger.events_at("INFO")
    assert infos[-1][2] == "Token validation successful"
    assert infos[-1][3]["word_count"] == 2


def test_generate_report(structured_response, event_logger):
    valid = generate_report(validate(structured_response, logger=event_logger))
    invalid = generate_report(validate("nope", logger=event_logger))

    assert "Status: VALID" in valid
    assert "Tokens: 5 (2 words)" in valid
    assert "Status: INVALID" in invalid
    assert "Failed to parse JSON response" in invalid
