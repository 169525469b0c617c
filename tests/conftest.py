"""Pytest configuration and fixtures."""

import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pytest

from storylearner.utils.logger import EventLogger


class RecordingEventLogger(EventLogger):
    """Event logger that keeps events in memory for assertions."""

    def __init__(self):
        super().__init__()
        self.events = []

    def _emit(self, level, category, event, payload):
        self.events.append((level, category, event, payload))

    def events_at(self, level):
        return [e for e in self.events if e[0] == level]


@pytest.fixture
def event_logger():
    """In-memory event logger."""
    return RecordingEventLogger()


@pytest.fixture
def word_record():
    """Fully populated word token record."""
    return {
        "type": "word",
        "to_word": "Hola",
        "to_lemma": "hola",
        "from_word": "Hello",
        "from_lemma": "hello",
        "pos": "interjection",
        "difficulty": "a1",
        "from_definition": "a greeting",
    }


@pytest.fixture
def structured_response(word_record):
    """Valid structured response with all token kinds."""
    return json.dumps({
        "translation": "Hola, mundo.",
        "tokens": [
            word_record,
            {"type": "punctuation", "value": ","},
            {"type": "whitespace", "value": " "},
            {
                "type": "word",
                "to_word": "mundo",
                "to_lemma": "mundo",
                "from_word": "world",
                "from_lemma": "world",
                "pos": "noun",
                "difficulty": "a1",
                "from_definition": "the earth and everything on it",
            },
            {"type": "punctuation", "value": "."},
        ],
    })
