# app/modes.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from app.errors import ConfigError

SENTENCE = "sentence"
WORDS = "words"

TIMED_DURATIONS = (15, 30, 60)
WORD_COUNTS = (25, 50, 100)

ConfigKey = Tuple[str, Optional[float], Optional[int]]


@dataclass(frozen=True)
class Sentence:
    """One random sentence; the run ends when it has been typed out."""

    mode = SENTENCE
    duration_seconds = None
    word_count = None

    def key(self) -> ConfigKey:
        return (SENTENCE, None, None)

    @property
    def label(self) -> str:
        return "Sentence"


@dataclass(frozen=True)
class WordsTimed:
    """Random word stream; the run ends when the countdown reaches zero."""

    duration_seconds: float

    mode = WORDS
    word_count = None

    def __post_init__(self):
        if not self.duration_seconds or self.duration_seconds <= 0:
            raise ConfigError(f"duration must be positive, got {self.duration_seconds!r}")

    def key(self) -> ConfigKey:
        return (WORDS, self.duration_seconds, None)

    @property
    def label(self) -> str:
        return f"Words · {self.duration_seconds:g}s"


@dataclass(frozen=True)
class WordsFixed:
    """Fixed number of random words; the run ends on the last character."""

    word_count: int

    mode = WORDS
    duration_seconds = None

    def __post_init__(self):
        if isinstance(self.word_count, bool) or not isinstance(self.word_count, int):
            raise ConfigError(f"word count must be an integer, got {self.word_count!r}")
        if self.word_count <= 0:
            raise ConfigError(f"word count must be positive, got {self.word_count}")

    def key(self) -> ConfigKey:
        return (WORDS, None, self.word_count)

    @property
    def label(self) -> str:
        return f"Words · {self.word_count} words"


TestConfig = Union[Sentence, WordsTimed, WordsFixed]
