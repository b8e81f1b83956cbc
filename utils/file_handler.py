# utils/file_handler.py
from __future__ import annotations
from pathlib import Path
from typing import List, Optional, Sequence
import logging
import random

from app.modes import Sentence, TestConfig, WordsFixed, WordsTimed

log = logging.getLogger(__name__)

DEFAULT_TIMED_WORD_COUNT = 400

_FALLBACK_SENTENCES = [
    "The quick brown fox jumps over the lazy dog.",
    "Practice typing to improve your speed and accuracy.",
    "Consistency beats intensity when learning a new skill.",
    "Focus on accuracy first; speed will follow naturally.",
    "A journey of a thousand miles begins with a single step.",
    "Small daily improvements add up to remarkable results.",
]

_FALLBACK_WORDS = (
    "the be to of and a in that have it for not on with he as you do at this but his by "
    "from they we say her she or an will my one all would there their what so up out if "
    "about who get which go me when make can like time no just him know take people into "
    "year your good some could them see other than then now look only come its over think "
    "also back after use two how our work first well way even new want because any these "
    "give day most us great small large place right home hand high long world still point "
    "number group problem fact keep start might story while around show every house light"
).split()


def _read_lines(path: Path) -> List[str]:
    try:
        return [ln.strip() for ln in path.read_text(encoding="utf-8").splitlines() if ln.strip()]
    except OSError as e:
        log.warning("Failed to read %s: %s", path, e)
        return []


class TextSource:
    """Supplies target texts: random sentences and random lowercase word streams."""

    def __init__(
        self,
        sentences: Optional[Sequence[str]] = None,
        words: Optional[Sequence[str]] = None,
        rng: Optional[random.Random] = None,
        timed_word_count: int = DEFAULT_TIMED_WORD_COUNT,
    ):
        self.sentences = list(sentences or _FALLBACK_SENTENCES)
        self.words = [w.lower() for w in (words or _FALLBACK_WORDS)]
        self.rng = rng or random.Random()
        self.timed_word_count = timed_word_count

    @classmethod
    def from_files(cls, texts_dir, **kwargs) -> "TextSource":
        """Load sentences.txt / words.txt (one entry per line) from ``texts_dir``."""
        base = Path(texts_dir)
        sentences = _read_lines(base / "sentences.txt") if (base / "sentences.txt").exists() else []
        words: List[str] = []
        if (base / "words.txt").exists():
            for ln in _read_lines(base / "words.txt"):
                words.extend(ln.split())
        if not sentences:
            log.info("No sentences found in %s, using built-in list", base)
        return cls(sentences or None, words or None, **kwargs)

    def next_sentence(self) -> str:
        return self.rng.choice(self.sentences)

    def build_word_stream(self, count: int) -> str:
        if count <= 0:
            return ""
        return " ".join(self.rng.choice(self.words) for _ in range(count))

    def target_for(self, config: TestConfig) -> str:
        if isinstance(config, Sentence):
            return self.next_sentence()
        if isinstance(config, WordsFixed):
            return self.build_word_stream(config.word_count)
        if isinstance(config, WordsTimed):
            # the stream has to outlast the timer
            return self.build_word_stream(self.timed_word_count)
        raise TypeError(f"Unknown test config: {config!r}")

