# services/windowing.py
"""
Line windowing for the word-stream display.

The target is split on single spaces, words are packed greedily into lines of
at most ``width`` characters, and only ``visible`` lines around the caret's
line are rendered. Every rendered character is classified against the typed
buffer so the view can colour it.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Tuple

from app.errors import ConfigError


class CharState(str, Enum):
    NEUTRAL = "neutral"
    CORRECT = "correct"
    INCORRECT = "incorrect"


class WordSpan(NamedTuple):
    start: int
    end: int  # exclusive, trailing space not included


class LineSpan(NamedTuple):
    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class RenderedChar:
    char: str
    state: CharState = CharState.NEUTRAL
    is_caret: bool = False


@dataclass
class RenderedLine:
    span: LineSpan
    chars: List[RenderedChar] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(c.char for c in self.chars)


@dataclass
class Viewport:
    lines: List[RenderedLine]
    first_line: int
    current_line: int
    total_lines: int


def split_words(target: str) -> List[WordSpan]:
    spans = []
    pos = 0
    for word in target.split(" "):
        spans.append(WordSpan(pos, pos + len(word)))
        pos += len(word) + 1
    return spans


def pack_lines(words: List[WordSpan], width: int) -> List[LineSpan]:
    """Greedy packing; a word longer than ``width`` gets a line of its own."""
    if width <= 0:
        raise ConfigError(f"line width must be positive, got {width}")
    if not words:
        return []
    lines: List[LineSpan] = []
    line_start, line_end = words[0]
    for w in words[1:]:
        if w.end - line_start > width:
            lines.append(LineSpan(line_start, line_end))
            line_start, line_end = w
        else:
            line_end = w.end
    lines.append(LineSpan(line_start, line_end))
    return lines


def locate_caret_line(lines: List[LineSpan], caret: int) -> int:
    # the caret may sit one past a line's end before it moves on
    for i, line in enumerate(lines):
        if caret <= line.end + 1:
            return i
    return max(0, len(lines) - 1)


def window_bounds(line_count: int, current: int, visible: int) -> Tuple[int, int]:
    """Return ``(first, last_exclusive)`` of the visible lines."""
    if visible <= 0 or visible % 2 == 0:
        raise ConfigError(f"visible line count must be a positive odd number, got {visible}")
    if line_count <= 0:
        return 0, 0
    first = max(0, current - visible // 2)
    last = min(line_count, first + visible)
    if last - first < visible:
        first = max(0, last - visible)
    return first, last


def classify_char(target: str, typed: str, index: int) -> RenderedChar:
    ch = target[index]
    if index < len(typed):
        state = CharState.CORRECT if typed[index] == ch else CharState.INCORRECT
    else:
        state = CharState.NEUTRAL
    is_caret = index == len(typed) and len(typed) < len(target)
    return RenderedChar(ch, state, is_caret)


def build_viewport(target: str, typed: str, width: int, visible: int) -> Viewport:
    lines = pack_lines(split_words(target), width)
    caret = len(typed)
    current = locate_caret_line(lines, caret)
    first, last = window_bounds(len(lines), current, visible)
    rendered = []
    for span in lines[first:last]:
        chars = [classify_char(target, typed, i) for i in range(span.start, span.end)]
        # caret parked on the space that ends this line
        if caret == span.end < len(target):
            chars.append(classify_char(target, typed, caret))
        rendered.append(RenderedLine(span, chars))
    return Viewport(lines=rendered, first_line=first, current_line=current, total_lines=len(lines))


def render_full(target: str, typed: str) -> List[RenderedChar]:
    """Unwindowed rendering, with a trailing caret once the target is typed out."""
    chars = [classify_char(target, typed, i) for i in range(len(target))]
    if target and len(typed) >= len(target):
        chars.append(RenderedChar("", CharState.NEUTRAL, True))
    return chars
