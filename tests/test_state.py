import pytest

from app.modes import Sentence, WordsFixed, WordsTimed
from app.state import (
    MIN_ELAPSED_SECONDS,
    Control,
    KeyEvent,
    SessionState,
    TestSession,
    Tick,
)


def make_session(clock, config=None, target="the cat sat"):
    results = []
    s = TestSession(config or Sentence(), clock, on_finished=results.append)
    s.start(target)
    return s, results


def type_text(session, clock, text, step=0.5):
    for ch in text:
        clock.advance(step)
        session.apply_key(ch)


def test_start_arms_session(clock):
    s, _ = make_session(clock)
    assert s.state is SessionState.ARMED
    assert s.typed == ""
    assert s.started_at is None
    assert not s.finished


def test_keys_ignored_before_start(clock):
    s = TestSession(Sentence(), clock)
    assert s.apply_key("a") is None
    assert s.typed == ""
    assert s.state is SessionState.IDLE


def test_backspace_on_empty_does_not_arm(clock):
    s, _ = make_session(clock)
    s.apply_key("Backspace")
    assert s.typed == ""
    assert s.started_at is None
    assert s.state is SessionState.ARMED


def test_first_char_arms_clock(clock):
    s, _ = make_session(clock)
    clock.advance(3)
    s.apply_key("t")
    assert s.started_at == clock.now()
    assert s.state is SessionState.RUNNING
    assert s.typed == "t"


def test_backspace_removes_last_char(clock):
    s, _ = make_session(clock)
    type_text(s, clock, "thx")
    s.apply_key("Backspace")
    assert s.typed == "th"
    assert s.is_running


def test_control_keys(clock):
    s, _ = make_session(clock)
    type_text(s, clock, "th")
    assert s.apply_key("Escape") is Control.ABORT
    assert s.apply_key("Tab") is Control.REGENERATE
    assert s.typed == "th"


def test_named_keys_are_ignored(clock):
    s, _ = make_session(clock)
    assert s.apply_key("Shift") is None
    assert s.apply_key("ArrowLeft") is None
    assert s.typed == ""
    assert s.started_at is None


def test_sentence_scenario(clock):
    s, results = make_session(clock)
    type_text(s, clock, "the cat sa")
    assert not s.finished
    type_text(s, clock, "m")

    assert s.finished
    assert s.state is SessionState.FINISHED
    assert len(results) == 1
    r = results[0]
    assert r.mode == "sentence"
    assert r.duration_seconds is None and r.word_count is None
    assert r.correct_count == 10
    assert r.typed_count == 11
    assert r.accuracy == pytest.approx(10 / 11 * 100)
    assert r.elapsed_seconds == pytest.approx(5.0)
    assert r.wpm == pytest.approx((10 / 5) / (5.0 / 60))
    assert s.result is r


def test_completion_is_idempotent(clock):
    s, results = make_session(clock)
    type_text(s, clock, "the cat sat")
    before = (s.typed, s.started_at, s.ended_at, s.result)

    clock.advance(10)
    assert s.check_completion(s.metrics(clock.now()), clock.now()) is None
    assert s.finish() is None
    s.tick(clock.now())
    s.apply_key("x")
    s.apply_key("Backspace")

    assert (s.typed, s.started_at, s.ended_at, s.result) == before
    assert len(results) == 1


def test_metrics_freeze_after_finish(clock):
    s, _ = make_session(clock)
    type_text(s, clock, "the cat sat")
    final = s.metrics()
    clock.advance(30)
    assert s.tick(clock.now()) == final


def test_typed_never_exceeds_target(clock):
    s, _ = make_session(clock, WordsTimed(60), target="ab")
    for ch in "abcdefgh":
        s.apply_key(ch)
        assert len(s.typed) <= len(s.target)
    assert s.typed == "ab"
    # timed runs do not end at the end of the text
    assert not s.finished


def test_timed_scenario(clock):
    s, results = make_session(clock, WordsTimed(15), target="alpha beta gamma")
    s.apply_key("a")
    t0 = s.started_at

    m = s.tick(t0 + 14.9)
    assert not s.finished
    assert m.remaining_seconds == pytest.approx(0.1, abs=1e-3)

    m = s.tick(t0 + 15.0)
    assert s.finished
    assert m.remaining_seconds == 0.0
    assert len(results) == 1
    assert results[0].elapsed_seconds == pytest.approx(15.0)
    assert results[0].duration_seconds == 15
    assert results[0].typed_count == 1


def test_fixed_words_never_times_out(clock):
    target = "alpha beta"
    s, results = make_session(clock, WordsFixed(25), target=target)
    s.apply_key("a")
    m = s.tick(clock.advance(1000))
    assert m.remaining_seconds is None
    assert not s.finished

    type_text(s, clock, target[1:])
    assert s.finished
    assert results[0].word_count == 25
    assert results[0].correct_count == len(target)


def test_force_finish_without_keystrokes(clock):
    s, results = make_session(clock)
    r = s.finish()
    assert r.elapsed_seconds == pytest.approx(MIN_ELAPSED_SECONDS)
    assert r.wpm == 0.0
    assert r.accuracy == 100.0
    assert results == [r]


def test_tick_while_armed_is_read_only(clock):
    s, results = make_session(clock)
    m = s.tick(clock.advance(100))
    assert m.elapsed_seconds == 0.0
    assert s.state is SessionState.ARMED
    assert results == []


def test_handle_events(clock):
    s, _ = make_session(clock, WordsTimed(15), target="alpha")
    assert s.handle(KeyEvent("a")) is SessionState.RUNNING
    assert s.handle(Tick(s.started_at + 1)) is SessionState.RUNNING
    assert s.handle(Tick(s.started_at + 16)) is SessionState.FINISHED
    with pytest.raises(TypeError):
        s.handle("a")


def test_restart_after_finish(clock):
    s, results = make_session(clock)
    type_text(s, clock, "the cat sat")
    s.start("a new one")
    assert s.state is SessionState.ARMED
    assert not s.finished
    assert s.result is None
    assert s.typed == ""
    type_text(s, clock, "a new one")
    assert len(results) == 2
