import pytest

from services.metrics import (
    LiveMetrics,
    WpmTrace,
    compute_accuracy,
    compute_live_metrics,
    compute_wpm,
    count_correct_chars,
    instant_wpm_series,
    smooth_wpm,
)


def test_correct_count_empty_typed():
    assert count_correct_chars("", "anything") == 0


def test_correct_count_is_positional():
    assert count_correct_chars("abx", "abc") == 2
    assert count_correct_chars("bca", "abc") == 0


@pytest.mark.parametrize("typed,target", [
    ("abcdef", "abc"),
    ("ab", "abcdef"),
    ("zzzz", "zz"),
    ("", ""),
])
def test_correct_count_bounded_by_overlap(typed, target):
    assert count_correct_chars(typed, target) <= min(len(typed), len(target))


def test_wpm_zero_when_no_time_elapsed():
    assert compute_wpm(50, 0) == 0.0
    assert compute_wpm(50, -3) == 0.0


def test_wpm_typical_case():
    # 250 correct chars = 50 words in one minute
    assert compute_wpm(250, 60.0) == 50.0


def test_wpm_grows_with_correct_chars():
    assert compute_wpm(11, 30.0) > compute_wpm(10, 30.0) > compute_wpm(0, 30.0)


def test_accuracy_nothing_typed_is_full():
    assert compute_accuracy(0, 0) == 100.0


def test_accuracy_bounds():
    assert compute_accuracy(0, 20) == 0.0
    assert compute_accuracy(10, 11) == pytest.approx(90.909, abs=1e-3)
    assert compute_accuracy(5, 5) == 100.0


def test_live_metrics_before_first_key():
    m = compute_live_metrics("", "the cat sat", 0.0)
    assert m == LiveMetrics(elapsed_seconds=0.0, correct_count=0, typed_count=0,
                            wpm=0.0, accuracy=100.0, remaining_seconds=None)


def test_live_metrics_remaining_is_clamped():
    m = compute_live_metrics("ab", "abc", 20.0, duration_seconds=15)
    assert m.remaining_seconds == 0.0
    m = compute_live_metrics("ab", "abc", 5.0, duration_seconds=15)
    assert m.remaining_seconds == 10.0


def test_live_metrics_without_duration_has_no_remaining():
    assert compute_live_metrics("ab", "abc", 5.0).remaining_seconds is None


def test_trace_skips_zero_and_repeated_samples():
    trace = WpmTrace()
    trace.add(LiveMetrics(elapsed_seconds=0.0, wpm=0.0))
    trace.add(LiveMetrics(elapsed_seconds=1.0, wpm=30.0))
    trace.add(LiveMetrics(elapsed_seconds=1.0, wpm=31.0))
    trace.add(LiveMetrics(elapsed_seconds=2.0, wpm=40.0))
    assert trace.series() == ([1.0, 2.0], [30.0, 40.0])
    trace.clear()
    assert len(trace) == 0


def test_instant_series_of_steady_typist_is_flat():
    times = [float(t) for t in range(1, 11)]
    out = instant_wpm_series(times, [60.0] * 10)
    assert out == pytest.approx([60.0] * 10)


def test_instant_series_mismatched_input():
    assert instant_wpm_series([1.0, 2.0], [10.0]) == [0.0]
    assert instant_wpm_series([], []) == []


def test_smooth_constant_series_unchanged():
    times = [0.1 * i for i in range(1, 20)]
    assert smooth_wpm(times, [42.0] * len(times)) == pytest.approx([42.0] * len(times))
