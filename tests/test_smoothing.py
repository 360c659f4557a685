import pytest

from laneguide.detection.smoothing import TemporalSmoother


def test_invalid_entries_are_excluded_from_average():
    smoother = TemporalSmoother(history_size=3)
    smoother.update(0.2, True)
    smoother.update(0.0, False)
    smoothed, valid = smoother.update(0.4, True)

    assert smoothed == pytest.approx(0.3)
    assert valid


def test_history_is_bounded():
    smoother = TemporalSmoother(history_size=3)
    for value in (0.9, 0.1, 0.1, 0.1):
        smoother.update(value, True)

    assert len(smoother) == 3
    assert smoother.last_stable_deviation == pytest.approx(0.1)


def test_all_invalid_window_holds_last_stable_value():
    smoother = TemporalSmoother(history_size=2)
    smoother.update(0.5, True)
    smoother.update(-0.3, False)
    smoothed, valid = smoother.update(-0.8, False)

    assert smoothed == pytest.approx(0.5)
    assert not valid


def test_isolated_miss_does_not_reset_guidance():
    smoother = TemporalSmoother(history_size=5)
    smoother.update(0.4, True)
    smoothed, valid = smoother.update(0.0, False)

    assert smoothed == pytest.approx(0.4)
    assert valid


def test_starts_centered():
    smoother = TemporalSmoother(history_size=5)
    assert smoother.update(0.7, False) == (0.0, False)


def test_reset_clears_history_and_stable_value():
    smoother = TemporalSmoother(history_size=5)
    smoother.update(0.4, True)
    smoother.reset()

    assert len(smoother) == 0
    assert smoother.last_stable_deviation == 0.0
