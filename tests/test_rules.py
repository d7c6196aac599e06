import pytest

from blockfall.game import GravityTimer, ScoringRules


@pytest.mark.parametrize("lines,score", [(0, 0), (1, 100), (2, 300), (3, 500), (4, 800)])
def test_score_table(lines, score):
    assert ScoringRules().score_for_lines(lines) == score


def test_more_than_four_rows_is_impossible():
    with pytest.raises(ValueError):
        ScoringRules().score_for_lines(5)


@pytest.mark.parametrize("lines,level", [(0, 1), (5, 1), (9, 1), (10, 2), (19, 2), (25, 3), (100, 11)])
def test_level_for_lines(lines, level):
    assert ScoringRules().level_for_lines(lines) == level


def test_gravity_interval_reference_points():
    rules = ScoringRules()
    assert rules.gravity_interval_ms(1) == 1000
    assert rules.gravity_interval_ms(5) == 522
    assert rules.gravity_interval_ms(50) == 120


def test_gravity_interval_never_increases_and_has_a_floor():
    rules = ScoringRules()
    intervals = [rules.gravity_interval_ms(level) for level in range(1, 80)]
    assert all(a >= b for a, b in zip(intervals, intervals[1:]))
    assert min(intervals) == 120


def test_timer_ticks_once_per_interval():
    timer = GravityTimer()
    timer.start(100)
    timer.elapse(250)
    assert timer.consume()
    assert timer.consume()
    assert not timer.consume()
    assert timer.pending_ms == 50


def test_timer_restart_discards_pending_time():
    timer = GravityTimer()
    timer.start(100)
    timer.elapse(90)
    timer.start(100)
    assert timer.generation == 2
    timer.elapse(20)
    assert not timer.consume()


def test_cancelled_timer_ignores_time():
    timer = GravityTimer()
    timer.start(100)
    timer.cancel()
    timer.elapse(1000)
    assert not timer.active
    assert not timer.consume()


def test_timer_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        GravityTimer().start(0)
