from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import pytest

from timecalc.cutoffs import CutoffEvaluator
from timecalc.engine import ScheduleEngine, compute_schedule, make_interval
from timecalc.errors import ParseError


TZ = ZoneInfo("America/New_York")


def _dt_local(y, m, d, hh=0, mm=0, ss=0):
    return datetime(y, m, d, hh, mm, ss, tzinfo=TZ)


def _engine(now, *texts):
    engine = ScheduleEngine(CutoffEvaluator(), clock=lambda: now)
    for i, text in enumerate(texts, start=1):
        if i > 1:
            engine.add_interval()
        engine.set_text(i, text)
    return engine


def _positions(engine):
    return [it.position for it in engine.intervals]


def test_starts_with_one_empty_slot():
    engine = ScheduleEngine(CutoffEvaluator())
    assert engine.texts() == [""]
    assert _positions(engine) == [1]


def test_recompute_totals_and_projection():
    now = _dt_local(2026, 1, 14, 10, 0)
    engine = _engine(now, "30", "45")

    state = engine.recompute()

    assert state.ok
    assert state.total_minutes == 75
    assert state.projected_time == now + timedelta(minutes=75)
    assert state.violation is None
    assert state.interval_etas == (now + timedelta(minutes=30), now + timedelta(minutes=75))


def test_recompute_reports_cutoff_scenario():
    now = _dt_local(2026, 1, 14, 14, 50)
    state = _engine(now, "20", "10").recompute()

    assert state.total_minutes == 30
    assert state.projected_time == _dt_local(2026, 1, 14, 15, 20)
    assert state.violation.threshold_name == "3:00 PM"
    assert state.violation.index == 1
    assert state.minutes_past_threshold == 10


def test_later_threshold_takes_priority():
    now = _dt_local(2026, 1, 14, 16, 30)
    state = _engine(now, "40", "240").recompute()  # 17:10, then +2 hr 40 min = 19:50

    assert state.violation.threshold_name == "7:00 PM"
    assert state.violation.index == 2
    assert state.violation.minutes_past == 50


def test_blank_slot_contributes_nothing():
    now = _dt_local(2026, 1, 14, 10, 0)
    state = _engine(now, "10", "", "130").recompute()

    assert state.ok
    assert state.total_minutes == 100
    assert state.interval_etas[1] is None


def test_parse_error_stops_recompute_without_totals():
    now = _dt_local(2026, 1, 14, 10, 0)
    engine = _engine(now, "10", "20")
    good = engine.state

    state = engine.set_text(2, "abc")

    assert not state.ok
    assert state.error.position == 2
    assert state.total_minutes is None
    assert state.projected_time is None
    assert engine.last_valid_state is good
    assert engine.texts() == ["10", "abc"]


def test_compute_schedule_raises_on_first_invalid():
    now = _dt_local(2026, 1, 14, 10, 0)
    intervals = [make_interval("999", 1), make_interval("xx", 2)]

    with pytest.raises(ParseError) as exc:
        compute_schedule(intervals, now, CutoffEvaluator())

    assert exc.value.position == 1


def test_add_then_remove_last_round_trips():
    now = _dt_local(2026, 1, 14, 10, 0)
    engine = _engine(now, "5", "10")
    before = engine.intervals

    engine.add_interval()
    assert _positions(engine) == [1, 2, 3]
    engine.remove_last()

    assert engine.intervals == before


def test_remove_last_never_empties():
    engine = ScheduleEngine(CutoffEvaluator())
    engine.remove_last()
    assert engine.texts() == [""]


def test_remove_at_renumbers():
    now = _dt_local(2026, 1, 14, 10, 0)
    engine = _engine(now, "5", "10", "15")

    engine.remove_at(2)

    assert engine.texts() == ["5", "15"]
    assert _positions(engine) == [1, 2]
    assert engine.state.total_minutes == 20


def test_remove_at_out_of_range():
    engine = ScheduleEngine(CutoffEvaluator())
    with pytest.raises(IndexError):
        engine.remove_at(2)


def test_shift_drops_first_and_renumbers():
    now = _dt_local(2026, 1, 14, 10, 0)
    engine = _engine(now, "5", "130", "")

    engine.shift()

    assert engine.texts() == ["130", ""]
    assert _positions(engine) == [1, 2]
    assert engine.state.total_minutes == 90


def test_shift_single_interval_leaves_one_empty_slot():
    now = _dt_local(2026, 1, 14, 10, 0)
    engine = _engine(now, "5")

    engine.shift()

    assert engine.texts() == [""]
    assert _positions(engine) == [1]
    assert engine.state.total_minutes == 0


def test_subscribers_see_every_recompute():
    now = _dt_local(2026, 1, 14, 10, 0)
    engine = ScheduleEngine(CutoffEvaluator(), clock=lambda: now)
    seen = []
    engine.subscribe(seen.append)

    engine.set_text(1, "15")
    engine.add_interval()
    engine.unsubscribe(seen.append)
    engine.set_text(2, "5")

    assert [s.total_minutes for s in seen] == [15, 15]


def test_set_text_out_of_range():
    engine = ScheduleEngine(CutoffEvaluator())
    with pytest.raises(IndexError):
        engine.set_text(0, "5")
