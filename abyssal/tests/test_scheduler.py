import pytest

from abyssal.narrator import Narrator
from abyssal.scheduler import Scheduler


def test_call_later_fires_in_due_order():
    scheduler = Scheduler()
    fired = []
    scheduler.call_later(2.0, lambda: fired.append('b'))
    scheduler.call_later(1.0, lambda: fired.append('a'))
    scheduler.call_later(2.0, lambda: fired.append('c'))

    assert scheduler.advance(1.5) == 1
    assert fired == ['a']
    scheduler.advance(0.5)
    assert fired == ['a', 'b', 'c']
    assert scheduler.now == 2.0


def test_call_every_repeats_until_cancelled():
    scheduler = Scheduler()
    ticks = []
    task = scheduler.call_every(1.0, lambda: ticks.append(scheduler.now))

    scheduler.advance(3.0)
    assert ticks == [1.0, 2.0, 3.0]

    task.cancel()
    scheduler.advance(5.0)
    assert len(ticks) == 3
    assert not task.active
    assert scheduler.pending() == []


def test_callback_can_cancel_other_task():
    scheduler = Scheduler()
    fired = []
    later = scheduler.call_later(2.0, lambda: fired.append('later'))
    scheduler.call_later(1.0, later.cancel)

    scheduler.advance(10.0)
    assert fired == []


def test_callback_can_schedule_within_same_advance():
    scheduler = Scheduler()
    fired = []
    scheduler.call_later(1.0, lambda: scheduler.call_later(1.0, lambda: fired.append(scheduler.now)))

    scheduler.advance(5.0)
    assert fired == [2.0]


def test_invalid_arguments():
    scheduler = Scheduler()
    with pytest.raises(ValueError):
        scheduler.call_later(-1.0, lambda: None)
    with pytest.raises(ValueError):
        scheduler.call_every(0.0, lambda: None)
    with pytest.raises(ValueError):
        scheduler.advance(-0.1)


def test_narrator_plays_messages_in_order():
    scheduler = Scheduler()
    shown = []
    narrator = Narrator(scheduler, on_display=shown.append)

    narrator.say("first", 3.0)
    narrator.say("second", 2.0)
    assert narrator.current.text == "first"
    assert narrator.backlog == 1

    scheduler.advance(2.9)
    assert narrator.current.text == "first"

    scheduler.advance(0.1)
    assert narrator.current.text == "second"
    assert narrator.current.shown_at == 3.0

    scheduler.advance(2.0)
    assert narrator.current is None
    assert not narrator.is_speaking
    assert [u.text if u else None for u in shown] == ["first", None, "second", None]


def test_narrator_ignores_empty_messages():
    narrator = Narrator(Scheduler())
    narrator.say("")
    assert len(narrator.history) == 0
    assert narrator.current is None


def test_narrator_restarts_after_idle():
    scheduler = Scheduler()
    narrator = Narrator(scheduler)
    narrator.say("ping", 1.0)
    scheduler.advance(5.0)
    assert narrator.current is None

    narrator.say("pong", 1.0)
    assert narrator.current.text == "pong"
    assert narrator.current.shown_at == 5.0


def test_narrator_history_is_bounded():
    scheduler = Scheduler()
    narrator = Narrator(scheduler, history_limit=3)
    for i in range(10):
        narrator.say(f"line {i}", 1.0)
        scheduler.advance(1.0)

    assert narrator.lines() == ["line 7", "line 8", "line 9"]


def test_narrator_drain_returns_new_lines_once():
    scheduler = Scheduler()
    narrator = Narrator(scheduler)
    narrator.say("first")
    narrator.say("second")

    assert narrator.drain() == ["first", "second"]
    assert narrator.drain() == []

    narrator.say("third")
    assert narrator.drain() == ["third"]
    assert narrator.lines() == ["first", "second", "third"]
