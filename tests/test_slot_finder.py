# tests/test_slot_finder.py

from datetime import datetime, timedelta

from autoschedule.scheduling import SlotFinder, ScheduleConfig, ScheduledTask, DEFAULT_SCHEDULE
from autoschedule.scheduling.utils.slot_utils import sunday_based_weekday, round_up_to_interval

from .conftest import NOW
from .fakes import InMemoryTaskStore, FakeCalendar, timed_event

TUESDAY = NOW.date()


def make_finder(task_store=None, calendar=None, now=NOW):
    return SlotFinder(task_store or InMemoryTaskStore(), calendar, clock=lambda: now)


def test_first_slot_is_start_of_working_day():
    finder = make_finder(calendar=FakeCalendar())
    slots = finder.find_available_slots(1, 30, NOW + timedelta(days=3), DEFAULT_SCHEDULE)

    assert slots[0].start == datetime(2026, 10, 20, 9, 0)
    assert slots[0].end == datetime(2026, 10, 20, 9, 30)


def test_calendar_event_pushes_slot_past_it():
    calendar = FakeCalendar([timed_event("2026-10-20T09:00:00+00:00", "2026-10-20T10:00:00+00:00")])
    finder = make_finder(calendar=calendar)
    slots = finder.find_available_slots(1, 60, NOW + timedelta(days=3), DEFAULT_SCHEDULE)

    assert slots[0].start >= datetime(2026, 10, 20, 10, 0)
    assert all(not (s.start < datetime(2026, 10, 20, 10, 0) and s.end > datetime(2026, 10, 20, 9, 0))
               for s in slots)


def test_calendar_filling_today_moves_to_next_working_day():
    calendar = FakeCalendar([timed_event("2026-10-20T09:00:00+00:00", "2026-10-20T17:00:00+00:00")])
    slots = make_finder(calendar=calendar).find_available_slots(1, 60, NOW + timedelta(days=3), DEFAULT_SCHEDULE)

    assert all(s.start.date() != TUESDAY for s in slots)
    assert slots[0].start == datetime(2026, 10, 21, 9, 0)


def test_touching_busy_period_is_not_a_conflict():
    calendar = FakeCalendar([timed_event("2026-10-20T09:00:00+00:00", "2026-10-20T09:30:00+00:00")])
    finder = make_finder(calendar=calendar)
    slots = finder.find_available_slots(1, 30, None, DEFAULT_SCHEDULE)

    assert datetime(2026, 10, 20, 9, 30) in [s.start for s in slots]
    assert datetime(2026, 10, 20, 9, 15) not in [s.start for s in slots]


def test_hard_deadline_without_room_returns_nothing():
    finder = make_finder()
    slots = finder.find_available_slots(
        1, 9 * 60, NOW + timedelta(days=2), DEFAULT_SCHEDULE, is_hard_deadline=True,
    )
    assert slots == []


def test_hard_deadline_limits_slot_end():
    deadline = datetime(2026, 10, 20, 10, 0)
    finder = make_finder()
    slots = finder.find_available_slots(1, 30, deadline, DEFAULT_SCHEDULE, is_hard_deadline=True)

    assert [s.start.strftime("%H:%M") for s in slots] == ["09:00", "09:15", "09:30"]
    assert all(s.end <= deadline for s in slots)


def test_candidates_are_capped_at_twenty():
    slots = make_finder().find_available_slots(1, 15, None, DEFAULT_SCHEDULE)
    assert len(slots) == 20


def test_slots_respect_schedule_days_and_hours():
    wednesday_afternoons = ScheduleConfig(start_time="13:00", end_time="15:00", days_of_week=(3,))
    slots = make_finder().find_available_slots(1, 45, None, wednesday_afternoons)

    assert slots
    for slot in slots:
        assert sunday_based_weekday(slot.start.date()) == 3
        assert slot.start >= slot.start.replace(hour=13, minute=0)
        assert slot.end <= slot.start.replace(hour=15, minute=0)


def test_slots_never_run_past_working_end():
    late = datetime(2026, 10, 20, 16, 10)
    slots = make_finder(now=late).find_available_slots(1, 60, None, DEFAULT_SCHEDULE)

    assert slots
    assert all(s.end <= s.start.replace(hour=17, minute=0) for s in slots)
    assert slots[0].start.date() > late.date()


def test_today_starts_at_next_quarter_hour():
    midmorning = datetime(2026, 10, 20, 10, 7)
    slots = make_finder(now=midmorning).find_available_slots(1, 30, None, DEFAULT_SCHEDULE)
    assert min(s.start for s in slots) == datetime(2026, 10, 20, 10, 15)


def test_ranked_by_score_with_chronological_ties():
    slots = make_finder().find_available_slots(1, 60, None, DEFAULT_SCHEDULE)

    scores = [s.score for s in slots]
    assert scores == sorted(scores, reverse=True)
    morning = [s for s in slots if s.score == slots[0].score]
    assert [s.start for s in morning] == sorted(s.start for s in morning)


def test_ideal_start_time_attracts_best_slot():
    slots = make_finder().find_available_slots(
        1, 30, None, DEFAULT_SCHEDULE, ideal_start_time="11:00",
    )
    assert slots[0].start == datetime(2026, 10, 20, 11, 0)


def test_calendar_failure_is_not_fatal():
    calendar = FakeCalendar(error=RuntimeError("token revoked"))
    slots = make_finder(calendar=calendar).find_available_slots(1, 30, None, DEFAULT_SCHEDULE)

    assert calendar.calls
    assert slots[0].start == datetime(2026, 10, 20, 9, 0)


def test_all_day_event_blocks_whole_day():
    calendar = FakeCalendar([{"id": "offsite", "start": {"date": "2026-10-20"}, "end": {"date": "2026-10-21"}}])
    slots = make_finder(calendar=calendar).find_available_slots(1, 30, None, DEFAULT_SCHEDULE)

    assert all(s.start.date() != TUESDAY for s in slots)
    assert slots[0].start == datetime(2026, 10, 21, 9, 0)


def test_unreadable_event_is_skipped():
    calendar = FakeCalendar([
        {"id": "broken", "start": {"dateTime": "not a date"}, "end": {"dateTime": "also not"}},
        timed_event("2026-10-20T09:00:00+00:00", "2026-10-20T12:00:00+00:00"),
    ])
    slots = make_finder(calendar=calendar).find_available_slots(1, 30, None, DEFAULT_SCHEDULE)
    assert min(s.start for s in slots) == datetime(2026, 10, 20, 12, 0)


def test_placed_tasks_are_busy_unless_excluded():
    store = InMemoryTaskStore([
        ScheduledTask(
            id=7, user_id=1, name="Standup prep", is_auto_scheduled=True, duration_minutes=60,
            scheduled_start=datetime(2026, 10, 20, 9, 0), scheduled_end=datetime(2026, 10, 20, 10, 0),
        ),
    ])
    finder = make_finder(task_store=store)

    blocked = finder.find_available_slots(1, 30, None, DEFAULT_SCHEDULE)
    assert min(s.start for s in blocked) == datetime(2026, 10, 20, 10, 0)

    own = finder.find_available_slots(1, 30, None, DEFAULT_SCHEDULE, exclude_task_ids=(7,))
    assert own[0].start == datetime(2026, 10, 20, 9, 0)


def test_other_users_tasks_do_not_block():
    store = InMemoryTaskStore([
        ScheduledTask(
            id=3, user_id=2, name="Someone else", is_auto_scheduled=True,
            scheduled_start=datetime(2026, 10, 20, 9, 0), scheduled_end=datetime(2026, 10, 20, 17, 0),
        ),
    ])
    slots = make_finder(task_store=store).find_available_slots(1, 30, None, DEFAULT_SCHEDULE)
    assert slots[0].start == datetime(2026, 10, 20, 9, 0)


def test_non_positive_duration_returns_nothing():
    assert make_finder().find_available_slots(1, 0, None, DEFAULT_SCHEDULE) == []


def test_round_up_to_interval():
    assert round_up_to_interval(datetime(2026, 10, 20, 9, 0), 15) == datetime(2026, 10, 20, 9, 0)
    assert round_up_to_interval(datetime(2026, 10, 20, 9, 0, 30), 15) == datetime(2026, 10, 20, 9, 15)
    assert round_up_to_interval(datetime(2026, 10, 20, 9, 46), 15) == datetime(2026, 10, 20, 10, 0)
