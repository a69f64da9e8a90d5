# tests/test_sql_store.py

import json
from datetime import datetime, timedelta

import pytest

from autoschedule.models import Task, TaskSchedule, TaskStatus, EtaStatus
from autoschedule.scheduling import AutoScheduler
from autoschedule.services.sql_store import SqlTaskStore, SqlPreferenceStore, SqlScheduleLookup

from .conftest import NOW


def add_task(db, user, **fields):
    fields.setdefault("name", "Task")
    fields.setdefault("is_auto_scheduled", True)
    task = Task(user_id=user.id, **fields)
    db.add(task)
    db.commit()
    return task


def test_snapshot_uses_plain_strings(db, user):
    task = add_task(db, user, eta_status=EtaStatus.AT_RISK, priority="Big Rock")
    snapshot = SqlTaskStore(db).get_task(task.id)

    assert snapshot.status == "active"
    assert snapshot.eta_status == "at_risk"
    assert snapshot.priority == "Big Rock"
    assert snapshot.time_spent_mins == 0


def test_get_missing_task_returns_none(db):
    assert SqlTaskStore(db).get_task(404) is None


def test_list_reschedulable_filters(db, user):
    keep = add_task(db, user, workspace_id=1)
    add_task(db, user, is_reminder_only=True)
    add_task(db, user, is_auto_scheduled=False)
    add_task(db, user, status=TaskStatus.COMPLETED)
    add_task(db, user, parent_chunk_id=keep.id)
    other_ws = add_task(db, user, workspace_id=2)

    store = SqlTaskStore(db)
    assert {t.id for t in store.list_reschedulable_tasks(user.id)} == {keep.id, other_ws.id}
    assert [t.id for t in store.list_reschedulable_tasks(user.id, workspace_id=1)] == [keep.id]


def test_list_scheduled_tasks_uses_overlap(db, user):
    window_start = datetime(2026, 10, 20, 8, 0)
    straddling = add_task(db, user, scheduled_start=datetime(2026, 10, 20, 7, 30),
                          scheduled_end=datetime(2026, 10, 20, 8, 30))
    inside = add_task(db, user, scheduled_start=datetime(2026, 10, 20, 9, 0),
                      scheduled_end=datetime(2026, 10, 20, 9, 30))
    add_task(db, user, scheduled_start=datetime(2026, 10, 20, 7, 0),
             scheduled_end=datetime(2026, 10, 20, 8, 0))
    add_task(db, user, scheduled_start=datetime(2026, 12, 1, 9, 0),
             scheduled_end=datetime(2026, 12, 1, 9, 30))

    found = SqlTaskStore(db).list_scheduled_tasks(user.id, window_start, window_start + timedelta(days=30))
    assert [t.id for t in found] == [straddling.id, inside.id]


def test_update_task_coerces_eta_status(db, user):
    task = add_task(db, user)
    store = SqlTaskStore(db)

    store.update_task(task.id, eta_status="overdue", eta_days_offset=-2)

    db.refresh(task)
    assert task.eta_status is EtaStatus.OVERDUE
    assert task.eta_days_offset == -2


def test_update_missing_task_raises(db):
    with pytest.raises(LookupError):
        SqlTaskStore(db).update_task(404, eta_status="on_track")


def test_chunk_children_lifecycle(db, user):
    parent = add_task(db, user, name="Deep work", priority="Focus", workspace_id=3,
                      due_date=NOW + timedelta(days=2), duration_minutes=120)
    store = SqlTaskStore(db)
    snapshot = store.get_task(parent.id)

    child_id = store.create_chunk_child(
        snapshot,
        name="Deep work (2/2)",
        duration_minutes=60,
        scheduled_start=datetime(2026, 10, 20, 10, 15),
        scheduled_end=datetime(2026, 10, 20, 11, 15),
        chunk_number=2,
        total_chunks=2,
        eta_status="on_track",
        eta_days_offset=1,
    )

    child = store.get_task(child_id)
    assert child.parent_chunk_id == parent.id
    assert (child.priority, child.workspace_id, child.due_date) == ("Focus", 3, parent.due_date)
    assert child.is_auto_scheduled and child.duration_minutes == 60

    assert store.delete_chunk_children([parent.id]) == 1
    assert store.get_task(child_id) is None
    assert store.delete_chunk_children([]) == 0


def test_clear_schedules(db, user):
    task = add_task(db, user, scheduled_start=NOW, scheduled_end=NOW + timedelta(minutes=30))
    SqlTaskStore(db).clear_schedules([task.id])
    db.refresh(task)
    assert task.scheduled_start is None and task.scheduled_end is None


def test_preference_store_reads_work_hours(db, user):
    user.work_hours_enabled = True
    user.work_hours_start = "08:00"
    user.work_hours_end = "12:00"
    user.work_days_json = json.dumps(["saturday", "sunday"])
    db.commit()

    prefs = SqlPreferenceStore(db).get_work_hours(user.id)
    assert prefs.enabled
    assert prefs.work_days == ["saturday", "sunday"]
    assert SqlPreferenceStore(db).get_work_hours(404) is None


def test_schedule_lookup(db, user):
    schedule = TaskSchedule(name="Evenings", start_time="18:00", end_time="21:00",
                            days_of_week=[1, 3], created_by_id=user.id)
    db.add(schedule)
    db.commit()

    config = SqlScheduleLookup(db).get_schedule(schedule.id)
    assert (config.start_time, config.end_time, config.days_of_week) == ("18:00", "21:00", (1, 3))
    assert SqlScheduleLookup(db).get_schedule(404) is None


def test_reschedule_all_against_database(db, user):
    long_task = add_task(db, user, name="Write report", duration_minutes=180, chunk_duration_mins=60,
                         due_date=NOW + timedelta(days=3))
    short_task = add_task(db, user, name="Email", duration_minutes=30)
    scheduler = AutoScheduler(SqlTaskStore(db), SqlPreferenceStore(db), SqlScheduleLookup(db), clock=lambda: NOW)

    summary = scheduler.reschedule_all(user.id)

    assert (summary.scheduled, summary.failed) == (2, 0)
    children = db.query(Task).filter(Task.parent_chunk_id == long_task.id).order_by(Task.chunk_number).all()
    assert [c.name for c in children] == ["Write report (2/3)", "Write report (3/3)"]
    db.refresh(long_task)
    db.refresh(short_task)
    assert long_task.scheduled_start == datetime(2026, 10, 20, 9, 0)
    assert long_task.eta_status is EtaStatus.ON_TRACK
    # Morning bonus beats the Tuesday afternoon gaps left by the chunks
    assert short_task.scheduled_start == datetime(2026, 10, 21, 9, 0)
    assert short_task.scheduled_end == datetime(2026, 10, 21, 9, 30)

    scheduler.reschedule_all(user.id)
    assert db.query(Task).filter(Task.parent_chunk_id == long_task.id).count() == 2
