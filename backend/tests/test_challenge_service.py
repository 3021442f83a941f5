from datetime import date, timedelta
from unittest.mock import patch

from sqlalchemy.exc import SQLAlchemyError

from hard75.models import ChallengeDay, Task
from hard75.schemas import ChallengeDayUpdate, TaskUpdate, UserSettingsUpdate
from hard75.services.challenge_service import ChallengeService

import pytest


START = date(2026, 3, 1)
REQUIRED_KEYS = {"workout1", "workout2", "water", "read", "diet", "photo"}


def _day_count(db, user):
    return db.query(ChallengeDay).filter(ChallengeDay.user_id == user.id).count()


def _task_keys(db, day):
    return {t.key for t in db.query(Task).filter(Task.challenge_day_id == day.id).all()}


def _enable_pms(service, user, cycle_start):
    service.update_user_settings(user, UserSettingsUpdate(
        pms_safe_enabled=True,
        cycle_length=28,
        pms_window_length=7,
        cycle_day1_date=cycle_start,
    ))
    return service.get_user_settings(user)


def test_ensure_challenge_days_seeds_75_consecutive_days(db_session, user):
    service = ChallengeService(db_session)

    service.ensure_challenge_days(user, today=START)

    days = service.get_challenge_days(user)
    assert [d.day_number for d in days] == list(range(1, 76))
    assert days[0].date == START
    for previous, current in zip(days, days[1:]):
        assert current.date - previous.date == timedelta(days=1)
    assert days[-1].date == START + timedelta(days=74)
    assert days[0].notes == ""
    assert days[0].symptoms == []


def test_ensure_challenge_days_is_idempotent(db_session, user):
    service = ChallengeService(db_session)

    service.ensure_challenge_days(user, today=START)
    first = [(d.day_number, d.date) for d in service.get_challenge_days(user)]
    service.ensure_challenge_days(user, today=START + timedelta(days=10))
    second = [(d.day_number, d.date) for d in service.get_challenge_days(user)]

    assert _day_count(db_session, user) == 75
    assert first == second


def test_missing_days_are_anchored_on_existing_day_one(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)
    db_session.query(ChallengeDay).filter(ChallengeDay.day_number.in_([10, 40, 75])).delete(
        synchronize_session=False
    )
    db_session.commit()

    service.ensure_challenge_days(user, today=START + timedelta(days=30))

    assert _day_count(db_session, user) == 75
    assert service.get_challenge_day(user, 40).date == START + timedelta(days=39)
    assert service.get_challenge_day(user, 75).date == START + timedelta(days=74)


def test_missing_day_one_keeps_dates_contiguous(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)
    db_session.query(ChallengeDay).filter(ChallengeDay.day_number == 1).delete(
        synchronize_session=False
    )
    db_session.commit()

    service.ensure_challenge_days(user, today=START + timedelta(days=5))

    assert service.get_challenge_start_date(user) == START


def test_store_failure_while_seeding_is_swallowed(db_session, user):
    service = ChallengeService(db_session)

    with patch.object(db_session, "commit", side_effect=SQLAlchemyError("store unavailable")):
        service.ensure_challenge_days(user, today=START)

    assert _day_count(db_session, user) == 0


def test_ensure_tasks_outside_window_skips_rest_task(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)
    day = service.get_challenge_day(user, 1)

    service.ensure_tasks(user, day, is_pms_window=False)

    assert _task_keys(db_session, day) == REQUIRED_KEYS


def test_ensure_tasks_inside_window_adds_optional_rest_task(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)
    day = service.get_challenge_day(user, 1)

    service.ensure_tasks(user, day, is_pms_window=True)

    tasks = {t.key: t for t in service.get_tasks(day)}
    assert set(tasks) == REQUIRED_KEYS | {"rest_recovery"}
    assert tasks["rest_recovery"].required is False
    assert tasks["rest_recovery"].title == "Rest & Recovery"
    assert tasks["workout1"].required is True


def test_ensure_tasks_is_idempotent(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)
    day = service.get_challenge_day(user, 1)

    service.ensure_tasks(user, day, is_pms_window=True)
    service.ensure_tasks(user, day, is_pms_window=True)

    assert db_session.query(Task).filter(Task.challenge_day_id == day.id).count() == 7


def test_ensure_tasks_never_modifies_existing_tasks(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)
    day = service.get_challenge_day(user, 1)
    service.ensure_tasks(user, day, is_pms_window=False)
    water = next(t for t in service.get_tasks(day) if t.key == "water")
    water.completed = True
    db_session.commit()

    service.ensure_tasks(user, day, is_pms_window=False)

    water = next(t for t in service.get_tasks(day) if t.key == "water")
    assert water.completed is True


def test_ensure_tasks_restores_a_missing_required_task(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)
    day = service.get_challenge_day(user, 1)
    service.ensure_tasks(user, day, is_pms_window=False)
    db_session.query(Task).filter(Task.challenge_day_id == day.id, Task.key == "read").delete(
        synchronize_session=False
    )
    db_session.commit()

    service.ensure_tasks(user, day, is_pms_window=False)

    assert _task_keys(db_session, day) == REQUIRED_KEYS


def test_rest_task_membership_is_frozen_at_creation(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)
    outside = service.get_challenge_day(user, 1)
    inside = service.get_challenge_day(user, 2)

    service.ensure_tasks(user, outside, is_pms_window=False)
    service.ensure_tasks(user, inside, is_pms_window=True)

    # Later evaluations disagree with the original ones
    service.ensure_tasks(user, outside, is_pms_window=True)
    service.ensure_tasks(user, inside, is_pms_window=False)

    assert "rest_recovery" not in _task_keys(db_session, outside)
    assert "rest_recovery" in _task_keys(db_session, inside)


def test_settings_change_does_not_resync_materialized_days(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)
    day = service.get_challenge_day(user, 1)
    # Day 1 lands on cycle day 22 (inside the window)
    settings = _enable_pms(service, user, START - timedelta(days=21))

    assert service.ensure_day_tasks(user, day, settings) is True
    service.update_user_settings(user, UserSettingsUpdate(pms_safe_enabled=False))
    service.ensure_day_tasks(user, day, service.get_user_settings(user))

    assert "rest_recovery" in _task_keys(db_session, day)


def test_seed_user_data_materializes_every_day(db_session, user):
    service = ChallengeService(db_session)
    _enable_pms(service, user, START)

    service.seed_user_data(user, today=START)
    service.seed_user_data(user, today=START)

    days = service.get_challenge_days(user)
    assert len(days) == 75
    by_number = {d.day_number: _task_keys(db_session, d) for d in days}
    assert by_number[1] == REQUIRED_KEYS
    assert by_number[22] == REQUIRED_KEYS | {"rest_recovery"}
    assert by_number[28] == REQUIRED_KEYS | {"rest_recovery"}
    assert by_number[29] == REQUIRED_KEYS
    assert by_number[50] == REQUIRED_KEYS | {"rest_recovery"}
    assert db_session.query(Task).filter(Task.user_id == user.id).count() == 75 * 6 + 14


def test_completing_all_required_tasks_completes_the_day(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)
    day = service.get_challenge_day(user, 1)
    service.ensure_tasks(user, day, is_pms_window=True)
    tasks = {t.key: t.id for t in service.get_tasks(day)}

    for key in REQUIRED_KEYS:
        service.update_task(user, tasks[key], TaskUpdate(completed=True))

    day = service.get_challenge_day(user, 1)
    assert day.is_completed is True
    assert day.completed_at is not None

    service.update_task(user, tasks["diet"], TaskUpdate(completed=False))

    day = service.get_challenge_day(user, 1)
    assert day.is_completed is False
    assert day.completed_at is None


def test_workout_variant_only_applies_to_second_workout(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)
    day = service.get_challenge_day(user, 1)
    service.ensure_tasks(user, day, is_pms_window=True)
    tasks = {t.key: t.id for t in service.get_tasks(day)}

    task = service.update_task(user, tasks["workout2"], TaskUpdate(variant="yoga"))
    assert task.variant == "yoga"
    assert task.display_title == "Yoga (30 min)"

    task = service.update_task(user, tasks["workout2"], TaskUpdate(variant="normal"))
    assert task.variant is None
    assert task.display_title == "Workout 2 (45 min)"

    with pytest.raises(ValueError):
        service.update_task(user, tasks["water"], TaskUpdate(variant="walk"))


def test_update_challenge_day_saves_log(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)

    day = service.update_challenge_day(user, 3, ChallengeDayUpdate(
        notes="Tough one", mood="Low", symptoms=["cramps", "fatigue", "cramps"],
    ))

    assert day.notes == "Tough one"
    assert day.mood == "Low"
    assert day.symptoms == ["cramps", "fatigue"]

    day = service.update_challenge_day(user, 3, ChallengeDayUpdate(mood=""))
    assert day.mood is None
    assert day.notes == "Tough one"

    assert service.update_challenge_day(user, 76, ChallengeDayUpdate(notes="x")) is None


def test_current_day_number(db_session, user):
    service = ChallengeService(db_session)
    service.ensure_challenge_days(user, today=START)

    assert service.get_current_day_number(user, START) == 1
    assert service.get_current_day_number(user, START + timedelta(days=9)) == 10
    assert service.get_current_day_number(user, START - timedelta(days=3)) == 1
    assert service.get_current_day_number(user, START + timedelta(days=100)) == 75


def test_settings_defaults_and_window_clamp(db_session, user):
    service = ChallengeService(db_session)

    settings = service.ensure_user_settings(user)
    assert settings.pms_safe_enabled is False
    assert settings.cycle_length == 28
    assert settings.pms_window_length == 7
    assert settings.cycle_day1_date is None

    settings = service.update_user_settings(
        user, UserSettingsUpdate(cycle_length=10, pms_window_length=14)
    )
    assert settings.pms_window_length == 10

    settings = service.update_user_settings(user, UserSettingsUpdate(cycle_day1_date=START))
    assert settings.cycle_day1_date == START
    settings = service.update_user_settings(user, UserSettingsUpdate(cycle_day1_date=None))
    assert settings.cycle_day1_date is None
