from datetime import date

import pytest

from apps.goals.application.use_cases import LogProgressInput, UpdateProgressInput
from apps.goals.domain.exceptions import Forbidden, NotFound, ValidationFailed
from conftest import OWNER, STRANGER

WEEK_START = date(2026, 3, 15)
WEEK_END = date(2026, 3, 21)


def entry_input(goal, start=WEEK_START, end=WEEK_END, **kwargs):
    return LogProgressInput(goal_id=goal.id, week_start_date=start, week_end_date=end, **kwargs)


class TestLogProgress:
    def test_log_entry(self, make_goal, progress_service):
        goal = make_goal()
        entry = progress_service.log_progress(OWNER, entry_input(
            goal, notes="Two long runs", progress_percentage=30, hours_spent=4.5))
        assert entry.id is not None
        assert entry.user_id == OWNER
        assert entry.hours_spent == 4.5

    def test_second_entry_for_same_week_rejected(self, make_goal, progress_service, progress_repo):
        goal = make_goal()
        progress_service.log_progress(OWNER, entry_input(goal, notes="first"))

        with pytest.raises(ValidationFailed) as exc_info:
            progress_service.log_progress(OWNER, entry_input(goal, notes="second"))
        assert "already logged" in exc_info.value.messages[0]

        history = progress_repo.find_history(goal.id)
        assert [e.notes for e in history] == ["first"]

    def test_same_week_for_different_goal_allowed(self, make_goal, progress_service):
        progress_service.log_progress(OWNER, entry_input(make_goal()))
        progress_service.log_progress(OWNER, entry_input(make_goal(title="Other")))

    def test_does_not_change_goal_progress(self, make_goal, progress_service, goal_repo):
        goal = make_goal()
        progress_service.log_progress(OWNER, entry_input(goal, progress_percentage=80))
        assert goal_repo.get_by_id(goal.id).progress == 0

    def test_end_before_start_rejected(self, make_goal, progress_service):
        with pytest.raises(ValidationFailed):
            progress_service.log_progress(OWNER, entry_input(make_goal(), end=date(2026, 3, 14)))

    def test_foreign_goal(self, make_goal, progress_service):
        with pytest.raises(Forbidden):
            progress_service.log_progress(STRANGER, entry_input(make_goal()))


class TestHistoryAndWeek:
    def test_history_newest_first_with_limit(self, make_goal, progress_service):
        goal = make_goal()
        for day in (1, 8, 15):
            progress_service.log_progress(OWNER, entry_input(
                goal, start=date(2026, 3, day), end=date(2026, 3, day + 6)))

        history = progress_service.history(OWNER, goal.id, limit=2)
        assert [e.week_start_date for e in history] == [date(2026, 3, 15), date(2026, 3, 8)]

    def test_current_week_starts_on_sunday(self, make_goal, progress_service):
        goal = make_goal()
        progress_service.log_progress(OWNER, entry_input(goal))
        progress_service.log_progress(OWNER, entry_input(goal, start=date(2026, 3, 8), end=date(2026, 3, 14)))

        start, end, entries = progress_service.current_week(OWNER)
        assert (start, end) == (WEEK_START, WEEK_END)
        assert [e.week_start_date for e in entries] == [WEEK_START]


class TestUpdateAndDelete:
    def test_update_entry(self, make_goal, progress_service):
        entry = progress_service.log_progress(OWNER, entry_input(make_goal()))
        updated = progress_service.update(OWNER, entry.id, UpdateProgressInput(notes="Better", hours_spent=2.0))
        assert updated.notes == "Better"
        assert updated.hours_spent == 2.0
        assert updated.progress_percentage == 0

    def test_only_author_may_modify(self, make_goal, progress_service):
        entry = progress_service.log_progress(OWNER, entry_input(make_goal()))
        with pytest.raises(Forbidden):
            progress_service.update(STRANGER, entry.id, UpdateProgressInput(notes="x"))
        with pytest.raises(Forbidden):
            progress_service.delete(STRANGER, entry.id)

    def test_delete_frees_the_week(self, make_goal, progress_service):
        goal = make_goal()
        entry = progress_service.log_progress(OWNER, entry_input(goal))
        progress_service.delete(OWNER, entry.id)

        with pytest.raises(NotFound):
            progress_service.delete(OWNER, entry.id)
        progress_service.log_progress(OWNER, entry_input(goal))
