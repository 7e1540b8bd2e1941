from datetime import date, datetime

import pytest
import pytz

from apps.goals.domain.entities import GoalEntity, GoalStatus, MilestoneEntity
from apps.goals.domain.exceptions import InvariantViolation, ValidationFailed
from apps.goals.domain.services.progress import (
    apply_progress, apply_status_change, archive, check_goal_invariants, percent_complete,
    recompute_goal_progress, rounded_average,
)
from conftest import NOW

EARLIER = datetime(2026, 1, 5, 9, 30, tzinfo=pytz.UTC)


def goal(**kwargs):
    defaults = dict(id=1, user_id=1, title="Learn Polish", target_date=date(2026, 12, 31))
    defaults.update(kwargs)
    return GoalEntity(**defaults)


def milestones(done, total):
    return [
        MilestoneEntity(id=i, goal_id=1, title=f"M{i}", due_date=date(2026, 6, 1),
                        completed=i < done, completed_at=NOW if i < done else None)
        for i in range(total)
    ]


class TestPercentComplete:
    @pytest.mark.parametrize("done,total,expected", [
        (0, 0, 0),
        (0, 4, 0),
        (1, 4, 25),
        (2, 3, 67),
        (1, 3, 33),
        (1, 8, 13),
        (4, 4, 100),
    ])
    def test_rounds_half_up(self, done, total, expected):
        assert percent_complete(done, total) == expected

    def test_rounded_average(self):
        assert rounded_average([]) == 0
        assert rounded_average([50, 51]) == 51
        assert rounded_average([10, 20, 30]) == 20


class TestRecompute:
    def test_no_milestones_gives_zero(self):
        update = recompute_goal_progress(goal(), [], now=NOW)
        assert update.progress == 0
        assert update.status == GoalStatus.NOT_STARTED
        assert update.completed_at is None

    def test_first_completion_starts_goal(self):
        update = recompute_goal_progress(goal(), milestones(1, 4), now=NOW)
        assert update.progress == 25
        assert update.status == GoalStatus.IN_PROGRESS

    def test_all_done_completes_goal(self):
        update = recompute_goal_progress(goal(status=GoalStatus.IN_PROGRESS), milestones(3, 3), now=NOW)
        assert update.progress == 100
        assert update.status == GoalStatus.COMPLETED
        assert update.completed_at == NOW

    def test_completion_from_not_started(self):
        update = recompute_goal_progress(goal(), milestones(1, 1), now=NOW)
        assert update.status == GoalStatus.COMPLETED

    def test_existing_completed_at_is_kept(self):
        g = goal(status=GoalStatus.COMPLETED, progress=100, completed_at=EARLIER)
        update = recompute_goal_progress(g, milestones(2, 2), now=NOW)
        assert update.completed_at == EARLIER

    def test_reverts_completed_goal(self):
        g = goal(status=GoalStatus.COMPLETED, progress=100, completed_at=EARLIER)
        update = recompute_goal_progress(g, milestones(2, 3), now=NOW)
        assert update.progress == 67
        assert update.status == GoalStatus.IN_PROGRESS
        assert update.completed_at is None

    def test_completed_goal_without_milestones_reverts(self):
        g = goal(status=GoalStatus.COMPLETED, progress=100, completed_at=EARLIER)
        update = recompute_goal_progress(g, [], now=NOW)
        assert update.progress == 0
        assert update.status == GoalStatus.IN_PROGRESS

    def test_in_progress_stays_when_progress_drops_to_zero(self):
        update = recompute_goal_progress(goal(status=GoalStatus.IN_PROGRESS), milestones(0, 2), now=NOW)
        assert update.progress == 0
        assert update.status == GoalStatus.IN_PROGRESS

    def test_archived_goal_keeps_status(self):
        update = recompute_goal_progress(goal(status=GoalStatus.ARCHIVED), milestones(2, 2), now=NOW)
        assert update.progress == 100
        assert update.status == GoalStatus.ARCHIVED
        assert update.completed_at is None


class TestStatusChanges:
    def test_apply_progress_updates_goal(self):
        g = goal()
        apply_progress(g, recompute_goal_progress(g, milestones(2, 2), now=NOW))
        assert (g.progress, g.status, g.completed_at) == (100, GoalStatus.COMPLETED, NOW)

    def test_manual_completion_stamps_time(self):
        g = apply_status_change(goal(progress=40, status=GoalStatus.IN_PROGRESS), GoalStatus.COMPLETED, now=NOW)
        assert g.status == GoalStatus.COMPLETED
        assert g.completed_at == NOW

    def test_manual_reopen_clears_time(self):
        g = goal(status=GoalStatus.COMPLETED, progress=100, completed_at=EARLIER)
        apply_status_change(g, GoalStatus.IN_PROGRESS, now=NOW)
        assert g.completed_at is None

    def test_archiving_through_status_edit_is_rejected(self):
        with pytest.raises(ValidationFailed):
            apply_status_change(goal(), GoalStatus.ARCHIVED, now=NOW)

    def test_archive_clears_completion(self):
        g = archive(goal(status=GoalStatus.COMPLETED, progress=100, completed_at=EARLIER))
        assert g.status == GoalStatus.ARCHIVED
        assert g.completed_at is None


class TestInvariants:
    def test_progress_out_of_range(self):
        with pytest.raises(InvariantViolation):
            check_goal_invariants(goal(progress=101))

    def test_completed_below_hundred(self):
        with pytest.raises(InvariantViolation):
            check_goal_invariants(goal(status=GoalStatus.COMPLETED, progress=50, completed_at=NOW))

    def test_completed_at_without_completion(self):
        with pytest.raises(InvariantViolation):
            check_goal_invariants(goal(status=GoalStatus.IN_PROGRESS, progress=50, completed_at=NOW))

    def test_valid_goal_passes(self):
        check_goal_invariants(goal(status=GoalStatus.COMPLETED, progress=100, completed_at=NOW))
        check_goal_invariants(goal(status=GoalStatus.ARCHIVED, progress=30))
