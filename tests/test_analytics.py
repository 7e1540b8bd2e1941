from datetime import date, datetime, timedelta

import pytest
import pytz

from apps.goals.application.use_cases import UpdateGoalInput
from apps.goals.domain.entities import GoalCategory, GoalEntity, GoalPriority, GoalStatus, MilestoneEntity
from apps.goals.domain.exceptions import ValidationFailed
from apps.reports.domain.services import category_breakdown, completion_trend, monthly_stats
from conftest import NOW, OWNER, STRANGER, TODAY


def goal(id, category=GoalCategory.OTHER, status=GoalStatus.IN_PROGRESS, progress=0, **kwargs):
    return GoalEntity(id=id, user_id=OWNER, title=f"G{id}", target_date=date(2026, 12, 31),
                      category=category, status=status, progress=progress, **kwargs)


class TestCategoryBreakdown:
    def test_every_category_reported(self):
        rows = category_breakdown([])
        assert {r['category'] for r in rows} == {c.value for c in GoalCategory}
        assert all(r['avg_progress'] == 0 and r['total'] == 0 for r in rows)

    def test_counts_and_average(self):
        rows = category_breakdown([
            goal(1, GoalCategory.HEALTH, progress=50),
            goal(2, GoalCategory.HEALTH, progress=25),
            goal(3, GoalCategory.HEALTH, GoalStatus.COMPLETED, progress=100, completed_at=NOW),
            goal(4, GoalCategory.CAREER, GoalStatus.ARCHIVED, progress=10),
        ])
        health = rows[0]
        assert health['category'] == 'health'
        assert (health['total'], health['active'], health['completed']) == (3, 2, 1)
        assert health['avg_progress'] == 58

        career = rows[1]
        assert (career['category'], career['total'], career['active']) == ('career', 1, 0)


class TestMonthlyStats:
    def test_months_oldest_first_with_counts(self):
        goals = [
            goal(1, created_at=datetime(2026, 3, 2, tzinfo=pytz.UTC)),
            goal(2, created_at=datetime(2026, 1, 20, tzinfo=pytz.UTC),
                 status=GoalStatus.COMPLETED, progress=100,
                 completed_at=datetime(2026, 3, 1, tzinfo=pytz.UTC)),
            goal(3, created_at=datetime(2025, 8, 1, tzinfo=pytz.UTC)),
        ]
        stats = monthly_stats(goals, months=3, now=NOW)
        assert [s['month'] for s in stats] == ['2026-01', '2026-02', '2026-03']
        assert stats[0]['goals_created'] == 1
        assert stats[1] == {'month': '2026-02', 'label': 'Feb 2026', 'goals_created': 0, 'goals_completed': 0}
        assert (stats[2]['goals_created'], stats[2]['goals_completed']) == (1, 1)

    def test_crosses_year_boundary(self):
        stats = monthly_stats([], months=6, now=NOW)
        assert stats[0]['month'] == '2025-10'
        assert len(stats) == 6


class TestCompletionTrend:
    def test_daily_buckets_within_window(self):
        milestones = [
            MilestoneEntity(id=1, goal_id=1, title="a", due_date=TODAY, completed=True, completed_at=NOW),
            MilestoneEntity(id=2, goal_id=1, title="b", due_date=TODAY, completed=True,
                            completed_at=NOW - timedelta(hours=1)),
            MilestoneEntity(id=3, goal_id=1, title="c", due_date=TODAY, completed=True,
                            completed_at=NOW - timedelta(days=2)),
            MilestoneEntity(id=4, goal_id=1, title="d", due_date=TODAY, completed=True,
                            completed_at=NOW - timedelta(days=30)),
            MilestoneEntity(id=5, goal_id=1, title="e", due_date=TODAY),
        ]
        trend = completion_trend([], milestones, period='day', now=NOW)
        assert trend['period'] == 'day'
        assert trend['goals'] == []
        assert trend['milestones'] == [
            {'bucket': '2026-03-16', 'count': 1},
            {'bucket': '2026-03-18', 'count': 2},
        ]

    def test_unknown_period(self):
        with pytest.raises(ValidationFailed):
            completion_trend([], [], period='year', now=NOW)


class TestAnalyticsService:
    def test_overview(self, make_goal, add_milestones, milestone_service, goal_service, analytics_service):
        running = make_goal(priority=GoalPriority.HIGH)
        done = make_goal(title="Done")
        make_goal(title="Idle")
        archived = make_goal(title="Shelved")
        make_goal(title="Not mine", user_id=STRANGER)

        m1, _ = add_milestones(running, 2, due_date=TODAY + timedelta(days=3))
        (d1,) = add_milestones(done, 1)
        milestone_service.toggle(OWNER, m1.id)
        milestone_service.toggle(OWNER, d1.id)
        goal_service.archive_goal(OWNER, archived.id)

        overview = analytics_service.get_overview(OWNER)
        assert overview['total_goals'] == 4
        assert overview['active_goals'] == 2
        assert overview['completed_goals'] == 1
        assert overview['archived_goals'] == 1
        assert overview['total_milestones'] == 3
        assert overview['completed_milestones'] == 2
        assert overview['completion_rate'] == 25
        assert overview['avg_progress'] == 25
        assert overview['current_streak'] == 1
        assert overview['goals_completed_this_month'] == 1
        assert overview['upcoming_milestones'] == 1
        assert overview['priority_breakdown'] == {'low': 0, 'medium': 3, 'high': 1}

    def test_streak_from_milestones(self, make_goal, add_milestones, milestone_service,
                                    analytics_service, clock):
        goal = make_goal()
        m1, m2, _ = add_milestones(goal, 3)
        clock.now = NOW - timedelta(days=1)
        milestone_service.toggle(OWNER, m1.id)
        clock.now = NOW
        milestone_service.toggle(OWNER, m2.id)
        assert analytics_service.get_streak(OWNER) == 2

    def test_manual_completion_counts_in_trend(self, make_goal, goal_service, analytics_service):
        goal = make_goal()
        goal_service.update_goal(OWNER, goal.id, UpdateGoalInput(status=GoalStatus.COMPLETED))
        trend = analytics_service.get_completion_trend(OWNER, period='month')
        assert trend['goals'] == [{'bucket': '2026-03', 'count': 1}]
