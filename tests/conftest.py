"""Wspólne fixtures: magazyn w pamięci ze stałym zegarem i usługi na nim zbudowane."""

from datetime import date, datetime

import pytest
import pytz

from apps.goals.adapters.memory_repositories import (
    InMemoryDatabase, InMemoryGoalRepository, InMemoryMilestoneRepository,
    InMemoryProgressEntryRepository,
)
from apps.goals.application.use_cases import (
    CreateGoalInput, CreateMilestoneInput, GoalService, MilestoneService, ProgressLogService,
)
from apps.reports.domain.services import AnalyticsService

# Środa, 18 marca 2026, południe UTC
NOW = datetime(2026, 3, 18, 12, 0, tzinfo=pytz.UTC)
TODAY = NOW.date()

OWNER = 1
STRANGER = 2


class FakeClock:
    """Zegar sterowany z testu."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def db(clock):
    return InMemoryDatabase(clock=clock)


@pytest.fixture
def goal_repo(db):
    return InMemoryGoalRepository(db)


@pytest.fixture
def milestone_repo(db):
    return InMemoryMilestoneRepository(db)


@pytest.fixture
def progress_repo(db):
    return InMemoryProgressEntryRepository(db)


@pytest.fixture
def goal_service(goal_repo, milestone_repo, progress_repo, clock):
    return GoalService(goal_repo, milestone_repo, progress_repo, clock=clock)


@pytest.fixture
def milestone_service(goal_repo, milestone_repo, clock):
    return MilestoneService(goal_repo, milestone_repo, clock=clock)


@pytest.fixture
def progress_service(goal_repo, progress_repo, clock):
    return ProgressLogService(goal_repo, progress_repo, clock=clock)


@pytest.fixture
def analytics_service(goal_repo, milestone_repo, clock):
    return AnalyticsService(goal_repo, milestone_repo, clock=clock)


@pytest.fixture
def make_goal(goal_service):
    def _make(title="Run a marathon", user_id=OWNER, target_date=date(2026, 12, 31), **kwargs):
        return goal_service.create_goal(
            CreateGoalInput(user_id=user_id, title=title, target_date=target_date, **kwargs)
        )
    return _make


@pytest.fixture
def add_milestones(milestone_service):
    def _add(goal, count, user_id=OWNER, due_date=date(2026, 6, 1)):
        return [
            milestone_service.create(user_id, CreateMilestoneInput(
                goal_id=goal.id, title=f"Step {i + 1}", due_date=due_date, order=i,
            ))
            for i in range(count)
        ]
    return _add
