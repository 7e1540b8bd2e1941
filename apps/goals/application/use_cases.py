# apps/goals/application/use_cases.py
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional, Tuple

from django.utils import timezone

from apps.goals.domain.entities import (
    GoalCategory, GoalEntity, GoalPriority, GoalStatus, MilestoneEntity, ProgressEntryEntity,
)
from apps.goals.domain.exceptions import Forbidden, NotFound, ValidationFailed
from apps.goals.domain.services.progress import (
    apply_progress, apply_status_change, archive, recompute_goal_progress,
)
from apps.goals.domain.services.streak import to_utc_day
from apps.goals.ports.repositories import (
    GoalFilterCriteria, IGoalRepository, IMilestoneRepository, IProgressEntryRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class CreateGoalInput:
    user_id: int
    title: str
    target_date: date
    description: str = ""
    category: GoalCategory = GoalCategory.OTHER
    priority: GoalPriority = GoalPriority.MEDIUM


@dataclass
class UpdateGoalInput:
    # None = pole nie zmienia się
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[GoalCategory] = None
    priority: Optional[GoalPriority] = None
    target_date: Optional[date] = None
    status: Optional[GoalStatus] = None


@dataclass
class CreateMilestoneInput:
    goal_id: int
    title: str
    due_date: date
    description: str = ""
    order: int = 0


@dataclass
class UpdateMilestoneInput:
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[date] = None
    order: Optional[int] = None


@dataclass
class LogProgressInput:
    goal_id: int
    week_start_date: date
    week_end_date: date
    notes: str = ""
    progress_percentage: int = 0
    hours_spent: float = 0.0


@dataclass
class UpdateProgressInput:
    notes: Optional[str] = None
    progress_percentage: Optional[int] = None
    hours_spent: Optional[float] = None


@dataclass
class GoalDetail:
    goal: GoalEntity
    milestones: List[MilestoneEntity] = field(default_factory=list)

    @property
    def completed_milestones(self) -> int:
        return sum(1 for m in self.milestones if m.completed)


def get_owned_goal(goals: IGoalRepository, user_id: int, goal_id: int) -> GoalEntity:
    goal = goals.get_by_id(goal_id)
    if goal is None:
        raise NotFound("Goal not found")
    if goal.user_id != user_id:
        raise Forbidden("Not authorized to access this goal")
    return goal


class GoalService:
    def __init__(self, goals: IGoalRepository, milestones: IMilestoneRepository,
                 progress_entries: IProgressEntryRepository,
                 clock: Callable[[], datetime] = timezone.now):
        self.goals = goals
        self.milestones = milestones
        self.progress_entries = progress_entries
        self.clock = clock

    def create_goal(self, input_dto: CreateGoalInput) -> GoalEntity:
        if not input_dto.title or not input_dto.title.strip():
            raise ValidationFailed("Goal title is required")

        goal = GoalEntity(
            id=None,
            user_id=input_dto.user_id,
            title=input_dto.title.strip(),
            description=input_dto.description,
            category=input_dto.category,
            priority=input_dto.priority,
            target_date=input_dto.target_date,
            status=GoalStatus.NOT_STARTED,
            progress=0,
        )
        return self.goals.save(goal)

    def get_goal(self, user_id: int, goal_id: int) -> GoalDetail:
        goal = get_owned_goal(self.goals, user_id, goal_id)
        return GoalDetail(goal, self.milestones.find_all_by_goal(goal.id))

    def list_goals(self, user_id: int, criteria: Optional[GoalFilterCriteria] = None) -> List[GoalDetail]:
        goals = self.goals.find_all_by_user(user_id, criteria)

        by_goal = {g.id: [] for g in goals}
        for milestone in self.milestones.find_all_by_goals(by_goal):
            by_goal[milestone.goal_id].append(milestone)

        return [GoalDetail(g, by_goal[g.id]) for g in goals]

    def update_goal(self, user_id: int, goal_id: int, input_dto: UpdateGoalInput) -> GoalEntity:
        """
        Edycja pól celu. progress nie jest tu przeliczany (nie zmieniły się kamienie milowe);
        jawna zmiana statusu ma pierwszeństwo w tym żądaniu.
        """
        with self.goals.lock(goal_id):
            goal = get_owned_goal(self.goals, user_id, goal_id)

            if input_dto.title is not None:
                if not input_dto.title.strip():
                    raise ValidationFailed("Goal title cannot be empty")
                goal.title = input_dto.title.strip()
            if input_dto.description is not None:
                goal.description = input_dto.description
            if input_dto.category is not None:
                goal.category = input_dto.category
            if input_dto.priority is not None:
                goal.priority = input_dto.priority
            if input_dto.target_date is not None:
                goal.target_date = input_dto.target_date
            if input_dto.status is not None and input_dto.status != goal.status:
                logger.info("Goal %s: user changed status %s -> %s",
                            goal.id, goal.status.value, input_dto.status.value)
                apply_status_change(goal, input_dto.status, now=self.clock())

            return self.goals.save(goal)

    def archive_goal(self, user_id: int, goal_id: int) -> GoalEntity:
        with self.goals.lock(goal_id):
            goal = get_owned_goal(self.goals, user_id, goal_id)
            archive(goal)
            return self.goals.save(goal)

    def delete_goal(self, user_id: int, goal_id: int) -> None:
        with self.goals.lock(goal_id):
            get_owned_goal(self.goals, user_id, goal_id)

            removed = self.milestones.delete_all_by_goal(goal_id)
            self.progress_entries.delete_all_by_goal(goal_id)
            self.goals.delete(goal_id)

        logger.info("Goal %s deleted with %s milestones", goal_id, removed)


class MilestoneService:
    def __init__(self, goals: IGoalRepository, milestones: IMilestoneRepository,
                 clock: Callable[[], datetime] = timezone.now):
        self.goals = goals
        self.milestones = milestones
        self.clock = clock

    def list_for_goal(self, user_id: int, goal_id: int) -> List[MilestoneEntity]:
        goal = get_owned_goal(self.goals, user_id, goal_id)
        return self.milestones.find_all_by_goal(goal.id)

    def upcoming(self, user_id: int, days: int = 7) -> List[Tuple[MilestoneEntity, GoalEntity]]:
        """Nieukończone kamienie milowe aktywnych celów z terminem w ciągu `days` dni."""
        goals = {g.id: g for g in self.goals.find_all_by_user(user_id) if g.is_active()}
        today = to_utc_day(self.clock())
        horizon = today + timedelta(days=days)

        found = [
            (m, goals[m.goal_id]) for m in self.milestones.find_all_by_goals(goals)
            if not m.completed and today <= m.due_date <= horizon
        ]
        found.sort(key=lambda pair: pair[0].due_date)
        return found

    def create(self, user_id: int, input_dto: CreateMilestoneInput) -> MilestoneEntity:
        with self.goals.lock(input_dto.goal_id):
            goal = get_owned_goal(self.goals, user_id, input_dto.goal_id)
            if not input_dto.title or not input_dto.title.strip():
                raise ValidationFailed("Milestone title is required")
            self._validate_due_date(goal, input_dto.due_date)

            milestone = self.milestones.save(MilestoneEntity(
                id=None,
                goal_id=goal.id,
                title=input_dto.title.strip(),
                description=input_dto.description,
                due_date=input_dto.due_date,
                order=input_dto.order or 0,
            ))
            self._recalculate(goal)
            return milestone

    def update(self, user_id: int, milestone_id: int, input_dto: UpdateMilestoneInput) -> MilestoneEntity:
        goal_id = self._goal_id_of(milestone_id)
        with self.goals.lock(goal_id):
            milestone, goal = self._get_owned_milestone(user_id, milestone_id)

            if input_dto.title is not None:
                if not input_dto.title.strip():
                    raise ValidationFailed("Milestone title cannot be empty")
                milestone.title = input_dto.title.strip()
            if input_dto.description is not None:
                milestone.description = input_dto.description
            if input_dto.due_date is not None:
                self._validate_due_date(goal, input_dto.due_date)
                milestone.due_date = input_dto.due_date
            if input_dto.order is not None:
                milestone.order = input_dto.order

            milestone = self.milestones.save(milestone)
            self._recalculate(goal)
            return milestone

    def toggle(self, user_id: int, milestone_id: int) -> MilestoneEntity:
        goal_id = self._goal_id_of(milestone_id)
        with self.goals.lock(goal_id):
            milestone, goal = self._get_owned_milestone(user_id, milestone_id)

            milestone.toggle(now=self.clock())
            milestone = self.milestones.save(milestone)
            self._recalculate(goal)
            return milestone

    def delete(self, user_id: int, milestone_id: int) -> None:
        goal_id = self._goal_id_of(milestone_id)
        with self.goals.lock(goal_id):
            _, goal = self._get_owned_milestone(user_id, milestone_id)

            self.milestones.delete(milestone_id)
            self._recalculate(goal)

    def _recalculate(self, goal: GoalEntity) -> GoalEntity:
        """Przelicz postęp celu po zmianie kamienia milowego i zapisz go."""
        milestones = self.milestones.find_all_by_goal(goal.id)
        update = recompute_goal_progress(goal, milestones, now=self.clock())
        apply_progress(goal, update)
        return self.goals.save(goal)

    def _goal_id_of(self, milestone_id: int) -> int:
        milestone = self.milestones.get_by_id(milestone_id)
        if milestone is None:
            raise NotFound("Milestone not found")
        return milestone.goal_id

    def _get_owned_milestone(self, user_id: int, milestone_id: int) -> Tuple[MilestoneEntity, GoalEntity]:
        # Ponowny odczyt już pod blokadą celu
        milestone = self.milestones.get_by_id(milestone_id)
        if milestone is None:
            raise NotFound("Milestone not found")
        goal = self.goals.get_by_id(milestone.goal_id)
        if goal is None:
            raise NotFound("Goal not found")
        if goal.user_id != user_id:
            raise Forbidden("Not authorized to modify this milestone")
        return milestone, goal

    @staticmethod
    def _validate_due_date(goal: GoalEntity, due_date: date) -> None:
        if due_date > goal.target_date:
            raise ValidationFailed("Milestone due date cannot be after the goal target date")


class ProgressLogService:
    def __init__(self, goals: IGoalRepository, progress_entries: IProgressEntryRepository,
                 clock: Callable[[], datetime] = timezone.now):
        self.goals = goals
        self.progress_entries = progress_entries
        self.clock = clock

    def log_progress(self, user_id: int, input_dto: LogProgressInput) -> ProgressEntryEntity:
        goal = get_owned_goal(self.goals, user_id, input_dto.goal_id)
        if input_dto.week_end_date < input_dto.week_start_date:
            raise ValidationFailed("Week end date cannot be before week start date")

        entry = ProgressEntryEntity(
            id=None,
            user_id=user_id,
            goal_id=goal.id,
            week_start_date=input_dto.week_start_date,
            week_end_date=input_dto.week_end_date,
            notes=input_dto.notes,
            progress_percentage=input_dto.progress_percentage,
            hours_spent=input_dto.hours_spent,
        )
        try:
            return self.progress_entries.add(entry)
        except ValidationFailed:
            logger.warning("Duplicate progress entry rejected: user %s, goal %s, week %s",
                           user_id, goal.id, input_dto.week_start_date)
            raise

    def history(self, user_id: int, goal_id: int, limit: int = 10) -> List[ProgressEntryEntity]:
        goal = get_owned_goal(self.goals, user_id, goal_id)
        return self.progress_entries.find_history(goal.id, limit=limit)

    def current_week(self, user_id: int) -> Tuple[date, date, List[ProgressEntryEntity]]:
        """Wpisy z bieżącego tygodnia (tydzień zaczyna się w niedzielę)."""
        today = to_utc_day(self.clock())
        week_start = today - timedelta(days=(today.weekday() + 1) % 7)
        week_end = week_start + timedelta(days=6)
        return week_start, week_end, self.progress_entries.find_by_user_between(user_id, week_start, week_end)

    def update(self, user_id: int, entry_id: int, input_dto: UpdateProgressInput) -> ProgressEntryEntity:
        entry = self._get_owned_entry(user_id, entry_id)

        if input_dto.notes is not None:
            entry.notes = input_dto.notes
        if input_dto.progress_percentage is not None:
            entry.progress_percentage = input_dto.progress_percentage
        if input_dto.hours_spent is not None:
            entry.hours_spent = input_dto.hours_spent

        return self.progress_entries.save(entry)

    def delete(self, user_id: int, entry_id: int) -> None:
        self._get_owned_entry(user_id, entry_id)
        self.progress_entries.delete(entry_id)

    def _get_owned_entry(self, user_id: int, entry_id: int) -> ProgressEntryEntity:
        entry = self.progress_entries.get_by_id(entry_id)
        if entry is None:
            raise NotFound("Progress entry not found")
        if entry.user_id != user_id:
            raise Forbidden("Not authorized to modify this progress entry")
        return entry
