# apps/goals/adapters/memory_repositories.py
import copy
import threading
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from apps.goals.domain.entities import GoalEntity, GoalPriority, MilestoneEntity, ProgressEntryEntity
from apps.goals.domain.exceptions import ValidationFailed
from apps.goals.ports.repositories import (
    GoalFilterCriteria, IGoalRepository, IMilestoneRepository, IProgressEntryRepository,
)

PRIORITY_RANK = {GoalPriority.HIGH: 0, GoalPriority.MEDIUM: 1, GoalPriority.LOW: 2}


class InMemoryDatabase:
    """Wspólny magazyn dla repozytoriów w pamięci (testy, prototypy)."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.goals: Dict[int, GoalEntity] = {}
        self.milestones: Dict[int, MilestoneEntity] = {}
        self.progress_entries: Dict[int, ProgressEntryEntity] = {}
        self.clock = clock or (lambda: datetime.now(timezone.utc))

        self._ids = {'goal': 0, 'milestone': 0, 'progress': 0}
        self._guard = threading.Lock()
        self._goal_locks: Dict[int, threading.RLock] = {}

    def next_id(self, kind: str) -> int:
        with self._guard:
            self._ids[kind] += 1
            return self._ids[kind]

    def goal_lock(self, goal_id: int) -> threading.RLock:
        with self._guard:
            return self._goal_locks.setdefault(goal_id, threading.RLock())

    def snapshot(self, goal_id: int):
        """Kopia rekordów jednego celu: sam cel, jego kamienie milowe i wpisy postępu."""
        with self._guard:
            return copy.deepcopy((
                self.goals.get(goal_id),
                {k: m for k, m in self.milestones.items() if m.goal_id == goal_id},
                {k: e for k, e in self.progress_entries.items() if e.goal_id == goal_id},
            ))

    def restore(self, goal_id: int, state) -> None:
        """Przywraca rekordy celu; rekordy innych celów zostają nietknięte."""
        goal, milestones, entries = state
        with self._guard:
            if goal is None:
                self.goals.pop(goal_id, None)
            else:
                self.goals[goal_id] = goal
            for store, saved in ((self.milestones, milestones), (self.progress_entries, entries)):
                for key in [k for k, v in store.items() if v.goal_id == goal_id]:
                    del store[key]
                store.update(saved)


class InMemoryGoalRepository(IGoalRepository):
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def get_by_id(self, goal_id: int) -> Optional[GoalEntity]:
        goal = self.db.goals.get(goal_id)
        return copy.copy(goal) if goal else None

    def find_all_by_user(self, user_id: int,
                         criteria: Optional[GoalFilterCriteria] = None) -> List[GoalEntity]:
        criteria = criteria or GoalFilterCriteria()
        goals = [copy.copy(g) for g in self.db.goals.values() if g.user_id == user_id]

        if criteria.status:
            goals = [g for g in goals if g.status == criteria.status]
        if criteria.category:
            goals = [g for g in goals if g.category == criteria.category]
        if criteria.search:
            needle = criteria.search.lower()
            goals = [g for g in goals
                     if needle in g.title.lower() or needle in (g.description or "").lower()]

        if criteria.sort == 'dueDate':
            goals.sort(key=lambda g: g.target_date)
        elif criteria.sort == 'priority':
            goals.sort(key=lambda g: PRIORITY_RANK[g.priority])
        elif criteria.sort == 'progress':
            goals.sort(key=lambda g: g.progress, reverse=True)
        else:
            goals.sort(key=lambda g: (g.created_at, g.id), reverse=True)
        return goals

    def save(self, goal: GoalEntity) -> GoalEntity:
        if goal.id is None:
            goal.id = self.db.next_id('goal')
            goal.created_at = goal.created_at or self.db.clock()
        self.db.goals[goal.id] = copy.copy(goal)
        return copy.copy(goal)

    def delete(self, goal_id: int) -> None:
        self.db.goals.pop(goal_id, None)

    @contextmanager
    def lock(self, goal_id: int):
        with self.db.goal_lock(goal_id):
            state = self.db.snapshot(goal_id)
            try:
                yield
            except BaseException:
                self.db.restore(goal_id, state)
                raise


class InMemoryMilestoneRepository(IMilestoneRepository):
    def __init__(self, db: InMemoryDatabase):
        self.db = db

    def get_by_id(self, milestone_id: int) -> Optional[MilestoneEntity]:
        milestone = self.db.milestones.get(milestone_id)
        return copy.copy(milestone) if milestone else None

    def find_all_by_goal(self, goal_id: int) -> List[MilestoneEntity]:
        return self.find_all_by_goals([goal_id])

    def find_all_by_goals(self, goal_ids: Iterable[int]) -> List[MilestoneEntity]:
        ids = set(goal_ids)
        found = [copy.copy(m) for m in self.db.milestones.values() if m.goal_id in ids]
        found.sort(key=lambda m: (m.order, m.due_date, m.id))
        return found

    def save(self, milestone: MilestoneEntity) -> MilestoneEntity:
        if milestone.id is None:
            milestone.id = self.db.next_id('milestone')
        self.db.milestones[milestone.id] = copy.copy(milestone)
        return copy.copy(milestone)

    def delete(self, milestone_id: int) -> None:
        self.db.milestones.pop(milestone_id, None)

    def delete_all_by_goal(self, goal_id: int) -> int:
        ids = [m.id for m in self.db.milestones.values() if m.goal_id == goal_id]
        for milestone_id in ids:
            del self.db.milestones[milestone_id]
        return len(ids)


class InMemoryProgressEntryRepository(IProgressEntryRepository):
    def __init__(self, db: InMemoryDatabase):
        self.db = db
        self._unique = threading.Lock()

    def get_by_id(self, entry_id: int) -> Optional[ProgressEntryEntity]:
        entry = self.db.progress_entries.get(entry_id)
        return copy.copy(entry) if entry else None

    def add(self, entry: ProgressEntryEntity) -> ProgressEntryEntity:
        # Odpowiednik unikalnego indeksu (user, goal, week_start_date)
        with self._unique:
            key = (entry.user_id, entry.goal_id, entry.week_start_date)
            for existing in self.db.progress_entries.values():
                if (existing.user_id, existing.goal_id, existing.week_start_date) == key:
                    raise ValidationFailed(
                        "Progress already logged for this week. Use update instead."
                    )
            entry.id = self.db.next_id('progress')
            entry.created_at = entry.created_at or self.db.clock()
            self.db.progress_entries[entry.id] = copy.copy(entry)
        return copy.copy(entry)

    def save(self, entry: ProgressEntryEntity) -> ProgressEntryEntity:
        self.db.progress_entries[entry.id] = copy.copy(entry)
        return copy.copy(entry)

    def delete(self, entry_id: int) -> None:
        self.db.progress_entries.pop(entry_id, None)

    def delete_all_by_goal(self, goal_id: int) -> int:
        ids = [e.id for e in self.db.progress_entries.values() if e.goal_id == goal_id]
        for entry_id in ids:
            del self.db.progress_entries[entry_id]
        return len(ids)

    def find_history(self, goal_id: int, limit: int = 10) -> List[ProgressEntryEntity]:
        entries = [copy.copy(e) for e in self.db.progress_entries.values() if e.goal_id == goal_id]
        entries.sort(key=lambda e: e.week_start_date, reverse=True)
        return entries[:limit]

    def find_by_user_between(self, user_id: int, start: date, end: date) -> List[ProgressEntryEntity]:
        entries = [copy.copy(e) for e in self.db.progress_entries.values()
                   if e.user_id == user_id and start <= e.week_start_date <= end]
        entries.sort(key=lambda e: e.week_start_date)
        return entries
