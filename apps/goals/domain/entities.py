# apps/goals/domain/entities.py
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional
from enum import Enum


class GoalStatus(str, Enum):
    NOT_STARTED = 'not-started'
    IN_PROGRESS = 'in-progress'
    COMPLETED = 'completed'
    ARCHIVED = 'archived'


class GoalCategory(str, Enum):
    HEALTH = 'health'
    CAREER = 'career'
    EDUCATION = 'education'
    FINANCE = 'finance'
    PERSONAL = 'personal'
    OTHER = 'other'


class GoalPriority(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'


# Statusy liczone jako "aktywne" w statystykach i przypomnieniach
ACTIVE_STATUSES = (GoalStatus.NOT_STARTED, GoalStatus.IN_PROGRESS)


@dataclass
class GoalEntity:
    id: Optional[int]  # None przed pierwszym zapisem
    user_id: int
    title: str
    target_date: date
    description: str = ""
    category: GoalCategory = GoalCategory.OTHER
    priority: GoalPriority = GoalPriority.MEDIUM

    status: GoalStatus = GoalStatus.NOT_STARTED
    progress: int = 0  # 0-100, zawsze wyliczane z kamieni milowych
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def is_archived(self) -> bool:
        return self.status == GoalStatus.ARCHIVED


@dataclass
class MilestoneEntity:
    id: Optional[int]
    goal_id: int
    title: str
    due_date: date
    description: str = ""
    completed: bool = False
    completed_at: Optional[datetime] = None
    order: int = 0

    def toggle(self, now: datetime) -> None:
        """Przełącza ukończenie; completed_at zmienia się razem z flagą."""
        self.completed = not self.completed
        self.completed_at = now if self.completed else None


@dataclass
class ProgressEntryEntity:
    """Tygodniowy dziennik postępu. Nie wpływa na wyliczany progress celu."""
    id: Optional[int]
    user_id: int
    goal_id: int
    week_start_date: date
    week_end_date: date
    notes: str = ""
    progress_percentage: int = 0
    hours_spent: float = 0.0
    created_at: Optional[datetime] = None
