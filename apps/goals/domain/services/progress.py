# apps/goals/domain/services/progress.py
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from apps.goals.domain.entities import GoalEntity, GoalStatus, MilestoneEntity
from apps.goals.domain.exceptions import InvariantViolation, ValidationFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProgressUpdate:
    progress: int
    status: GoalStatus
    completed_at: Optional[datetime]


def percent_complete(completed: int, total: int) -> int:
    """round(100 * completed / total) z zaokrągleniem połówek w górę (bez floatów)."""
    if total == 0:
        return 0
    return (200 * completed + total) // (2 * total)


def rounded_average(values: Iterable[int]) -> int:
    """Średnia liczb całkowitych zaokrąglona połówkami w górę; 0 dla pustej listy."""
    values = list(values)
    if not values:
        return 0
    return (2 * sum(values) + len(values)) // (2 * len(values))


def recompute_goal_progress(goal: GoalEntity, milestones: Iterable[MilestoneEntity],
                            now: Optional[datetime] = None) -> ProgressUpdate:
    """
    Wylicza nowy progress celu z pełnego zbioru jego kamieni milowych
    i stosuje automatyczne przejścia statusu (A: ukończenie, B: start, C: cofnięcie).
    Nic nie zapisuje - zapis należy do wywołującego.
    """
    now = now or datetime.now(timezone.utc)
    milestones = list(milestones)

    total = len(milestones)
    done = sum(1 for m in milestones if m.completed)
    progress = percent_complete(done, total)

    status = goal.status
    completed_at = goal.completed_at

    # Zarchiwizowany cel nie podlega automatycznym przejściom
    if status == GoalStatus.ARCHIVED:
        return ProgressUpdate(progress, status, completed_at)

    if progress == 100 and status != GoalStatus.COMPLETED:
        status = GoalStatus.COMPLETED
        completed_at = completed_at or now
    elif progress < 100 and status == GoalStatus.COMPLETED:
        status = GoalStatus.IN_PROGRESS
        completed_at = None

    if progress > 0 and status == GoalStatus.NOT_STARTED:
        status = GoalStatus.IN_PROGRESS

    return ProgressUpdate(progress, status, completed_at)


def apply_progress(goal: GoalEntity, update: ProgressUpdate) -> GoalEntity:
    if update.status != goal.status:
        logger.info("Goal %s: status %s -> %s (progress %s%%)",
                    goal.id, goal.status.value, update.status.value, update.progress)

    goal.progress = update.progress
    goal.status = update.status
    goal.completed_at = update.completed_at
    check_goal_invariants(goal)
    return goal


def apply_status_change(goal: GoalEntity, status: GoalStatus,
                        now: Optional[datetime] = None) -> GoalEntity:
    """
    Ręczna zmiana statusu przez użytkownika. Ma pierwszeństwo w tym żądaniu;
    kolejna zmiana kamieni milowych znów zastosuje reguły automatyczne.
    """
    if status == GoalStatus.ARCHIVED:
        raise ValidationFailed("Use the archive action to archive a goal")

    now = now or datetime.now(timezone.utc)
    goal.status = status
    if status == GoalStatus.COMPLETED:
        goal.completed_at = goal.completed_at or now
    else:
        goal.completed_at = None
    return goal


def archive(goal: GoalEntity) -> GoalEntity:
    goal.status = GoalStatus.ARCHIVED
    goal.completed_at = None
    return goal


def check_goal_invariants(goal: GoalEntity) -> None:
    """Sprawdzane po przeliczeniu sterowanym kamieniami milowymi, przed zapisem."""
    if not 0 <= goal.progress <= 100:
        raise InvariantViolation(f"Goal {goal.id}: progress {goal.progress} outside 0-100")

    if goal.status == GoalStatus.COMPLETED and goal.progress < 100:
        raise InvariantViolation(
            f"Goal {goal.id}: completed with progress {goal.progress}"
        )

    if goal.status != GoalStatus.ARCHIVED and \
            (goal.status == GoalStatus.COMPLETED) != (goal.completed_at is not None):
        raise InvariantViolation(f"Goal {goal.id}: completed_at out of sync with status")
