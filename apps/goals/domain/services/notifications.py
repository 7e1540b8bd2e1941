# apps/goals/domain/services/notifications.py
from datetime import datetime, timedelta
from typing import Dict, Iterable, List

from apps.goals.domain.entities import GoalEntity, MilestoneEntity
from apps.goals.domain.services.progress import rounded_average
from apps.goals.domain.services.streak import to_utc_day


def due_milestone_reminders(goals: Iterable[GoalEntity], milestones: Iterable[MilestoneEntity],
                            now: datetime, days: int = 3) -> List[Dict]:
    """
    Payload przypomnienia: nieukończone kamienie milowe aktywnych celów
    z terminem w oknie [dziś, dziś + days].
    """
    active = {g.id: g for g in goals if g.is_active()}
    today = to_utc_day(now)
    horizon = today + timedelta(days=days)

    due = [
        m for m in milestones
        if m.goal_id in active and not m.completed and today <= m.due_date <= horizon
    ]
    due.sort(key=lambda m: (m.due_date, m.order))

    return [
        {'title': m.title, 'due_date': m.due_date, 'goal_title': active[m.goal_id].title}
        for m in due
    ]


def weekly_digest_stats(goals: Iterable[GoalEntity], milestones: Iterable[MilestoneEntity],
                        now: datetime) -> Dict:
    """Statystyki z ostatnich 7 dni do cotygodniowego podsumowania."""
    goals = list(goals)
    week_ago = now - timedelta(days=7)

    milestones_completed = sum(
        1 for m in milestones
        if m.completed and m.completed_at and m.completed_at >= week_ago
    )

    active_goals = [g for g in goals if g.is_active()]
    total_progress = rounded_average(g.progress for g in active_goals)

    return {
        'milestones_completed': milestones_completed,
        'active_goals': len(active_goals),
        'total_progress': total_progress,
    }
