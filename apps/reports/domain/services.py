# apps/reports/domain/services.py
from datetime import datetime, timedelta
from typing import Callable, Dict, Iterable, List, Optional

from dateutil.relativedelta import relativedelta
from django.utils import timezone

from apps.goals.domain.entities import (
    GoalCategory, GoalEntity, GoalPriority, GoalStatus, MilestoneEntity,
)
from apps.goals.domain.exceptions import ValidationFailed
from apps.goals.domain.services.progress import percent_complete, rounded_average
from apps.goals.domain.services.streak import compute_streak, to_utc_day
from apps.goals.ports.repositories import IGoalRepository, IMilestoneRepository


# period -> (okno wstecz w dniach, format klucza kubełka)
TREND_PERIODS = {
    'day': (7, '%Y-%m-%d'),
    'week': (28, '%Y-W%U'),
    'month': (365, '%Y-%m'),
}


def category_breakdown(goals: Iterable[GoalEntity]) -> List[Dict]:
    """Podział celów na kategorie. Każda kategoria występuje, także pusta."""
    buckets = {c: [] for c in GoalCategory}
    for goal in goals:
        buckets[goal.category].append(goal)

    rows = []
    for category, items in buckets.items():
        rows.append({
            'category': category.value,
            'total': len(items),
            'active': sum(1 for g in items if g.is_active()),
            'completed': sum(1 for g in items if g.status == GoalStatus.COMPLETED),
            'avg_progress': rounded_average(g.progress for g in items),
        })

    # sort() jest stabilny - remisy zostają w kolejności enuma
    rows.sort(key=lambda row: row['total'], reverse=True)
    return rows


def monthly_stats(goals: Iterable[GoalEntity], months: int = 6,
                  now: Optional[datetime] = None) -> List[Dict]:
    """Utworzone i ukończone cele w ostatnich `months` miesiącach (od najstarszego)."""
    now = now or timezone.now()
    goals = list(goals)
    current = to_utc_day(now).replace(day=1)

    created = {}
    completed = {}
    for goal in goals:
        if goal.created_at:
            key = to_utc_day(goal.created_at).strftime('%Y-%m')
            created[key] = created.get(key, 0) + 1
        if goal.completed_at:
            key = to_utc_day(goal.completed_at).strftime('%Y-%m')
            completed[key] = completed.get(key, 0) + 1

    stats = []
    for offset in range(months - 1, -1, -1):
        month_start = current - relativedelta(months=offset)
        key = month_start.strftime('%Y-%m')
        stats.append({
            'month': key,
            'label': month_start.strftime('%b %Y'),
            'goals_created': created.get(key, 0),
            'goals_completed': completed.get(key, 0),
        })
    return stats


def _bucket(timestamps: Iterable[datetime], since: datetime, fmt: str) -> List[Dict]:
    counts = {}
    for ts in timestamps:
        if ts is None or ts < since:
            continue
        key = to_utc_day(ts).strftime(fmt)
        counts[key] = counts.get(key, 0) + 1
    return [{'bucket': key, 'count': counts[key]} for key in sorted(counts)]


def completion_trend(goals: Iterable[GoalEntity], milestones: Iterable[MilestoneEntity],
                     period: str = 'week', now: Optional[datetime] = None) -> Dict[str, List[Dict]]:
    if period not in TREND_PERIODS:
        raise ValidationFailed(f"Unknown trend period: {period}")

    now = now or timezone.now()
    window_days, fmt = TREND_PERIODS[period]
    since = now - timedelta(days=window_days)

    return {
        'period': period,
        'goals': _bucket(
            (g.completed_at for g in goals if g.status == GoalStatus.COMPLETED), since, fmt
        ),
        'milestones': _bucket(
            (m.completed_at for m in milestones if m.completed), since, fmt
        ),
    }


class AnalyticsService:
    """Widoki analityczne liczone na żądanie z bieżącego stanu (bez cache)."""

    def __init__(self, goals: IGoalRepository, milestones: IMilestoneRepository,
                 clock: Callable[[], datetime] = timezone.now):
        self.goals = goals
        self.milestones = milestones
        self.clock = clock

    def _load(self, user_id: int):
        goals = self.goals.find_all_by_user(user_id)
        milestones = self.milestones.find_all_by_goals([g.id for g in goals])
        return goals, milestones

    def get_category_breakdown(self, user_id: int) -> List[Dict]:
        goals, _ = self._load(user_id)
        return category_breakdown(goals)

    def get_monthly_stats(self, user_id: int, months: int = 6) -> List[Dict]:
        goals, _ = self._load(user_id)
        return monthly_stats(goals, months=months, now=self.clock())

    def get_completion_trend(self, user_id: int, period: str = 'week') -> Dict[str, List[Dict]]:
        goals, milestones = self._load(user_id)
        return completion_trend(goals, milestones, period=period, now=self.clock())

    def get_streak(self, user_id: int) -> int:
        _, milestones = self._load(user_id)
        return compute_streak(
            (m.completed_at for m in milestones if m.completed), now=self.clock()
        )

    def get_overview(self, user_id: int, upcoming_days: int = 7) -> Dict:
        """Zbiorcze statystyki dla dashboardu."""
        now = self.clock()
        goals, milestones = self._load(user_id)

        active = [g for g in goals if g.is_active()]
        completed = [g for g in goals if g.status == GoalStatus.COMPLETED]
        done_milestones = [m for m in milestones if m.completed]

        month_start = to_utc_day(now).replace(day=1)
        today = to_utc_day(now)
        active_ids = {g.id for g in active}
        upcoming = [
            m for m in milestones
            if m.goal_id in active_ids and not m.completed
            and today <= m.due_date <= today + timedelta(days=upcoming_days)
        ]

        return {
            'total_goals': len(goals),
            'active_goals': len(active),
            'completed_goals': len(completed),
            'archived_goals': sum(1 for g in goals if g.is_archived()),
            'total_milestones': len(milestones),
            'completed_milestones': len(done_milestones),
            'completion_rate': percent_complete(len(completed), len(goals)),
            'avg_progress': rounded_average(g.progress for g in active),
            'current_streak': compute_streak((m.completed_at for m in done_milestones), now=now),
            'goals_completed_this_month': sum(
                1 for g in completed if g.completed_at and to_utc_day(g.completed_at) >= month_start
            ),
            'upcoming_milestones': len(upcoming),
            'priority_breakdown': {
                p.value: sum(1 for g in goals if g.priority == p) for p in GoalPriority
            },
        }
