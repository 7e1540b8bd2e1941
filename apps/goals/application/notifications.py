# apps/goals/application/notifications.py
import logging
from datetime import datetime
from typing import Callable, Iterable

from django.utils import timezone

from apps.goals.domain.services.notifications import due_milestone_reminders, weekly_digest_stats
from apps.goals.ports.notifier import INotifier, Recipient
from apps.goals.ports.repositories import IGoalRepository, IMilestoneRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Wywoływany przez zewnętrzny harmonogram (cron -> management command).
    Sam nie planuje niczego; liczy payloady i przekazuje je do INotifier.
    """

    def __init__(self, goals: IGoalRepository, milestones: IMilestoneRepository,
                 notifier: INotifier, clock: Callable[[], datetime] = timezone.now):
        self.goals = goals
        self.milestones = milestones
        self.notifier = notifier
        self.clock = clock

    def send_milestone_reminders(self, recipients: Iterable[Recipient], days: int = 3) -> int:
        """Zwraca liczbę wysłanych przypomnień."""
        now = self.clock()
        sent = 0
        for recipient in recipients:
            goals = self.goals.find_all_by_user(recipient.user_id)
            milestones = self.milestones.find_all_by_goals([g.id for g in goals])

            payload = due_milestone_reminders(goals, milestones, now=now, days=days)
            if not payload:
                continue

            self.notifier.send_milestone_reminder(recipient, payload)
            sent += 1

        logger.info("Milestone reminders sent: %s", sent)
        return sent

    def send_weekly_digests(self, recipients: Iterable[Recipient]) -> int:
        now = self.clock()
        sent = 0
        for recipient in recipients:
            goals = self.goals.find_all_by_user(recipient.user_id)
            milestones = self.milestones.find_all_by_goals([g.id for g in goals])

            self.notifier.send_weekly_digest(recipient, weekly_digest_stats(goals, milestones, now=now))
            sent += 1

        logger.info("Weekly digests sent: %s", sent)
        return sent
