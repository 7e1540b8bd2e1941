# apps/goals/adapters/email_notifier.py
import logging
from typing import Dict, List

from django.conf import settings
from django.core.mail import send_mail

from apps.goals.ports.notifier import INotifier, Recipient

logger = logging.getLogger(__name__)


class EmailNotifier(INotifier):
    """Dostarczanie powiadomień mailem przez backend pocztowy Django."""

    def send_milestone_reminder(self, recipient: Recipient, milestones: List[Dict]) -> None:
        lines = [f"Hi {recipient.name or recipient.email},", "",
                 "These milestones are coming up soon:", ""]
        for item in milestones:
            lines.append(f"- {item['title']} ({item['goal_title']}), due {item['due_date']:%Y-%m-%d}")

        self._send(recipient, "Upcoming milestones - Goal Tracker", "\n".join(lines))

    def send_weekly_digest(self, recipient: Recipient, stats: Dict) -> None:
        body = "\n".join([
            f"Hi {recipient.name or recipient.email},",
            "",
            "Your week in numbers:",
            f"- Milestones completed: {stats['milestones_completed']}",
            f"- Active goals: {stats['active_goals']}",
            f"- Average progress: {stats['total_progress']}%",
        ])
        self._send(recipient, "Your weekly progress digest - Goal Tracker", body)

    def _send(self, recipient: Recipient, subject: str, body: str) -> None:
        send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [recipient.email], fail_silently=False)
        logger.info("Sent '%s' to user %s", subject, recipient.user_id)
