# apps/goals/ports/notifier.py
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List


@dataclass
class Recipient:
    user_id: int
    email: str
    name: str = ""


class INotifier(ABC):
    @abstractmethod
    def send_milestone_reminder(self, recipient: Recipient, milestones: List[Dict]) -> None:
        """milestones: lista {title, due_date, goal_title}."""
        pass

    @abstractmethod
    def send_weekly_digest(self, recipient: Recipient, stats: Dict) -> None:
        """stats: {milestones_completed, active_goals, total_progress}."""
        pass
