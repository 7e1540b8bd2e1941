# apps/goals/ports/repositories.py
from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional

from apps.goals.domain.entities import (
    GoalCategory, GoalEntity, GoalStatus, MilestoneEntity, ProgressEntryEntity,
)


SORT_OPTIONS = ('recent', 'dueDate', 'priority', 'progress')


@dataclass
class GoalFilterCriteria:
    status: Optional[GoalStatus] = None
    category: Optional[GoalCategory] = None
    search: str = ""
    sort: str = 'recent'


class IGoalRepository(ABC):
    @abstractmethod
    def get_by_id(self, goal_id: int) -> Optional[GoalEntity]:
        pass

    @abstractmethod
    def find_all_by_user(self, user_id: int,
                         criteria: Optional[GoalFilterCriteria] = None) -> List[GoalEntity]:
        pass

    @abstractmethod
    def save(self, goal: GoalEntity) -> GoalEntity:
        """Zapisuje (tworzy lub aktualizuje) cel i zwraca encję z ID."""
        pass

    @abstractmethod
    def delete(self, goal_id: int) -> None:
        pass

    @abstractmethod
    def lock(self, goal_id: int) -> AbstractContextManager:
        """
        Sekcja krytyczna dla jednego celu: odczyt kamieni milowych, przeliczenie
        i zapis celu wykonują się atomowo. Błąd wewnątrz wycofuje wszystkie zmiany.
        """
        pass


class IMilestoneRepository(ABC):
    @abstractmethod
    def get_by_id(self, milestone_id: int) -> Optional[MilestoneEntity]:
        pass

    @abstractmethod
    def find_all_by_goal(self, goal_id: int) -> List[MilestoneEntity]:
        """Kamienie milowe celu posortowane po (order, due_date)."""
        pass

    @abstractmethod
    def find_all_by_goals(self, goal_ids: Iterable[int]) -> List[MilestoneEntity]:
        pass

    @abstractmethod
    def save(self, milestone: MilestoneEntity) -> MilestoneEntity:
        pass

    @abstractmethod
    def delete(self, milestone_id: int) -> None:
        pass

    @abstractmethod
    def delete_all_by_goal(self, goal_id: int) -> int:
        """Usuwa wszystkie kamienie milowe celu, zwraca ich liczbę."""
        pass


class IProgressEntryRepository(ABC):
    @abstractmethod
    def get_by_id(self, entry_id: int) -> Optional[ProgressEntryEntity]:
        pass

    @abstractmethod
    def add(self, entry: ProgressEntryEntity) -> ProgressEntryEntity:
        """
        Tworzy wpis. Unikalność (user, goal, week_start_date) pilnuje magazyn;
        duplikat kończy się ValidationFailed i niczego nie zapisuje.
        """
        pass

    @abstractmethod
    def save(self, entry: ProgressEntryEntity) -> ProgressEntryEntity:
        """Aktualizuje istniejący wpis."""
        pass

    @abstractmethod
    def delete(self, entry_id: int) -> None:
        pass

    @abstractmethod
    def delete_all_by_goal(self, goal_id: int) -> int:
        pass

    @abstractmethod
    def find_history(self, goal_id: int, limit: int = 10) -> List[ProgressEntryEntity]:
        """Najnowsze wpisy celu (malejąco po week_start_date)."""
        pass

    @abstractmethod
    def find_by_user_between(self, user_id: int, start: date, end: date) -> List[ProgressEntryEntity]:
        """Wpisy użytkownika z week_start_date w przedziale [start, end]."""
        pass
