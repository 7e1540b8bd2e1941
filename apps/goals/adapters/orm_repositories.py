# apps/goals/adapters/orm_repositories.py
from contextlib import contextmanager
from datetime import date
from typing import Iterable, List, Optional

from django.db import IntegrityError, transaction

from apps.goals.domain.entities import (
    GoalCategory, GoalEntity, GoalPriority, GoalStatus, MilestoneEntity, ProgressEntryEntity,
)
from apps.goals.domain.exceptions import ValidationFailed
from apps.goals.filters import GoalFilter
from apps.goals.models import Goal as GoalModel, Milestone as MilestoneModel, ProgressEntry as ProgressEntryModel
from apps.goals.ports.repositories import (
    GoalFilterCriteria, IGoalRepository, IMilestoneRepository, IProgressEntryRepository,
)


class DjangoGoalRepository(IGoalRepository):
    def to_entity(self, model: GoalModel) -> GoalEntity:
        """Konwertuje Model Django -> Czystą Encję."""
        return GoalEntity(
            id=model.id,
            user_id=model.user_id,
            title=model.title,
            description=model.description,
            category=GoalCategory(model.category),
            priority=GoalPriority(model.priority),
            target_date=model.target_date,
            status=GoalStatus(model.status),
            progress=model.progress,
            completed_at=model.completed_at,
            created_at=model.created_at,
        )

    def get_by_id(self, goal_id: int) -> Optional[GoalEntity]:
        try:
            return self.to_entity(GoalModel.objects.get(id=goal_id))
        except GoalModel.DoesNotExist:
            return None

    def find_all_by_user(self, user_id: int,
                         criteria: Optional[GoalFilterCriteria] = None) -> List[GoalEntity]:
        criteria = criteria or GoalFilterCriteria()
        data = {
            'status': criteria.status.value if criteria.status else '',
            'category': criteria.category.value if criteria.category else '',
            'search': criteria.search,
            'sort': criteria.sort,
        }
        qs = GoalFilter(data=data, queryset=GoalModel.objects.filter(user_id=user_id)).qs
        return [self.to_entity(g) for g in qs]

    def save(self, goal: GoalEntity) -> GoalEntity:
        data = {
            'title': goal.title,
            'description': goal.description,
            'category': goal.category.value,
            'priority': goal.priority.value,
            'target_date': goal.target_date,
            'status': goal.status.value,
            'progress': goal.progress,
            'completed_at': goal.completed_at,
        }

        if goal.id:
            obj = GoalModel.objects.get(id=goal.id)
            for field, value in data.items():
                setattr(obj, field, value)
            obj.save()
        else:
            obj = GoalModel.objects.create(user_id=goal.user_id, **data)

        return self.to_entity(obj)

    def delete(self, goal_id: int) -> None:
        GoalModel.objects.filter(id=goal_id).delete()

    @contextmanager
    def lock(self, goal_id: int):
        # Blokada wiersza celu do końca transakcji; wyjątek = rollback całości
        with transaction.atomic():
            list(GoalModel.objects.select_for_update().filter(id=goal_id))
            yield


class DjangoMilestoneRepository(IMilestoneRepository):
    def to_entity(self, model: MilestoneModel) -> MilestoneEntity:
        return MilestoneEntity(
            id=model.id,
            goal_id=model.goal_id,
            title=model.title,
            description=model.description,
            due_date=model.due_date,
            completed=model.completed,
            completed_at=model.completed_at,
            order=model.order,
        )

    def get_by_id(self, milestone_id: int) -> Optional[MilestoneEntity]:
        try:
            return self.to_entity(MilestoneModel.objects.get(id=milestone_id))
        except MilestoneModel.DoesNotExist:
            return None

    def find_all_by_goal(self, goal_id: int) -> List[MilestoneEntity]:
        qs = MilestoneModel.objects.filter(goal_id=goal_id).order_by('order', 'due_date', 'id')
        return [self.to_entity(m) for m in qs]

    def find_all_by_goals(self, goal_ids: Iterable[int]) -> List[MilestoneEntity]:
        qs = MilestoneModel.objects.filter(goal_id__in=list(goal_ids)).order_by('order', 'due_date', 'id')
        return [self.to_entity(m) for m in qs]

    def save(self, milestone: MilestoneEntity) -> MilestoneEntity:
        data = {
            'title': milestone.title,
            'description': milestone.description,
            'due_date': milestone.due_date,
            'completed': milestone.completed,
            'completed_at': milestone.completed_at,
            'order': milestone.order,
        }

        if milestone.id:
            MilestoneModel.objects.filter(id=milestone.id).update(**data)
            obj = MilestoneModel.objects.get(id=milestone.id)
        else:
            obj = MilestoneModel.objects.create(goal_id=milestone.goal_id, **data)

        return self.to_entity(obj)

    def delete(self, milestone_id: int) -> None:
        MilestoneModel.objects.filter(id=milestone_id).delete()

    def delete_all_by_goal(self, goal_id: int) -> int:
        deleted, _ = MilestoneModel.objects.filter(goal_id=goal_id).delete()
        return deleted


class DjangoProgressEntryRepository(IProgressEntryRepository):
    def to_entity(self, model: ProgressEntryModel) -> ProgressEntryEntity:
        return ProgressEntryEntity(
            id=model.id,
            user_id=model.user_id,
            goal_id=model.goal_id,
            week_start_date=model.week_start_date,
            week_end_date=model.week_end_date,
            notes=model.notes,
            progress_percentage=model.progress_percentage,
            hours_spent=model.hours_spent,
            created_at=model.created_at,
        )

    def get_by_id(self, entry_id: int) -> Optional[ProgressEntryEntity]:
        try:
            return self.to_entity(ProgressEntryModel.objects.get(id=entry_id))
        except ProgressEntryModel.DoesNotExist:
            return None

    def add(self, entry: ProgressEntryEntity) -> ProgressEntryEntity:
        try:
            # Osobny savepoint, żeby IntegrityError nie psuł zewnętrznej transakcji
            with transaction.atomic():
                obj = ProgressEntryModel.objects.create(
                    user_id=entry.user_id,
                    goal_id=entry.goal_id,
                    week_start_date=entry.week_start_date,
                    week_end_date=entry.week_end_date,
                    notes=entry.notes,
                    progress_percentage=entry.progress_percentage,
                    hours_spent=entry.hours_spent,
                )
        except IntegrityError as exc:
            raise ValidationFailed(
                "Progress already logged for this week. Use update instead."
            ) from exc
        return self.to_entity(obj)

    def save(self, entry: ProgressEntryEntity) -> ProgressEntryEntity:
        ProgressEntryModel.objects.filter(id=entry.id).update(
            notes=entry.notes,
            progress_percentage=entry.progress_percentage,
            hours_spent=entry.hours_spent,
        )
        return self.to_entity(ProgressEntryModel.objects.get(id=entry.id))

    def delete(self, entry_id: int) -> None:
        ProgressEntryModel.objects.filter(id=entry_id).delete()

    def delete_all_by_goal(self, goal_id: int) -> int:
        deleted, _ = ProgressEntryModel.objects.filter(goal_id=goal_id).delete()
        return deleted

    def find_history(self, goal_id: int, limit: int = 10) -> List[ProgressEntryEntity]:
        qs = ProgressEntryModel.objects.filter(goal_id=goal_id).order_by('-week_start_date')[:limit]
        return [self.to_entity(e) for e in qs]

    def find_by_user_between(self, user_id: int, start: date, end: date) -> List[ProgressEntryEntity]:
        qs = ProgressEntryModel.objects.filter(
            user_id=user_id,
            week_start_date__gte=start,
            week_start_date__lte=end,
        ).order_by('week_start_date')
        return [self.to_entity(e) for e in qs]
