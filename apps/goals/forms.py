from django import forms

from apps.goals.application.use_cases import (
    CreateGoalInput, CreateMilestoneInput, LogProgressInput, UpdateGoalInput,
    UpdateMilestoneInput, UpdateProgressInput,
)
from apps.goals.domain.entities import GoalCategory, GoalPriority, GoalStatus
from apps.goals.ports.repositories import SORT_OPTIONS, GoalFilterCriteria
from .models import Goal


# Formularze walidują payload na granicy i zamieniają go na typowane DTO.
# Usługi domenowe nigdy nie widzą surowych słowników z żądania.

class GoalForm(forms.Form):
    title = forms.CharField(max_length=200, strip=True)
    description = forms.CharField(max_length=2000, required=False)
    category = forms.ChoiceField(choices=Goal.CategoryChoices.choices, required=False)
    priority = forms.ChoiceField(choices=Goal.PriorityChoices.choices, required=False)
    target_date = forms.DateField()

    def to_input(self, user_id: int) -> CreateGoalInput:
        data = self.cleaned_data
        return CreateGoalInput(
            user_id=user_id,
            title=data['title'],
            target_date=data['target_date'],
            description=data['description'],
            category=GoalCategory(data['category'] or GoalCategory.OTHER.value),
            priority=GoalPriority(data['priority'] or GoalPriority.MEDIUM.value),
        )


class GoalUpdateForm(forms.Form):
    title = forms.CharField(max_length=200, required=False)
    description = forms.CharField(max_length=2000, required=False)
    category = forms.ChoiceField(choices=Goal.CategoryChoices.choices, required=False)
    priority = forms.ChoiceField(choices=Goal.PriorityChoices.choices, required=False)
    target_date = forms.DateField(required=False)
    status = forms.ChoiceField(choices=Goal.StatusChoices.choices, required=False)

    def to_input(self) -> UpdateGoalInput:
        data = self.cleaned_data
        # Pole nieobecne w payloadzie = brak zmiany
        sent = set(self.data)
        return UpdateGoalInput(
            title=data['title'] if 'title' in sent else None,
            description=data['description'] if 'description' in sent else None,
            category=GoalCategory(data['category']) if data['category'] else None,
            priority=GoalPriority(data['priority']) if data['priority'] else None,
            target_date=data['target_date'],
            status=GoalStatus(data['status']) if data['status'] else None,
        )


class GoalFilterForm(forms.Form):
    status = forms.ChoiceField(choices=Goal.StatusChoices.choices, required=False)
    category = forms.ChoiceField(choices=Goal.CategoryChoices.choices, required=False)
    search = forms.CharField(required=False)
    sort = forms.ChoiceField(choices=[(s, s) for s in SORT_OPTIONS], required=False)

    def to_criteria(self) -> GoalFilterCriteria:
        data = self.cleaned_data
        return GoalFilterCriteria(
            status=GoalStatus(data['status']) if data['status'] else None,
            category=GoalCategory(data['category']) if data['category'] else None,
            search=data['search'],
            sort=data['sort'] or 'recent',
        )


class MilestoneForm(forms.Form):
    goal_id = forms.IntegerField(min_value=1)
    title = forms.CharField(max_length=200)
    description = forms.CharField(max_length=1000, required=False)
    due_date = forms.DateField()
    order = forms.IntegerField(required=False)

    def to_input(self) -> CreateMilestoneInput:
        data = self.cleaned_data
        return CreateMilestoneInput(
            goal_id=data['goal_id'],
            title=data['title'],
            due_date=data['due_date'],
            description=data['description'],
            order=data['order'] or 0,
        )


class MilestoneUpdateForm(forms.Form):
    title = forms.CharField(max_length=200, required=False)
    description = forms.CharField(max_length=1000, required=False)
    due_date = forms.DateField(required=False)
    order = forms.IntegerField(required=False)

    def to_input(self) -> UpdateMilestoneInput:
        data = self.cleaned_data
        sent = set(self.data)
        return UpdateMilestoneInput(
            title=data['title'] if 'title' in sent else None,
            description=data['description'] if 'description' in sent else None,
            due_date=data['due_date'],
            order=data['order'],
        )


class ProgressEntryForm(forms.Form):
    goal_id = forms.IntegerField(min_value=1)
    week_start_date = forms.DateField()
    week_end_date = forms.DateField()
    notes = forms.CharField(max_length=1000, required=False)
    progress_percentage = forms.IntegerField(min_value=0, max_value=100, required=False)
    hours_spent = forms.FloatField(min_value=0, required=False)

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get('week_start_date'), cleaned.get('week_end_date')
        if start and end and end < start:
            raise forms.ValidationError("Week end date cannot be before week start date")
        return cleaned

    def to_input(self) -> LogProgressInput:
        data = self.cleaned_data
        return LogProgressInput(
            goal_id=data['goal_id'],
            week_start_date=data['week_start_date'],
            week_end_date=data['week_end_date'],
            notes=data['notes'],
            progress_percentage=data['progress_percentage'] or 0,
            hours_spent=data['hours_spent'] or 0.0,
        )


class ProgressEntryUpdateForm(forms.Form):
    notes = forms.CharField(max_length=1000, required=False)
    progress_percentage = forms.IntegerField(min_value=0, max_value=100, required=False)
    hours_spent = forms.FloatField(min_value=0, required=False)

    def to_input(self) -> UpdateProgressInput:
        data = self.cleaned_data
        return UpdateProgressInput(
            notes=data['notes'] if 'notes' in self.data else None,
            progress_percentage=data['progress_percentage'],
            hours_spent=data['hours_spent'],
        )
