# apps/goals/models.py
from django.db import models
from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from apps.goals.domain.entities import GoalCategory, GoalPriority, GoalStatus


class Goal(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='goals')
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, max_length=2000)

    # TextChoices dla Admina, mapowane na Enumy domenowe
    class CategoryChoices(models.TextChoices):
        HEALTH = GoalCategory.HEALTH.value, 'Health'
        CAREER = GoalCategory.CAREER.value, 'Career'
        EDUCATION = GoalCategory.EDUCATION.value, 'Education'
        FINANCE = GoalCategory.FINANCE.value, 'Finance'
        PERSONAL = GoalCategory.PERSONAL.value, 'Personal'
        OTHER = GoalCategory.OTHER.value, 'Other'

    class PriorityChoices(models.TextChoices):
        LOW = GoalPriority.LOW.value, 'Low'
        MEDIUM = GoalPriority.MEDIUM.value, 'Medium'
        HIGH = GoalPriority.HIGH.value, 'High'

    class StatusChoices(models.TextChoices):
        NOT_STARTED = GoalStatus.NOT_STARTED.value, 'Not started'
        IN_PROGRESS = GoalStatus.IN_PROGRESS.value, 'In progress'
        COMPLETED = GoalStatus.COMPLETED.value, 'Completed'
        ARCHIVED = GoalStatus.ARCHIVED.value, 'Archived'

    category = models.CharField(max_length=20, choices=CategoryChoices.choices, default=CategoryChoices.OTHER)
    priority = models.CharField(max_length=10, choices=PriorityChoices.choices, default=PriorityChoices.MEDIUM)
    target_date = models.DateField()

    status = models.CharField(max_length=20, choices=StatusChoices.choices, default=StatusChoices.NOT_STARTED)
    progress = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(100)],
        help_text="Postęp w procentach (0-100), wyliczany z kamieni milowych"
    )
    completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'status'], name='goals_goal_user_id_6c3f2a_idx'),
            models.Index(fields=['user', 'category'], name='goals_goal_user_id_9e41b7_idx'),
            models.Index(fields=['target_date'], name='goals_goal_target__4d8a51_idx'),
        ]

    def __str__(self):
        return self.title


class Milestone(models.Model):
    goal = models.ForeignKey(Goal, on_delete=models.CASCADE, related_name='milestones')
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True, max_length=1000)
    due_date = models.DateField()

    completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)
    order = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['order', 'due_date', 'id']
        indexes = [
            models.Index(fields=['goal', 'order'], name='goals_miles_goal_id_2b7e90_idx'),
            models.Index(fields=['due_date', 'completed'], name='goals_miles_due_dat_8f0c13_idx'),
        ]

    def __str__(self):
        return self.title


class ProgressEntry(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='progress_entries')
    goal = models.ForeignKey(Goal, on_delete=models.CASCADE, related_name='progress_entries')

    week_start_date = models.DateField()
    week_end_date = models.DateField()

    notes = models.TextField(blank=True, max_length=1000)
    progress_percentage = models.PositiveSmallIntegerField(
        default=0, validators=[MinValueValidator(0), MaxValueValidator(100)]
    )
    hours_spent = models.FloatField(default=0, validators=[MinValueValidator(0)])

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = 'progress entries'
        ordering = ['-week_start_date']
        # Jeden wpis na tydzień - pilnuje tego baza, nie sprawdzenie przed insertem
        constraints = [
            models.UniqueConstraint(
                fields=['user', 'goal', 'week_start_date'],
                name='unique_weekly_progress_entry'
            ),
        ]

    def __str__(self):
        return f"{self.goal} - {self.week_start_date}"
