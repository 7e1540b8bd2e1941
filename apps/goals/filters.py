import django_filters
from django.db.models import Case, IntegerField, Q, Value, When
from .models import Goal


class GoalFilter(django_filters.FilterSet):
    status = django_filters.ChoiceFilter(choices=Goal.StatusChoices.choices)
    category = django_filters.ChoiceFilter(choices=Goal.CategoryChoices.choices)
    search = django_filters.CharFilter(method='filter_search', label="Tytuł lub opis zawiera")
    sort = django_filters.ChoiceFilter(
        method='filter_sort',
        choices=[
            ('recent', 'Najnowsze'),
            ('dueDate', 'Termin'),
            ('priority', 'Priorytet'),
            ('progress', 'Postęp'),
        ],
    )

    class Meta:
        model = Goal
        fields = ['status', 'category']

    def filter_search(self, queryset, name, value):
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))

    def filter_sort(self, queryset, name, value):
        if value == 'dueDate':
            return queryset.order_by('target_date', 'id')
        if value == 'priority':
            # Tekstowy priorytet sortujemy wg rangi, nie alfabetycznie
            rank = Case(
                When(priority=Goal.PriorityChoices.HIGH, then=Value(0)),
                When(priority=Goal.PriorityChoices.MEDIUM, then=Value(1)),
                default=Value(2),
                output_field=IntegerField(),
            )
            return queryset.annotate(priority_rank=rank).order_by('priority_rank', 'id')
        if value == 'progress':
            return queryset.order_by('-progress', 'id')
        return queryset.order_by('-created_at', '-id')
