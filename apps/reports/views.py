# apps/reports/views.py
from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET

from apps.goals.adapters.orm_repositories import DjangoGoalRepository, DjangoMilestoneRepository
from apps.goals.domain.exceptions import ValidationFailed
from apps.goals.views import api_view_errors
from .domain.services import AnalyticsService


def analytics_service() -> AnalyticsService:
    return AnalyticsService(DjangoGoalRepository(), DjangoMilestoneRepository())


@login_required
@require_GET
@api_view_errors
def overview_api_view(request):
    """Statystyki zbiorcze dla dashboardu (streak, średni postęp, nadchodzące terminy)."""
    data = analytics_service().get_overview(request.user.id, upcoming_days=settings.GOALS_UPCOMING_DAYS)
    return JsonResponse({'success': True, 'data': data})


@login_required
@require_GET
@api_view_errors
def monthly_api_view(request):
    try:
        months = int(request.GET.get('months', settings.GOALS_MONTHLY_STATS_MONTHS))
    except ValueError:
        raise ValidationFailed("months must be an integer")
    if not 1 <= months <= 60:
        raise ValidationFailed("months must be between 1 and 60")

    stats = analytics_service().get_monthly_stats(request.user.id, months=months)
    return JsonResponse({'success': True, 'data': {'monthly_stats': stats}})


@login_required
@require_GET
@api_view_errors
def categories_api_view(request):
    breakdown = analytics_service().get_category_breakdown(request.user.id)
    return JsonResponse({'success': True, 'data': {'category_breakdown': breakdown}})


@login_required
@require_GET
@api_view_errors
def trends_api_view(request):
    period = request.GET.get('period', 'week')
    trends = analytics_service().get_completion_trend(request.user.id, period=period)
    return JsonResponse({'success': True, 'data': {'trends': trends}})
