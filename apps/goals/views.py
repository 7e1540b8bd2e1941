# apps/goals/views.py
import json
from functools import wraps

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_http_methods

from apps.goals.adapters.orm_repositories import (
    DjangoGoalRepository, DjangoMilestoneRepository, DjangoProgressEntryRepository,
)
from apps.goals.application.use_cases import GoalService, MilestoneService, ProgressLogService
from apps.goals.domain.exceptions import Forbidden, NotFound, ValidationFailed
from .forms import (
    GoalFilterForm, GoalForm, GoalUpdateForm, MilestoneForm, MilestoneUpdateForm,
    ProgressEntryForm, ProgressEntryUpdateForm,
)
from .serializers import goal_detail_to_dict, goal_to_dict, milestone_to_dict, progress_entry_to_dict


def api_view_errors(view):
    """Tłumaczy wyjątki domenowe na odpowiedzi JSON z właściwym kodem HTTP."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except NotFound as exc:
            return JsonResponse({'success': False, 'message': str(exc)}, status=404)
        except Forbidden as exc:
            return JsonResponse({'success': False, 'message': str(exc)}, status=403)
        except ValidationFailed as exc:
            return JsonResponse({'success': False, 'message': ' '.join(exc.messages)}, status=400)
    return wrapper


def parse_json(request) -> dict:
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except json.JSONDecodeError:
        raise ValidationFailed("Request body is not valid JSON")
    if not isinstance(payload, dict):
        raise ValidationFailed("Request body must be a JSON object")
    return payload


def validated(form):
    if not form.is_valid():
        return JsonResponse({
            'success': False,
            'message': 'Validation failed',
            'errors': form.errors.get_json_data(),
        }, status=400)
    return None


def goal_service() -> GoalService:
    return GoalService(DjangoGoalRepository(), DjangoMilestoneRepository(), DjangoProgressEntryRepository())


def milestone_service() -> MilestoneService:
    return MilestoneService(DjangoGoalRepository(), DjangoMilestoneRepository())


def progress_service() -> ProgressLogService:
    return ProgressLogService(DjangoGoalRepository(), DjangoProgressEntryRepository())


# ----------------------------------------------------
# Cele
# ----------------------------------------------------

@login_required
@require_http_methods(['GET', 'POST'])
@api_view_errors
def goal_collection_view(request):
    service = goal_service()

    if request.method == 'POST':
        form = GoalForm(parse_json(request))
        error = validated(form)
        if error:
            return error
        goal = service.create_goal(form.to_input(request.user.id))
        return JsonResponse({'success': True, 'message': 'Goal created successfully',
                             'data': {'goal': goal_to_dict(goal)}}, status=201)

    form = GoalFilterForm(request.GET)
    error = validated(form)
    if error:
        return error
    goals = service.list_goals(request.user.id, form.to_criteria())
    return JsonResponse({'success': True, 'count': len(goals),
                         'data': {'goals': [goal_detail_to_dict(d) for d in goals]}})


@login_required
@require_http_methods(['GET', 'PUT', 'PATCH', 'DELETE'])
@api_view_errors
def goal_detail_view(request, pk):
    service = goal_service()

    if request.method == 'GET':
        detail = service.get_goal(request.user.id, pk)
        return JsonResponse({'success': True, 'data': {'goal': goal_detail_to_dict(detail)}})

    if request.method == 'DELETE':
        service.delete_goal(request.user.id, pk)
        return JsonResponse({'success': True, 'message': 'Goal and associated milestones deleted successfully'})

    form = GoalUpdateForm(parse_json(request))
    error = validated(form)
    if error:
        return error
    service.update_goal(request.user.id, pk, form.to_input())
    detail = service.get_goal(request.user.id, pk)
    return JsonResponse({'success': True, 'message': 'Goal updated successfully',
                         'data': {'goal': goal_detail_to_dict(detail)}})


@login_required
@require_http_methods(['PATCH', 'POST'])
@api_view_errors
def goal_archive_view(request, pk):
    goal = goal_service().archive_goal(request.user.id, pk)
    return JsonResponse({'success': True, 'message': 'Goal archived successfully',
                         'data': {'goal': goal_to_dict(goal)}})


# ----------------------------------------------------
# Kamienie milowe
# ----------------------------------------------------

@login_required
@require_http_methods(['POST'])
@api_view_errors
def milestone_create_view(request):
    form = MilestoneForm(parse_json(request))
    error = validated(form)
    if error:
        return error
    milestone = milestone_service().create(request.user.id, form.to_input())
    return JsonResponse({'success': True, 'message': 'Milestone created successfully',
                         'data': {'milestone': milestone_to_dict(milestone)}}, status=201)


@login_required
@require_GET
@api_view_errors
def goal_milestones_view(request, goal_id):
    milestones = milestone_service().list_for_goal(request.user.id, goal_id)
    return JsonResponse({'success': True, 'count': len(milestones),
                         'data': {'milestones': [milestone_to_dict(m) for m in milestones]}})


@login_required
@require_GET
@api_view_errors
def upcoming_milestones_view(request):
    try:
        days = int(request.GET.get('days', settings.GOALS_UPCOMING_DAYS))
    except ValueError:
        raise ValidationFailed("days must be an integer")
    if not 0 <= days <= 365:
        raise ValidationFailed("days must be between 0 and 365")

    found = milestone_service().upcoming(request.user.id, days=days)
    items = []
    for milestone, goal in found:
        item = milestone_to_dict(milestone)
        item['goal'] = {'id': goal.id, 'title': goal.title, 'category': goal.category.value}
        items.append(item)
    return JsonResponse({'success': True, 'count': len(items), 'data': {'milestones': items}})


@login_required
@require_http_methods(['PUT', 'PATCH', 'DELETE'])
@api_view_errors
def milestone_detail_view(request, pk):
    service = milestone_service()

    if request.method == 'DELETE':
        service.delete(request.user.id, pk)
        return JsonResponse({'success': True, 'message': 'Milestone deleted successfully'})

    form = MilestoneUpdateForm(parse_json(request))
    error = validated(form)
    if error:
        return error
    milestone = service.update(request.user.id, pk, form.to_input())
    return JsonResponse({'success': True, 'message': 'Milestone updated successfully',
                         'data': {'milestone': milestone_to_dict(milestone)}})


@login_required
@require_http_methods(['PATCH', 'POST'])
@api_view_errors
def milestone_toggle_view(request, pk):
    milestone = milestone_service().toggle(request.user.id, pk)
    state = 'complete' if milestone.completed else 'incomplete'
    return JsonResponse({'success': True, 'message': f'Milestone marked as {state}',
                         'data': {'milestone': milestone_to_dict(milestone)}})


# ----------------------------------------------------
# Tygodniowy dziennik postępu
# ----------------------------------------------------

@login_required
@require_http_methods(['POST'])
@api_view_errors
def progress_create_view(request):
    form = ProgressEntryForm(parse_json(request))
    error = validated(form)
    if error:
        return error
    entry = progress_service().log_progress(request.user.id, form.to_input())
    return JsonResponse({'success': True, 'message': 'Progress logged successfully',
                         'data': {'progress': progress_entry_to_dict(entry)}}, status=201)


@login_required
@require_GET
@api_view_errors
def progress_history_view(request, goal_id):
    try:
        limit = int(request.GET.get('limit', settings.GOALS_PROGRESS_HISTORY_LIMIT))
    except ValueError:
        raise ValidationFailed("limit must be an integer")
    if not 1 <= limit <= 100:
        raise ValidationFailed("limit must be between 1 and 100")

    history = progress_service().history(request.user.id, goal_id, limit=limit)
    return JsonResponse({'success': True, 'count': len(history),
                         'data': {'progress_history': [progress_entry_to_dict(e) for e in history]}})


@login_required
@require_GET
@api_view_errors
def progress_weekly_view(request):
    week_start, week_end, entries = progress_service().current_week(request.user.id)
    return JsonResponse({'success': True, 'count': len(entries), 'data': {
        'weekly_progress': [progress_entry_to_dict(e) for e in entries],
        'week_start': week_start.isoformat(),
        'week_end': week_end.isoformat(),
    }})


@login_required
@require_http_methods(['PUT', 'PATCH', 'DELETE'])
@api_view_errors
def progress_detail_view(request, pk):
    service = progress_service()

    if request.method == 'DELETE':
        service.delete(request.user.id, pk)
        return JsonResponse({'success': True, 'message': 'Progress entry deleted successfully'})

    form = ProgressEntryUpdateForm(parse_json(request))
    error = validated(form)
    if error:
        return error
    entry = service.update(request.user.id, pk, form.to_input())
    return JsonResponse({'success': True, 'message': 'Progress updated successfully',
                         'data': {'progress': progress_entry_to_dict(entry)}})
