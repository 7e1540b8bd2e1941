from apps.goals.application.use_cases import GoalDetail
from apps.goals.domain.entities import GoalEntity, MilestoneEntity, ProgressEntryEntity


def _iso(value):
    return value.isoformat() if value else None


def goal_to_dict(goal: GoalEntity) -> dict:
    return {
        'id': goal.id,
        'user_id': goal.user_id,
        'title': goal.title,
        'description': goal.description,
        'category': goal.category.value,
        'priority': goal.priority.value,
        'target_date': _iso(goal.target_date),
        'status': goal.status.value,
        'progress': goal.progress,
        'completed_at': _iso(goal.completed_at),
        'created_at': _iso(goal.created_at),
    }


def goal_detail_to_dict(detail: GoalDetail) -> dict:
    data = goal_to_dict(detail.goal)
    data['milestones'] = [milestone_to_dict(m) for m in detail.milestones]
    data['completed_milestones'] = detail.completed_milestones
    return data


def milestone_to_dict(milestone: MilestoneEntity) -> dict:
    return {
        'id': milestone.id,
        'goal_id': milestone.goal_id,
        'title': milestone.title,
        'description': milestone.description,
        'due_date': _iso(milestone.due_date),
        'completed': milestone.completed,
        'completed_at': _iso(milestone.completed_at),
        'order': milestone.order,
    }


def progress_entry_to_dict(entry: ProgressEntryEntity) -> dict:
    return {
        'id': entry.id,
        'goal_id': entry.goal_id,
        'week_start_date': _iso(entry.week_start_date),
        'week_end_date': _iso(entry.week_end_date),
        'notes': entry.notes,
        'progress_percentage': entry.progress_percentage,
        'hours_spent': entry.hours_spent,
    }
