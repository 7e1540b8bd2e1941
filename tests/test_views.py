import json

import pytest
from django.urls import reverse

from apps.goals.models import Goal

pytestmark = pytest.mark.django_db


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username="ola", email="ola@example.com", password="x")


@pytest.fixture
def api(client, user):
    client.force_login(user)
    return client


def send(api, method, url, payload=None):
    return getattr(api, method)(url, data=json.dumps(payload or {}), content_type='application/json')


def create_goal(api, **overrides):
    payload = {'title': "Learn to swim", 'target_date': "2026-12-31", 'category': 'health'}
    payload.update(overrides)
    response = send(api, 'post', reverse('goal_list'), payload)
    assert response.status_code == 201, response.content
    return response.json()['data']['goal']


def create_milestone(api, goal_id, title="Step", due_date="2026-06-01"):
    response = send(api, 'post', reverse('milestone_create'),
                    {'goal_id': goal_id, 'title': title, 'due_date': due_date})
    assert response.status_code == 201, response.content
    return response.json()['data']['milestone']


class TestAuth:
    def test_anonymous_is_redirected(self, client):
        assert client.get(reverse('goal_list')).status_code == 302


class TestGoalApi:
    def test_create_and_list(self, api):
        goal = create_goal(api)
        assert goal['status'] == 'not-started'
        assert goal['progress'] == 0

        data = api.get(reverse('goal_list'), {'category': 'health'}).json()
        assert data['count'] == 1
        assert data['data']['goals'][0]['milestones'] == []

    def test_invalid_payload(self, api):
        response = send(api, 'post', reverse('goal_list'), {'title': "No date"})
        assert response.status_code == 400
        assert 'target_date' in response.json()['errors']

    def test_malformed_json(self, api):
        response = api.post(reverse('goal_list'), data="{not json", content_type='application/json')
        assert response.status_code == 400
        assert response.json()['success'] is False

    def test_unknown_goal(self, api):
        assert api.get(reverse('goal_detail', args=[999])).status_code == 404

    def test_foreign_goal(self, api, django_user_model):
        other = django_user_model.objects.create_user(username="ewa", password="x")
        goal = Goal.objects.create(user=other, title="Private", target_date="2026-12-31")
        response = api.get(reverse('goal_detail', args=[goal.id]))
        assert response.status_code == 403

    def test_patch_and_archive(self, api):
        goal = create_goal(api)
        response = send(api, 'patch', reverse('goal_detail', args=[goal['id']]), {'priority': 'high'})
        assert response.json()['data']['goal']['priority'] == 'high'

        response = send(api, 'patch', reverse('goal_detail', args=[goal['id']]), {'status': 'archived'})
        assert response.status_code == 400

        response = api.post(reverse('goal_archive', args=[goal['id']]))
        assert response.json()['data']['goal']['status'] == 'archived'

    def test_delete(self, api):
        goal = create_goal(api)
        create_milestone(api, goal['id'])
        assert api.delete(reverse('goal_detail', args=[goal['id']])).status_code == 200
        assert not Goal.objects.exists()


class TestMilestoneApi:
    def test_toggle_updates_goal(self, api):
        goal = create_goal(api)
        first = create_milestone(api, goal['id'], "One")
        create_milestone(api, goal['id'], "Two")

        response = api.post(reverse('milestone_toggle', args=[first['id']]))
        assert response.status_code == 200
        assert response.json()['data']['milestone']['completed'] is True

        detail = api.get(reverse('goal_detail', args=[goal['id']])).json()['data']['goal']
        assert (detail['progress'], detail['status']) == (50, 'in-progress')
        assert detail['completed_milestones'] == 1

    def test_due_date_after_target(self, api):
        goal = create_goal(api, target_date="2026-05-01")
        response = send(api, 'post', reverse('milestone_create'),
                        {'goal_id': goal['id'], 'title': "Late", 'due_date': "2026-06-01"})
        assert response.status_code == 400

    def test_list_for_goal(self, api):
        goal = create_goal(api)
        create_milestone(api, goal['id'])
        data = api.get(reverse('goal_milestones', args=[goal['id']])).json()
        assert data['count'] == 1


class TestProgressApi:
    def test_duplicate_week(self, api):
        goal = create_goal(api)
        payload = {'goal_id': goal['id'], 'week_start_date': "2026-03-15", 'week_end_date': "2026-03-21",
                   'hours_spent': 3}
        assert send(api, 'post', reverse('progress_create'), payload).status_code == 201

        response = send(api, 'post', reverse('progress_create'), payload)
        assert response.status_code == 400
        assert "already logged" in response.json()['message']

    def test_history(self, api):
        goal = create_goal(api)
        send(api, 'post', reverse('progress_create'),
             {'goal_id': goal['id'], 'week_start_date': "2026-03-15", 'week_end_date': "2026-03-21"})
        data = api.get(reverse('progress_history', args=[goal['id']])).json()
        assert data['data']['progress_history'][0]['week_start_date'] == "2026-03-15"

    @pytest.mark.parametrize("limit", ["-1", "0", "101", "abc"])
    def test_history_limit_out_of_range(self, api, limit):
        goal = create_goal(api)
        response = api.get(reverse('progress_history', args=[goal['id']]), {'limit': limit})
        assert response.status_code == 400
        assert response.json()['success'] is False


class TestUpcomingApi:
    @pytest.mark.parametrize("days", ["-1", "366", "99999999999", "soon"])
    def test_days_out_of_range(self, api, days):
        response = api.get(reverse('milestone_upcoming'), {'days': days})
        assert response.status_code == 400

    def test_default_window(self, api):
        response = api.get(reverse('milestone_upcoming'))
        assert response.status_code == 200
        assert response.json()['count'] == 0


class TestAnalyticsApi:
    def test_overview(self, api):
        create_goal(api)
        data = api.get(reverse('analytics_overview')).json()['data']
        assert data['total_goals'] == 1
        assert data['current_streak'] == 0

    def test_trends_unknown_period(self, api):
        response = api.get(reverse('analytics_trends'), {'period': 'decade'})
        assert response.status_code == 400

    def test_monthly_bounds(self, api):
        assert api.get(reverse('analytics_monthly'), {'months': 0}).status_code == 400
        data = api.get(reverse('analytics_monthly'), {'months': 2}).json()
        assert len(data['data']['monthly_stats']) == 2

    def test_categories(self, api):
        create_goal(api)
        rows = api.get(reverse('analytics_categories')).json()['data']['category_breakdown']
        assert rows[0] == {'category': 'health', 'total': 1, 'active': 1, 'completed': 0, 'avg_progress': 0}
