# apps/goals/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path('', views.goal_collection_view, name='goal_list'),
    path('<int:pk>/', views.goal_detail_view, name='goal_detail'),
    path('<int:pk>/archive/', views.goal_archive_view, name='goal_archive'),

    path('milestones/', views.milestone_create_view, name='milestone_create'),
    path('milestones/upcoming/', views.upcoming_milestones_view, name='milestone_upcoming'),
    path('milestones/goal/<int:goal_id>/', views.goal_milestones_view, name='goal_milestones'),
    path('milestones/<int:pk>/', views.milestone_detail_view, name='milestone_detail'),
    path('milestones/<int:pk>/toggle/', views.milestone_toggle_view, name='milestone_toggle'),

    path('progress/', views.progress_create_view, name='progress_create'),
    path('progress/weekly/', views.progress_weekly_view, name='progress_weekly'),
    path('progress/goal/<int:goal_id>/', views.progress_history_view, name='progress_history'),
    path('progress/<int:pk>/', views.progress_detail_view, name='progress_detail'),
]
