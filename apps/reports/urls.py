# apps/reports/urls.py
from django.urls import path
from . import views

urlpatterns = [
    path('overview/', views.overview_api_view, name='analytics_overview'),
    path('monthly/', views.monthly_api_view, name='analytics_monthly'),
    path('categories/', views.categories_api_view, name='analytics_categories'),
    path('trends/', views.trends_api_view, name='analytics_trends'),
]
