# goal_tracker/urls.py
from django.contrib import admin
from django.urls import path, include


urlpatterns = [
    path('admin/', admin.site.urls),
    # Tutaj podpinamy nasze aplikacje:
    path('api/goals/', include('apps.goals.urls')),
    path('api/analytics/', include('apps.reports.urls')),
]
