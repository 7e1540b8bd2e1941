from django.contrib import admin
from .models import Goal, Milestone, ProgressEntry


class MilestoneInline(admin.TabularInline):
    # Tylko podgląd: zmiany kamieni milowych idą przez MilestoneService (przeliczenie postępu)
    model = Milestone
    extra = 0
    can_delete = False
    fields = ('title', 'due_date', 'order', 'completed', 'completed_at')
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    list_display = ('title', 'user', 'category', 'priority', 'status', 'progress', 'target_date')
    list_filter = ('status', 'category', 'priority')
    search_fields = ('title', 'description')
    readonly_fields = ('status', 'progress', 'completed_at')
    inlines = [MilestoneInline]


@admin.register(ProgressEntry)
class ProgressEntryAdmin(admin.ModelAdmin):
    list_display = ('goal', 'user', 'week_start_date', 'progress_percentage', 'hours_spent')
    list_filter = ('week_start_date',)
