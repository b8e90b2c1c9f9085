from django.contrib import admin

from . import services
from .models import Task


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ("title", "status", "priority", "room", "assigned_to", "due_date")
    list_filter = ("status", "priority")
    search_fields = ("title", "description", "assigned_to")
    readonly_fields = ("completed_at",)

    def save_model(self, request, obj, form, change):
        services.stamp_completion(obj)
        super().save_model(request, obj, form, change)
