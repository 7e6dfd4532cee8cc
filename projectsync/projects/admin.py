from django.contrib import admin

from projectsync.projects import models


@admin.register(models.Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "status", "priority", "due_date", "created_by"]
    search_fields = ["title", "description", "created_by"]
    list_filter = ["status", "priority", "created_at"]
