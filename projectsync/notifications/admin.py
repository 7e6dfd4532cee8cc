from django.contrib import admin

from projectsync.notifications import models


@admin.register(models.Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ["id", "message", "notification_type", "project_id", "is_read"]
    search_fields = ["message", "notification_type"]
    list_filter = ["notification_type", "is_read", "created_at"]
