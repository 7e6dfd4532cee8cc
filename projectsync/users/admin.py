from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from projectsync.users.models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ["id", "username", "role", "is_active", "created_at"]
    list_filter = ["role", "is_active"]
    search_fields = ["username"]
    fieldsets = (
        *BaseUserAdmin.fieldsets,
        ("Project access", {"fields": ("role",)}),
    )
